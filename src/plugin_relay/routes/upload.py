"""Authenticated image upload relay."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..dependencies import UploadForm, get_upload_relay, read_upload_form
from ..errors import RelayError
from ..logging import get_logger
from ..relay import UploadRelay
from ..responses import upload_error_response
from ..schemas import UploadResponse
from ..security import require_upload_token

LOGGER = get_logger(__name__)

router = APIRouter(tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    dependencies=[Depends(require_upload_token)],
)
async def upload_image(
    form: UploadForm = Depends(read_upload_form),
    relay: UploadRelay = Depends(get_upload_relay),
) -> Any:
    """
    Upload one image with its metadata to the asset store.

    Multipart fields:
    - image: the image file (required)
    - metadata: JSON object of string values (optional)
    - filename: name used to derive the public id (optional)
    """
    try:
        result = await relay.upload(form.image, form.metadata, form.filename)
    except RelayError as exc:
        LOGGER.warning("Upload failed", status=exc.status_code, error=exc.error)
        return upload_error_response(exc)
    return UploadResponse(**result.model_dump())
