"""Asset store client backed by Cloudinary's signed upload API."""

from __future__ import annotations

import asyncio
import io
from typing import Any, Dict, Protocol

import cloudinary.exceptions
import cloudinary.uploader

from .config import Settings
from .errors import NetworkError, UpstreamError
from .logging import get_logger
from .schemas import AssetUploadRequest, UploadResult

LOGGER = get_logger(__name__)

PROVIDER = "Cloudinary"
BUILTIN_CONTEXT_FIELDS = ("caption", "alt")


class AssetStore(Protocol):
    async def upload(self, image: bytes, request: AssetUploadRequest) -> UploadResult:
        ...


def _merge_builtin_context(options: Dict[str, Any]) -> Dict[str, Any]:
    """Fold caption/alt into the context string after the free-form pairs.

    Cloudinary stores both as contextual metadata; appending them last lets
    them override context entries of the same name.
    """

    merged = dict(options)
    pairs = [merged.get("context") or ""]
    for name in BUILTIN_CONTEXT_FIELDS:
        value = merged.pop(name, None)
        if value:
            pairs.append(f"{name}={value}")
    merged["context"] = "|".join(pair for pair in pairs if pair)
    return merged


class CloudinaryAssetStore:
    """Uploads image buffers with per-call credentials.

    The Cloudinary SDK is synchronous, so the call runs in a worker thread and
    the request task only awaits its completion.
    """

    def __init__(self, settings: Settings) -> None:
        self._credentials = {
            "cloud_name": settings.cloudinary_cloud_name,
            "api_key": settings.cloudinary_api_key,
            "api_secret": settings.cloudinary_api_secret,
        }
        self._timeout = settings.upstream_timeout_seconds

    def _upload_sync(self, image: bytes, options: Dict[str, Any]) -> Dict[str, Any]:
        return cloudinary.uploader.upload(
            io.BytesIO(image),
            timeout=self._timeout,
            **self._credentials,
            **options,
        )

    async def upload(self, image: bytes, request: AssetUploadRequest) -> UploadResult:
        options = _merge_builtin_context(request.to_options())
        LOGGER.info("Uploading to asset store", public_id=request.public_id, folder=request.folder)
        try:
            payload = await asyncio.to_thread(self._upload_sync, image, options)
        except cloudinary.exceptions.GeneralError as exc:
            # transport failures and provider 5xx responses
            LOGGER.error("Asset store unavailable", error=str(exc))
            raise NetworkError(PROVIDER, str(exc), error="Upload failed") from exc
        except cloudinary.exceptions.Error as exc:
            LOGGER.error("Asset store rejected upload", error=str(exc), code=type(exc).__name__)
            raise UpstreamError(
                PROVIDER,
                str(exc) or "Unknown Cloudinary error",
                code=type(exc).__name__,
                error=f"{PROVIDER} error: {exc}",
            ) from exc
        except OSError as exc:
            LOGGER.error("Asset store unreachable", error=str(exc))
            raise NetworkError(PROVIDER, str(exc), error="Upload failed") from exc

        result = UploadResult.from_provider(payload)
        LOGGER.info(
            "Upload successful",
            url=result.url,
            caption=result.caption,
            alt=result.alt,
            tags=result.tags,
        )
        return result


__all__ = ["AssetStore", "CloudinaryAssetStore"]
