"""Dependency wiring for the relay routes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from .config import Settings
from .errors import PayloadTooLargeError
from .relay import CompletionRelay, UploadRelay


@dataclass(frozen=True)
class UploadForm:
    image: Optional[bytes]
    metadata: Optional[str]
    filename: Optional[str]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_relay(request: Request) -> UploadRelay:
    return request.app.state.upload_relay


def get_completion_relay(request: Request) -> CompletionRelay:
    return request.app.state.completion_relay


def _text_field(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


async def read_upload_form(
    request: Request, settings: Settings = Depends(get_settings)
) -> UploadForm:
    """Parse the multipart body, rejecting images above the size ceiling."""

    limit = settings.upload_max_bytes
    async with request.form() as form:
        part = form.get("image")
        image: Optional[bytes] = None
        if isinstance(part, UploadFile):
            if part.size is not None and part.size > limit:
                raise PayloadTooLargeError(details=f"Image exceeds {limit} bytes")
            image = await part.read()
            if len(image) > limit:
                raise PayloadTooLargeError(details=f"Image exceeds {limit} bytes")
        return UploadForm(
            image=image,
            metadata=_text_field(form.get("metadata")),
            filename=_text_field(form.get("filename")),
        )


__all__ = [
    "UploadForm",
    "get_completion_relay",
    "get_settings",
    "get_upload_relay",
    "read_upload_form",
]
