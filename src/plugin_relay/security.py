"""Bearer-token guard for the upload path."""

from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Depends, Header

from .config import Settings
from .dependencies import get_settings
from .errors import ForbiddenError, UnauthorizedError


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """Return the part after the first space of ``Bearer <token>``."""

    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def check_token(token: Optional[str], expected: Optional[str]) -> None:
    if not token:
        raise UnauthorizedError()
    if not expected or not hmac.compare_digest(token.encode(), expected.encode()):
        raise ForbiddenError()


async def require_upload_token(
    auth_header: Optional[str] = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
) -> None:
    check_token(extract_bearer_token(auth_header), settings.auth_token)


__all__ = ["check_token", "extract_bearer_token", "require_upload_token"]
