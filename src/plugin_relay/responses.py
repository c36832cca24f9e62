"""JSON envelopes returned for failures."""

from __future__ import annotations

from typing import Any, Dict

from fastapi.responses import JSONResponse

from .errors import RelayError


def upload_error_response(exc: RelayError) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": exc.error}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def completion_error_response(exc: RelayError) -> JSONResponse:
    content: Dict[str, Any] = {"error": exc.error}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


__all__ = ["completion_error_response", "upload_error_response"]
