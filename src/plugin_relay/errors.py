"""Error taxonomy shared by the relay handlers.

Each failure is raised as one of the classes below by the code path that
produced it, so the handler boundary only needs to read ``status_code``,
``error`` and ``details`` to build a response envelope.
"""

from __future__ import annotations

from typing import Any, Optional


class RelayError(Exception):
    """Base class for failures converted to JSON envelopes."""

    status_code: int = 500
    default_error: str = "Internal server error"

    def __init__(self, error: Optional[str] = None, details: Any = None) -> None:
        self.error = error or self.default_error
        self.details = details
        super().__init__(self.error)


class BadRequestError(RelayError):
    """Missing or invalid input; no upstream call was attempted."""

    status_code = 400
    default_error = "Bad request"


class UnauthorizedError(RelayError):
    status_code = 401
    default_error = "Access token required"


class ForbiddenError(RelayError):
    status_code = 403
    default_error = "Invalid access token"


class PayloadTooLargeError(RelayError):
    status_code = 413
    default_error = "File too large"


class UpstreamError(RelayError):
    """The provider answered and rejected the request."""

    status_code = 400
    default_error = "Upstream error"

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Any = None,
        error: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.code = code
        self.message = message
        self.body = body
        if status_code is not None:
            self.status_code = status_code
        super().__init__(error or f"{provider} error: {message}", details=body if body is not None else message)


class NetworkError(RelayError):
    """The provider could not be reached or returned nothing usable."""

    status_code = 500
    default_error = "Upstream unavailable"

    def __init__(self, provider: str, message: str, *, error: Optional[str] = None) -> None:
        self.provider = provider
        self.message = message
        super().__init__(error, details=message)


__all__ = [
    "RelayError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "PayloadTooLargeError",
    "UpstreamError",
    "NetworkError",
]
