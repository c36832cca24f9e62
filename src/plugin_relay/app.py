"""FastAPI application factory and process entry point."""

from __future__ import annotations

import sys
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .completion import CompletionClient
from .config import Settings, load_settings
from .errors import BadRequestError, RelayError
from .logging import configure_logging, get_logger
from .relay import CompletionRelay, UploadRelay
from .responses import completion_error_response, upload_error_response
from .routes.completion import router as completion_router
from .routes.health import router as health_router
from .routes.upload import router as upload_router
from .storage import AssetStore, CloudinaryAssetStore

LOGGER = get_logger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /health - Health check",
    "POST /upload - Upload images",
    "POST /api/claude - Generate text",
]


def _error_response(request: Request, exc: RelayError) -> JSONResponse:
    if request.url.path.startswith("/api/"):
        return completion_error_response(exc)
    return upload_error_response(exc)


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        """Handle relay errors raised outside route bodies (auth, form parsing)."""
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return _error_response(request, BadRequestError("Invalid request", details=details))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # no route for this method and path pair
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "Endpoint not found",
                    "available_endpoints": AVAILABLE_ENDPOINTS,
                },
            )
        error = RelayError(str(exc.detail))
        error.status_code = exc.status_code
        response = _error_response(request, error)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        LOGGER.error("Unhandled error", error=str(exc), path=request.url.path, exc_info=True)
        details = str(exc) if settings.is_development else "Something went wrong"
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "details": details},
        )


def create_app(
    settings: Optional[Settings] = None,
    *,
    asset_store: Optional[AssetStore] = None,
    completion_client: Optional[CompletionClient] = None,
) -> FastAPI:
    """Build the relay application from an immutable settings value."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="Plugin Relay")

    app.state.settings = settings
    app.state.upload_relay = UploadRelay(settings, asset_store or CloudinaryAssetStore(settings))
    app.state.completion_relay = CompletionRelay(settings, completion_client)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )
    _register_exception_handlers(app, settings)

    app.include_router(health_router)
    app.include_router(upload_router)
    app.include_router(completion_router)
    return app


def main() -> None:
    try:
        settings = load_settings()
    except ValidationError as exc:
        configure_logging()
        LOGGER.error("Missing or invalid configuration", error=str(exc))
        sys.exit(1)

    app = create_app(settings)
    if not settings.auth_token:
        LOGGER.warning("AUTH_TOKEN not set; every upload will be rejected")
    LOGGER.info(
        "Plugin relay starting",
        cloud_name=settings.cloudinary_cloud_name,
        upload_folder=settings.upload_folder,
        host=settings.host,
        port=settings.port,
        endpoints=AVAILABLE_ENDPOINTS,
    )

    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
