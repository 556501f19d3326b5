"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lib.exceptions import NotFoundError, URLShortenerError
from .api import api_router
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
    logger: Optional[logging.Logger] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance
        config: Configuration instance
        logger: Optional logger for the HTTP layer

    Returns:
        Configured FastAPI app
    """
    logger = logger or logging.getLogger("url_shortener.web")
    api_prefix = config.api_prefix

    app = FastAPI(
        title="URL Shortener",
        description="In-memory URL shortening service with click statistics",
        version="1.0.0",
        docs_url=f"{api_prefix}/docs",
        redoc_url=f"{api_prefix}/redoc",
        openapi_url=f"{api_prefix}/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    # Last added runs first: forwarded headers are resolved before logging
    app.add_middleware(LoggingMiddleware, logger=logger)
    app.add_middleware(ForwardedHeadersMiddleware, fallback_base_url=config.base_url)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, logger)

    # JSON routes first so /stats, /health etc. win over the /{short_code} redirect
    app.include_router(api_router, prefix=api_prefix, tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app


def validation_error_message(errors) -> str:
    """Describe the first failed field, e.g. ``Invalid query parameter: limit``."""
    loc = tuple(errors[0].get("loc", ())) if errors else ()
    if not loc or loc[0] == "body":
        return "Invalid request body"
    if len(loc) < 2:
        return f"Invalid {loc[0]} parameter"
    return f"Invalid {loc[0]} parameter: {loc[1]}"


def register_exception_handlers(app: FastAPI, logger: logging.Logger) -> None:
    """Map service errors and unexpected failures to JSON error responses."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=exc.status_code, content={"error": "URL not found"})

    @app.exception_handler(URLShortenerError)
    async def service_error_handler(request: Request, exc: URLShortenerError):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.debug(f"Rejected request: {errors}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": validation_error_message(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={"event": "http.error", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
