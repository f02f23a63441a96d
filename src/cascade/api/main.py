"""
FastAPI application entry point.

This is the main FastAPI application that wires the chat and health routers,
the CORS/no-cache headers, and the app-owned resources (settings, model
manager, rate limiter) that endpoints receive through dependencies.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional, Union

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .dependencies.rate_limit import RateLimiter
from .middleware import apply_cors_headers
from .responses import error_response
from .routers import chat, health
from cascade.models.manager import ModelManager
from cascade.settings import AppSettings, config_path_from_env, load_config
from cascade.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Provider clients are opened lazily on first use and closed here on
    shutdown.
    """
    logger.info(f"Starting cascade API ({app.state.settings.environment})")
    yield
    logger.info("Shutting down cascade API")
    await app.state.model_manager.cleanup()


def create_app(
    config_path: Optional[Union[Path, str]] = None,
    model_manager: Optional[ModelManager] = None,
    rate_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Every collaborator can be injected, which keeps tests off the network
    and lets a deployment swap the in-memory rate limiter.
    """
    configure_logging()

    config_path = Path(config_path) if config_path else config_path_from_env()
    settings = AppSettings.from_config(load_config(config_path))

    app = FastAPI(
        title="Cascade Chat API",
        description="Sequential DeepSeek -> Qwen -> Gemini pipeline with synthesized answers",
        version=settings.version,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.model_manager = model_manager or ModelManager(config_path=config_path)
    app.state.rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @app.middleware("http")
    async def cors_and_cache_headers(request: Request, call_next):
        response = await call_next(request)
        return apply_cors_headers(response, request.headers.get("origin"), settings.allowed_origins)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields = {str(part) for err in exc.errors() for part in err.get("loc", ())}
        # missing, unparseable or non-object bodies count as a missing message
        if "message" not in fields and fields & {"stage", "settings"}:
            detail = "Request body failed validation"
        else:
            detail = "Valid message is required"
        return error_response(400, "Invalid request", detail)

    @app.exception_handler(StarletteHTTPException)
    async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
        # methods without an explicit route on /api/chat (HEAD, TRACE, ...)
        if exc.status_code == 405 and request.url.path == "/api/chat":
            return error_response(405, "Method not allowed", "Only POST requests are supported")
        return await http_exception_handler(request, exc)

    # Include API routers
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(chat.router, prefix="/api", tags=["chat"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "Cascade Chat API",
            "version": settings.version,
            "status": "operational",
            "endpoints": {
                "chat": "/api/chat",
                "health": "/api/health",
                "docs": "/docs",
            }
        }

    return app


# Create the FastAPI app instance
app = create_app()
