"""FastAPI application factory and configuration."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def create_app(
    title: str = "New Post Webhook",
    version: str = "1.0.0",
    enable_metrics: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        title: API title for OpenAPI documentation
        version: API version
        enable_metrics: Whether to enable Prometheus metrics

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=title,
        version=version,
        description="""
# New Post Webhook

Blog content API that notifies an external URL whenever a post is published.

## Webhook

When a post of type `post` moves to `publish` from any other status, a JSON
document describing it is POSTed once to the configured webhook URL
(`content-type: application/json`, 30 second timeout). Re-saving a published
post, publishing pages, or saving with no URL configured sends nothing.
Delivery failures are logged but never reported back to the caller.

## Authentication

Every endpoint except health, docs and metrics identifies the caller by an
`Authorization: Bearer <token>` header. Tokens belong to users and are created
with `post-webhook create-user`. What a user may do depends on their role:

- **administrator**: manage settings, send test webhooks, publish and edit posts
- **editor / author**: publish and edit posts
- **contributor**: edit posts (no publishing)
- **subscriber**: read only
        """,
        license_info={
            "name": "GPL-2.0-or-later",
        },
        openapi_tags=[
            {
                "name": "health",
                "description": "Health check endpoints for monitoring system status",
            },
            {
                "name": "posts",
                "description": "Create, update and list posts",
            },
            {
                "name": "settings",
                "description": "Webhook URL configuration",
            },
            {
                "name": "webhook",
                "description": "Send a test webhook",
            },
        ],
    )

    # =========================================================================
    # CORS Middleware
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render HTTP errors in the standard error envelope."""
        if exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": _reason(exc.status_code),
                "detail": exc.detail,
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors."""
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        logger.warning(f"Validation error on {request.url}: {len(errors)} error(s)")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "Validation error",
                "detail": errors,
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error on {request.url}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if logger.isEnabledFor(logging.DEBUG) else None,
            },
        )

    # =========================================================================
    # Startup/Shutdown Events
    # =========================================================================

    @app.on_event("startup")
    async def startup_event():
        """Execute on application startup."""
        logger.info("FastAPI application starting up")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Execute on application shutdown."""
        logger.info("FastAPI application shutting down")

    # =========================================================================
    # Import and Include Routers
    # =========================================================================

    from .routes import health, posts, settings, webhook

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(posts.router, prefix="/api/v1", tags=["posts"])
    app.include_router(settings.router, prefix="/api/v1", tags=["settings"])
    app.include_router(webhook.router, prefix="/api/v1", tags=["webhook"])

    # =========================================================================
    # Prometheus Metrics
    # =========================================================================

    if enable_metrics:
        instrumentator = Instrumentator(
            should_group_status_codes=True,
            should_ignore_untemplated=True,
            should_respect_env_var=False,
            excluded_handlers=["/metrics"],
        )
        instrumentator.instrument(app).expose(app, endpoint="/metrics")
        logger.info("Prometheus metrics enabled at /metrics")

    logger.info(f"FastAPI application created: {title} v{version}")

    return app


def _reason(status_code: int) -> str:
    """Standard reason phrase for a status code."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"
