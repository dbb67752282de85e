"""
The Quad API Server

Entry point for the FastAPI application.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from quad_server.api import router as api_router
from quad_server.core.config import get_settings
from quad_server.core.database import init_db
from quad_server.core.errors import InvalidRequest, error_response
from quad_server.core.logging import configure_logging
from quad_server.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from quad_server.core.redis import close_redis

settings = get_settings()
log = structlog.get_logger()


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid value")
    return f"{'.'.join(loc)}: {message}" if loc else message


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="The Quad",
        description="Campus organizations, events and official-status review.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Middleware (last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestContextMiddleware)

    # Every failure renders as {"success": false, "error": "..."}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(InvalidRequest(_validation_message(exc)))

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint for startup probes."""
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("quad.starting", auto_create_tables=settings.auto_create_tables)
        if settings.auto_create_tables:
            await init_db()

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("quad.shutting_down")
        await close_redis()

    return app


app = create_app()
