"""Members Portal - FastAPI application entrypoint."""
import logging
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

import persistence.db as db
from app.config import AppConfig, load_config, log_config_snapshot
from app.correlation import RequestContextMiddleware
from app.routers import pages
from app.views import render_not_found
from auth.middleware import SessionCookie
from auth.service import cleanup_expired_sessions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).resolve().parent / "static"


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds the configured limit."""

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            return JSONResponse(
                status_code=413,
                content={"detail": "Request entity too large"},
            )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


def create_app(config: Optional[AppConfig] = None, image_rng: Optional[random.Random] = None) -> FastAPI:
    """
    Build the application for a configuration.

    Points the persistence layer at the configured databases and purges
    sessions that expired while the server was down.
    """
    config = config or load_config()
    log_config_snapshot(config)

    db.configure(Path(config.db_path), Path(config.session_db_path))
    db.init_db()
    cleanup_expired_sessions()

    started_at = datetime.now(timezone.utc)

    app = FastAPI(
        title="Members Portal",
        description="Signup, login and a members-only page",
        version=config.service_version,
    )
    app.state.config = config
    app.state.session_cookie = SessionCookie(
        secret=config.session_secret,
        max_age=config.session_max_age_seconds,
        secure=config.session_cookie_secure,
    )
    app.state.image_rng = image_rng

    # Added in reverse execution order: request context runs first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=config.max_request_size_bytes)
    app.add_middleware(RequestContextMiddleware)

    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")
    app.include_router(pages.router)

    @app.get("/health")
    async def health():
        """Health check with service info."""
        return {
            "status": "healthy",
            "service": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "started_at": started_at.isoformat(),
        }

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return HTMLResponse(render_not_found(request.url.path), status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(db.StorageError)
    async def storage_error_handler(request: Request, exc: db.StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return PlainTextResponse("Something went wrong. Please try again later.", status_code=500)

    return app
