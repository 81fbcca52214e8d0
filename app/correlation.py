# app/correlation.py
"""
Request correlation and access logging.

Provides:
- X-Request-Id header handling (accepts a safe client value or generates UUID4)
- request.state.request_id for downstream log lines
- One access log line per request with status and latency
"""
from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

_logger = logging.getLogger(__name__)

MAX_REQUEST_ID_LENGTH = 64
# Alphanumeric, hyphens, underscores only (safe for logging)
SAFE_REQUEST_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def validate_request_id(request_id: Optional[str]) -> Optional[str]:
    """Return request_id if it is short and log-safe, None otherwise."""
    if not request_id:
        return None
    if len(request_id) > MAX_REQUEST_ID_LENGTH:
        return None
    if not SAFE_REQUEST_ID_PATTERN.match(request_id):
        return None
    return request_id


def get_request_id(request: Request) -> Optional[str]:
    """Request ID set by the middleware, if any."""
    return getattr(request.state, "request_id", None)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an ID and log its outcome.

    Only method, path, status and latency are logged; never form bodies.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = validate_request_id(request.headers.get("x-request-id")) or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - started) * 1000

        response.headers["X-Request-Id"] = request_id
        _logger.info(
            f"request_id={request_id} method={request.method} path={request.url.path} "
            f"status={response.status_code} latency_ms={latency_ms:.2f}"
        )
        return response
