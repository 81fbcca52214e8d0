# auth/middleware.py
"""
FastAPI session handling.

Provides:
- Signed session cookie (itsdangerous)
- Per-request SessionContext dependency
- The access gate for members-only routes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Response
from itsdangerous import BadData, URLSafeTimedSerializer

from auth.models import DEFAULT_SESSION_SECONDS, SessionContext
from auth.service import get_session

_logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "members_session"
SESSION_COOKIE_SALT = "members.session.v1"


class SessionCookie:
    """
    Session cookie codec and writer.

    The cookie value is the session ID signed with the app secret, so a
    tampered or foreign cookie never reaches the session store.
    """

    def __init__(
        self,
        secret: str,
        max_age: int = DEFAULT_SESSION_SECONDS,
        secure: bool = False,
        name: str = SESSION_COOKIE_NAME,
    ):
        if not secret:
            raise ValueError("Session secret cannot be empty")
        self.name = name
        self.max_age = max_age
        self.secure = secure
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=SESSION_COOKIE_SALT)

    def sign(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def unsign(self, value: Optional[str]) -> Optional[str]:
        """Return the session ID, or None if the value is missing, forged or stale."""
        if not value:
            return None
        try:
            session_id = self._serializer.loads(value, max_age=self.max_age)
        except BadData:
            # Covers forged, malformed and expired values
            _logger.debug("Rejected session cookie with bad or expired signature")
            return None
        if not isinstance(session_id, str) or not session_id:
            return None
        return session_id

    def set(self, response: Response, session_id: str) -> None:
        """Set session cookie on response."""
        response.set_cookie(
            key=self.name,
            value=self.sign(session_id),
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )

    def clear(self, response: Response) -> None:
        """Clear session cookie from response."""
        response.delete_cookie(
            key=self.name,
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )


def get_session_cookie(request: Request) -> SessionCookie:
    """FastAPI dependency: the app's configured SessionCookie."""
    return request.app.state.session_cookie


def load_session_context(request: Request, cookie: SessionCookie) -> SessionContext:
    """Build the SessionContext for a request from its cookie."""
    session_id = cookie.unsign(request.cookies.get(cookie.name))
    if not session_id:
        return SessionContext.anonymous()

    session = get_session(session_id)
    if not session:
        return SessionContext.anonymous()

    return SessionContext(session_id=session.id, user=session.user)


def resolve_session_context(request: Request) -> SessionContext:
    """
    FastAPI dependency: session state of the current request.

    FastAPI caches dependencies per request, so the cookie is read and
    the session store queried once no matter how many handlers ask.
    Declared sync so the store lookup runs in the threadpool.
    """
    return load_session_context(request, get_session_cookie(request))


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of the access gate."""
    allowed: bool
    redirect_to: Optional[str] = None


ALLOW = AccessDecision(allowed=True)


def check_access(ctx: SessionContext, redirect_to: str = "/") -> AccessDecision:
    """
    Gate for members-only routes.

    Allows requests whose session carries a user identity; everyone
    else is sent to redirect_to.
    """
    if ctx.is_authenticated:
        return ALLOW
    return AccessDecision(allowed=False, redirect_to=redirect_to)
