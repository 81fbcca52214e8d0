# auth/__init__.py
"""
Authentication module.

Provides:
- User model with email/password auth
- Store-backed sessions referenced by a signed HTTP-only cookie
- Password hashing with bcrypt
- The access gate for members-only pages
"""

from auth.models import User, Session, SessionContext, SessionUser
from auth.service import (
    AuthError,
    InvalidPasswordError,
    UserExistsError,
    UserNotFoundError,
    authenticate_user,
    create_session,
    create_user,
    destroy_session,
    get_session,
    get_user_by_email,
)
from auth.middleware import AccessDecision, SessionCookie, check_access, resolve_session_context

__all__ = [
    "User",
    "Session",
    "SessionContext",
    "SessionUser",
    "AuthError",
    "InvalidPasswordError",
    "UserExistsError",
    "UserNotFoundError",
    "authenticate_user",
    "create_session",
    "create_user",
    "destroy_session",
    "get_session",
    "get_user_by_email",
    "AccessDecision",
    "SessionCookie",
    "check_access",
    "resolve_session_context",
]
