# auth/service.py
"""
Authentication service.

Handles:
- User registration and lookup
- Password verification
- Session creation, lookup and destruction
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from auth.models import DEFAULT_SESSION_SECONDS, Session, SessionUser, User, normalize_email
from auth.password import hash_password, verify_password
from persistence.db import get_db, get_session_db, init_db

_logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base authentication error. The message is safe to show the user."""
    pass


class UserExistsError(AuthError):
    """User with this email already exists."""

    def __init__(self, message: str = "Email already in use."):
        super().__init__(message)


class UserNotFoundError(AuthError):
    """No user registered under this email."""

    def __init__(self, message: str = "User not found."):
        super().__init__(message)


class InvalidPasswordError(AuthError):
    """Password does not match the stored hash."""

    def __init__(self, message: str = "Invalid password."):
        super().__init__(message)


def create_user(name: str, email: str, password: str) -> User:
    """
    Create a new user account.

    The email is checked before the password is hashed; the UNIQUE
    constraint on users.email settles concurrent signups for the same
    address.

    Raises:
        UserExistsError: If email already registered
        StorageError: If the database fails
    """
    init_db()

    email = normalize_email(email)
    if get_user_by_email(email):
        raise UserExistsError()

    user = User.new(name=name, email=email, password_hash=hash_password(password))

    try:
        with get_db() as conn:
            conn.execute(
                """
                INSERT INTO users (id, name, email, password_hash, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    user.id,
                    user.name,
                    user.email,
                    user.password_hash,
                    user.created_at.isoformat(),
                ),
            )
    except sqlite3.IntegrityError:
        _logger.warning(f"Concurrent signup lost the race for: {email}")
        raise UserExistsError()

    _logger.info(f"Created user: {email}")
    return user


def get_user_by_email(email: str) -> Optional[User]:
    """
    Get user by email address.

    Returns:
        User if found, None otherwise
    """
    init_db()
    email = normalize_email(email)

    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email,),
        ).fetchone()

    if not row:
        return None

    return _row_to_user(row)


def count_users() -> int:
    """Number of registered users."""
    init_db()
    with get_db() as conn:
        return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]


def _row_to_user(row) -> User:
    """Convert a database row to a User object."""
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def authenticate_user(email: str, password: str) -> User:
    """
    Authenticate user with email and password.

    Raises:
        UserNotFoundError: If no user has this email
        InvalidPasswordError: If the password does not match
    """
    user = get_user_by_email(email)

    if not user:
        _logger.warning(f"Login attempt for non-existent user: {normalize_email(email)}")
        raise UserNotFoundError()

    if not verify_password(password, user.password_hash):
        _logger.warning(f"Invalid password for user: {user.email}")
        raise InvalidPasswordError()

    _logger.info(f"User authenticated: {user.email}")
    return user


def create_session(user: SessionUser, duration_seconds: int = DEFAULT_SESSION_SECONDS) -> Session:
    """Create and persist a new session for a user identity."""
    init_db()

    session = Session.new(user=user, duration_seconds=duration_seconds)

    with get_session_db() as conn:
        conn.execute(
            """
            INSERT INTO sessions (id, name, email, created_at, expires_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                session.id,
                session.user.name,
                session.user.email,
                session.created_at.isoformat(),
                session.expires_at.isoformat(),
            ),
        )

    _logger.debug(f"Created session for user: {user.email}")
    return session


def get_session(session_id: str) -> Optional[Session]:
    """
    Get session by ID.

    Expired sessions are deleted on read and reported as missing.
    """
    if not session_id:
        return None

    init_db()

    with get_session_db() as conn:
        row = conn.execute(
            "SELECT * FROM sessions WHERE id = ?",
            (session_id,),
        ).fetchone()

    if not row:
        return None

    session = Session(
        id=row["id"],
        user=SessionUser(name=row["name"], email=row["email"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        expires_at=datetime.fromisoformat(row["expires_at"]),
    )

    if not session.is_valid:
        destroy_session(session_id)
        return None

    return session


def destroy_session(session_id: str) -> bool:
    """
    Destroy (delete) a session.

    Returns:
        True if deleted, False if not found
    """
    init_db()

    with get_session_db() as conn:
        cursor = conn.execute(
            "DELETE FROM sessions WHERE id = ?",
            (session_id,),
        )
        return cursor.rowcount > 0


def cleanup_expired_sessions() -> int:
    """
    Remove expired sessions from the session database.

    Returns:
        Number of sessions cleaned up
    """
    init_db()

    with get_session_db() as conn:
        cursor = conn.execute(
            "DELETE FROM sessions WHERE expires_at < ?",
            (datetime.utcnow().isoformat(),),
        )
        count = cursor.rowcount

    if count > 0:
        _logger.info(f"Cleaned up {count} expired sessions")

    return count
