# auth/models.py
"""
User and Session models for authentication.
"""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_SESSION_SECONDS = 60 * 60


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookup."""
    return (email or "").strip().lower()


@dataclass
class User:
    """
    User account model.

    Attributes:
        id: Unique user ID (UUID)
        name: Display name
        email: User's email (unique, used for login)
        password_hash: Bcrypt-hashed password
        created_at: Account creation timestamp
    """
    id: str
    name: str
    email: str
    password_hash: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def new(cls, name: str, email: str, password_hash: str) -> User:
        """Create a new user with generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            email=normalize_email(email),
            password_hash=password_hash,
            created_at=datetime.utcnow(),
        )

    @property
    def identity(self) -> SessionUser:
        """The identity a session carries for this user."""
        return SessionUser(name=self.name, email=self.email)

    def to_dict(self) -> dict:
        """Convert to dictionary (excludes password_hash for safety)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class SessionUser:
    """Identity stored in a session: who is logged in."""
    name: str
    email: str


@dataclass
class Session:
    """
    Login session model.

    Attributes:
        id: Unique session ID (signed into the cookie value)
        user: Identity of the logged-in user
        created_at: Session creation timestamp
        expires_at: Session expiration timestamp
    """
    id: str
    user: SessionUser
    created_at: datetime = field(default_factory=datetime.utcnow)
    expires_at: datetime = field(
        default_factory=lambda: datetime.utcnow() + timedelta(seconds=DEFAULT_SESSION_SECONDS)
    )

    @classmethod
    def new(cls, user: SessionUser, duration_seconds: int = DEFAULT_SESSION_SECONDS) -> Session:
        """Create a new session with a random ID."""
        now = datetime.utcnow()
        return cls(
            id=secrets.token_urlsafe(32),
            user=user,
            created_at=now,
            expires_at=now + timedelta(seconds=duration_seconds),
        )

    @property
    def is_valid(self) -> bool:
        """Check if session is still valid (not expired)."""
        return datetime.utcnow() < self.expires_at


@dataclass(frozen=True)
class SessionContext:
    """
    Session state of a single request.

    Resolved once from the session cookie and passed explicitly to
    handlers. Anonymous requests have neither session_id nor user.
    """
    session_id: Optional[str] = None
    user: Optional[SessionUser] = None

    @classmethod
    def anonymous(cls) -> SessionContext:
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.user.email)
