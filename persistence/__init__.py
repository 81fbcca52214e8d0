# persistence/__init__.py
"""
Persistence layer.

Provides SQLite-backed storage for:
- Member accounts (users table)
- Login sessions (sessions table, separate database file)
"""

from persistence.db import (
    StorageError,
    close_db,
    configure,
    get_db,
    get_session_db,
    init_db,
)

__all__ = [
    "StorageError",
    "close_db",
    "configure",
    "get_db",
    "get_session_db",
    "init_db",
]
