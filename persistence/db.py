# persistence/db.py
"""
SQLite database connection and schema management.

Two file-based databases are used:
- the member database (users table)
- the session database (sessions table)

Both locations are configurable via env vars so tests and deployments
can point them at their own volumes.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

_logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_DB_PATH = DATA_DIR / "members.db"
DEFAULT_SESSION_DB_NAME = "sessions"

DB_PATH = Path(os.environ.get("MEMBERS_DB_PATH", str(DEFAULT_DB_PATH)))
SESSION_DB_PATH = DB_PATH.parent / f"{os.environ.get('SESSION_DB_NAME') or DEFAULT_SESSION_DB_NAME}.db"

# One connection per (thread, database file)
_local = threading.local()
_init_lock = threading.Lock()
_initialized = False


class StorageError(Exception):
    """Raised when the underlying database fails."""
    pass


def configure(db_path: Optional[Path] = None, session_db_path: Optional[Path] = None) -> None:
    """
    Point the persistence layer at new database files.

    Closes this thread's connections and forces schema init on next use.
    """
    global DB_PATH, SESSION_DB_PATH, _initialized

    close_db()
    with _init_lock:
        if db_path is not None:
            DB_PATH = Path(db_path)
        if session_db_path is not None:
            SESSION_DB_PATH = Path(session_db_path)
        _initialized = False


def _get_connection(path: Path) -> sqlite3.Connection:
    """Get thread-local connection for a database file."""
    connections = getattr(_local, "connections", None)
    if connections is None:
        connections = {}
        _local.connections = connections

    key = str(path)
    conn = connections.get(key)
    if conn is None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(key, timeout=30.0, check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {key}: {e}") from e
        conn.row_factory = sqlite3.Row
        connections[key] = conn

    return conn


@contextmanager
def get_db(path: Optional[Path] = None):
    """
    Get database connection context manager.

    Commits on success, rolls back on error. sqlite3.IntegrityError is
    re-raised untouched so callers can map constraint violations; any
    other sqlite3.Error surfaces as StorageError.

    Usage:
        with get_db() as conn:
            cursor = conn.execute("SELECT ...")
    """
    conn = _get_connection(path or DB_PATH)
    try:
        yield conn
        conn.commit()
    except sqlite3.IntegrityError:
        conn.rollback()
        raise
    except sqlite3.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise


@contextmanager
def get_session_db():
    """Connection context manager for the session database."""
    with get_db(SESSION_DB_PATH) as conn:
        yield conn


def init_db() -> None:
    """
    Initialize database schema.

    Creates tables if they don't exist.
    Safe to call multiple times (idempotent).
    """
    global _initialized

    with _init_lock:
        if _initialized:
            return

        with get_db() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

        with get_session_db() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_sessions_expires
                ON sessions(expires_at)
            """)

        _logger.info(f"Database initialized at {DB_PATH} (sessions: {SESSION_DB_PATH})")
        _initialized = True


def close_db() -> None:
    """Close this thread's database connections."""
    connections = getattr(_local, "connections", None)
    if not connections:
        return
    for conn in connections.values():
        conn.close()
    _local.connections = {}


def reset_db() -> None:
    """Reset database (for testing). Drops all tables."""
    global _initialized

    with _init_lock:
        with get_db() as conn:
            conn.execute("DROP TABLE IF EXISTS users")
        with get_session_db() as conn:
            conn.execute("DROP TABLE IF EXISTS sessions")
        _initialized = False


def get_db_path() -> Path:
    """Get the member database file path."""
    return DB_PATH


def get_session_db_path() -> Path:
    """Get the session database file path."""
    return SESSION_DB_PATH
