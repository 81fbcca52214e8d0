"""Configure pytest for the Members Portal project."""
import os
import sys
from pathlib import Path

import pytest

# Set environment for tests BEFORE any imports
os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

# Add project root so tests can import app, auth and persistence
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture
def temp_databases(tmp_path):
    """Point the persistence layer at fresh database files for one test."""
    import persistence.db as db

    db_path = tmp_path / "members.db"
    session_db_path = tmp_path / "sessions.db"
    db.configure(db_path, session_db_path)
    db.init_db()
    yield db_path, session_db_path
    db.close_db()


@pytest.fixture
def app_config(tmp_path):
    """AppConfig pointing at temporary databases."""
    from app.config import AppConfig

    return AppConfig(
        db_path=str(tmp_path / "members.db"),
        session_secret="test-session-secret",
    )


@pytest.fixture
def client(app_config):
    """Test client for an app built on temporary databases."""
    import random

    from fastapi.testclient import TestClient

    import persistence.db as db
    from app.main import create_app

    app = create_app(app_config, image_rng=random.Random(1234))
    with TestClient(app) as test_client:
        yield test_client
    db.close_db()
