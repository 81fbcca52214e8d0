# app/tests/test_config.py
"""Tests for configuration management and startup validation."""
import os
from unittest.mock import patch

import pytest

from app.config import (
    DEFAULT_MAX_REQUEST_SIZE_BYTES,
    DEFAULT_PORT,
    DEFAULT_SESSION_MAX_AGE_SECONDS,
    AppConfig,
    ConfigurationError,
    load_config,
    log_config_snapshot,
    validate_config_snapshot_safety,
)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_default_values(self):
        """Config loads with sensible defaults when no env vars set."""
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        assert config.service_name == "members-portal"
        assert config.environment == "development"
        assert config.port == DEFAULT_PORT == 3000
        assert config.db_path == "data/members.db"
        assert config.session_db_name == "sessions"
        assert config.session_max_age_seconds == DEFAULT_SESSION_MAX_AGE_SECONDS == 3600
        assert config.session_cookie_secure is False
        assert config.max_request_size_bytes == DEFAULT_MAX_REQUEST_SIZE_BYTES

    def test_env_overrides(self):
        """Environment variables override defaults."""
        env = {
            "PORT": "8080",
            "MEMBERS_DB_PATH": "/var/lib/members/users.db",
            "SESSION_DB_NAME": "member_sessions",
            "SESSION_SECRET": "abc",
            "SESSION_COOKIE_SECURE": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config()

        assert config.port == 8080
        assert config.db_path == "/var/lib/members/users.db"
        assert config.session_db_path == "/var/lib/members/member_sessions.db"
        assert config.session_secret == "abc"
        assert config.session_cookie_secure is True

    def test_invalid_port_falls_back(self):
        """Non-numeric PORT uses the default with a warning."""
        with patch.dict(os.environ, {"PORT": "http"}, clear=True):
            config = load_config()

        assert config.port == DEFAULT_PORT
        assert any("PORT" in w for w in config.warnings)

    def test_short_session_age_falls_back(self):
        """Session max age below the minimum uses the default."""
        with patch.dict(os.environ, {"SESSION_MAX_AGE_SECONDS": "5"}, clear=True):
            config = load_config()

        assert config.session_max_age_seconds == DEFAULT_SESSION_MAX_AGE_SECONDS


class TestSessionSecret:
    """Tests for SESSION_SECRET handling."""

    def test_missing_secret_in_development_warns(self):
        """Development runs with a fallback secret and a warning."""
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        assert config.session_secret
        assert config.session_secret_present is False
        assert any("SESSION_SECRET" in w for w in config.warnings)

    def test_missing_secret_in_production_fails(self):
        """Outside development a missing secret is fatal."""
        with patch.dict(os.environ, {"APP_ENV": "production"}, clear=True):
            with pytest.raises(ConfigurationError):
                load_config()

    def test_missing_secret_without_fail_fast(self):
        """fail_fast=False downgrades the missing secret to a warning."""
        with patch.dict(os.environ, {"APP_ENV": "production"}, clear=True):
            config = load_config(fail_fast=False)

        assert config.session_secret_present is False


class TestSessionDbName:
    """Tests for SESSION_DB_NAME validation."""

    def test_unsafe_name_fails(self):
        """Path-like names are rejected."""
        with patch.dict(os.environ, {"SESSION_DB_NAME": "../etc/passwd"}, clear=True):
            with pytest.raises(ConfigurationError):
                load_config()

    def test_unsafe_name_without_fail_fast(self):
        """fail_fast=False falls back to the default name."""
        with patch.dict(os.environ, {"SESSION_DB_NAME": "a/b"}, clear=True):
            config = load_config(fail_fast=False)

        assert config.session_db_name == "sessions"


class TestConfigSnapshot:
    """Tests for the startup snapshot."""

    def test_snapshot_never_contains_secret(self):
        """The snapshot reports secret presence, not the value."""
        config = AppConfig(session_secret="super-secret-value")
        snapshot = log_config_snapshot(config)

        assert "super-secret-value" not in snapshot
        assert "session_secret_present=True" in snapshot
        assert validate_config_snapshot_safety(snapshot)

    def test_unsafe_snapshot_detected(self):
        """A snapshot leaking a secret value is flagged."""
        assert not validate_config_snapshot_safety("session_secret=abc123")
