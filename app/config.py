# app/config.py
"""
Centralized configuration management with startup validation.

Defines REQUIRED vs OPTIONAL environment variables and provides
safe configuration loading with validation and logging.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

SERVICE_NAME = "members-portal"
SERVICE_VERSION = "0.1.0"

DEVELOPMENT = "development"

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_DB_PATH = "data/members.db"
DEFAULT_SESSION_DB_NAME = "sessions"
DEFAULT_SESSION_MAX_AGE_SECONDS = 60 * 60  # 1 hour
MIN_SESSION_MAX_AGE_SECONDS = 60
DEFAULT_MAX_REQUEST_SIZE_BYTES = 1_048_576  # 1MB
MIN_REQUEST_SIZE_BYTES = 1024  # 1KB minimum

# Only usable in development; production must set SESSION_SECRET
DEV_SESSION_SECRET = "dev-insecure-session-secret"

# Session database names become file names
SAFE_DB_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

# Sensitive substrings that should never appear in logs
SENSITIVE_SUBSTRINGS = ("key", "token", "secret", "password", "credential")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class AppConfig:
    """Application configuration loaded from environment."""

    # Service info
    service_name: str = SERVICE_NAME
    service_version: str = SERVICE_VERSION
    environment: str = DEVELOPMENT

    # Server
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    # Storage
    db_path: str = DEFAULT_DB_PATH
    session_db_name: str = DEFAULT_SESSION_DB_NAME

    # Sessions (secret is never logged)
    session_secret: str = field(default=DEV_SESSION_SECRET, repr=False)
    session_max_age_seconds: int = DEFAULT_SESSION_MAX_AGE_SECONDS
    session_cookie_secure: bool = False

    # Security settings
    max_request_size_bytes: int = DEFAULT_MAX_REQUEST_SIZE_BYTES

    # Warnings collected during config load
    warnings: list = field(default_factory=list)

    @property
    def session_secret_present(self) -> bool:
        return self.session_secret != DEV_SESSION_SECRET

    @property
    def session_db_path(self) -> str:
        """Session database file, next to the member database."""
        directory = os.path.dirname(self.db_path) or "."
        return os.path.join(directory, f"{self.session_db_name}.db")


# =============================================================================
# Configuration Loading
# =============================================================================


def _parse_int_env(
    name: str, default: int, min_value: Optional[int] = None
) -> tuple[int, Optional[str]]:
    """
    Parse an integer environment variable with validation.

    Returns (value, warning_message).
    On invalid input, returns default with a warning.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default, None

    try:
        value = int(raw)
    except ValueError:
        warning = f"{name}='{raw}' is not a valid integer; using default {default}"
        return default, warning

    if min_value is not None and value < min_value:
        warning = f"{name}={value} is below minimum {min_value}; using default {default}"
        return default, warning

    return value, None


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    raw = os.environ.get(name, "").lower()
    if raw in ("true", "1", "yes", "on"):
        return True
    if raw in ("false", "0", "no", "off", ""):
        return default
    return default


def load_config(fail_fast: bool = True) -> AppConfig:
    """
    Load and validate application configuration from environment.

    Args:
        fail_fast: If True, raise ConfigurationError on critical issues.
                   If False, collect warnings and continue.

    Returns:
        AppConfig instance with validated configuration.

    Raises:
        ConfigurationError: If required configuration is missing/invalid
                           and fail_fast is True.
    """
    warnings = []

    environment = os.environ.get("APP_ENV", DEVELOPMENT)

    # Server
    host = os.environ.get("HOST", DEFAULT_HOST)
    port, port_warning = _parse_int_env("PORT", DEFAULT_PORT, min_value=1)
    if port_warning:
        warnings.append(port_warning)

    # Storage
    db_path = os.environ.get("MEMBERS_DB_PATH") or DEFAULT_DB_PATH
    session_db_name = os.environ.get("SESSION_DB_NAME") or DEFAULT_SESSION_DB_NAME
    if not SAFE_DB_NAME_PATTERN.match(session_db_name):
        message = f"SESSION_DB_NAME='{session_db_name}' must be alphanumeric, '-' or '_'"
        if fail_fast:
            raise ConfigurationError(message)
        warnings.append(f"{message}; using default {DEFAULT_SESSION_DB_NAME}")
        session_db_name = DEFAULT_SESSION_DB_NAME

    # Session secret (REQUIRED outside development)
    session_secret = os.environ.get("SESSION_SECRET", "")
    if not session_secret:
        if environment != DEVELOPMENT and fail_fast:
            raise ConfigurationError("SESSION_SECRET is required outside development")
        warnings.append("SESSION_SECRET is not set; using an insecure development secret")
        session_secret = DEV_SESSION_SECRET

    session_max_age, age_warning = _parse_int_env(
        "SESSION_MAX_AGE_SECONDS",
        DEFAULT_SESSION_MAX_AGE_SECONDS,
        min_value=MIN_SESSION_MAX_AGE_SECONDS,
    )
    if age_warning:
        warnings.append(age_warning)

    session_cookie_secure = _parse_bool_env("SESSION_COOKIE_SECURE", False)

    # Security settings with validation
    max_request_size, size_warning = _parse_int_env(
        "MAX_REQUEST_SIZE_BYTES",
        DEFAULT_MAX_REQUEST_SIZE_BYTES,
        min_value=MIN_REQUEST_SIZE_BYTES,
    )
    if size_warning:
        warnings.append(size_warning)

    # Log warnings
    for warning in warnings:
        logger.warning(f"[CONFIG] {warning}")

    return AppConfig(
        environment=environment,
        host=host,
        port=port,
        db_path=db_path,
        session_db_name=session_db_name,
        session_secret=session_secret,
        session_max_age_seconds=session_max_age,
        session_cookie_secure=session_cookie_secure,
        max_request_size_bytes=max_request_size,
        warnings=warnings,
    )


def log_config_snapshot(config: AppConfig) -> str:
    """
    Generate and log a safe configuration snapshot.

    Returns the snapshot string for testing purposes.
    Never logs actual secret values - only boolean presence flags.
    """
    snapshot = (
        f"[STARTUP] service={config.service_name} "
        f"version={config.service_version} "
        f"environment={config.environment} "
        f"port={config.port} "
        f"db_path={config.db_path} "
        f"session_db_name={config.session_db_name} "
        f"session_max_age_seconds={config.session_max_age_seconds} "
        f"session_secret_present={config.session_secret_present} "
        f"max_request_size_bytes={config.max_request_size_bytes}"
    )
    logger.info(snapshot)
    return snapshot


def validate_config_snapshot_safety(snapshot: str) -> bool:
    """
    Validate that a config snapshot doesn't contain sensitive values.

    Returns True if safe, False if potentially unsafe.
    """
    snapshot_lower = snapshot.lower()

    # "secret_present=true" is fine, "secret=abc" is not
    for sensitive in SENSITIVE_SUBSTRINGS:
        pattern = rf"{sensitive}=(?!true|false)"
        if re.search(pattern, snapshot_lower):
            return False

    return True
