"""
Environment configuration for cronops.

All settings are read from environment variables (entry points load a
.env file first via python-dotenv). Values are resolved on each call so
tests can override them with patch.dict(os.environ, ...).

Environment Variables:
- HOST: Bind address (default: 127.0.0.1)
- PORT: Server port (default: 8080)
- CRONOPS_DB_PATH: SQLite registry path (default: data/cronops.db)
- STATIC_DIR: Front page assets (default: static)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_DIR: Log file directory (default: logs)
- DEFAULT_OCCURRENCE_COUNT: Occurrences per conversion (default: 5)
- CRONOPS_SEED_PRESETS: Seed preset expressions into a new registry (default: true)
- API_AUTH_ENABLED: Require X-API-Key on /api endpoints (default: false)
- API_KEY: Accepted X-API-Key value
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_DB_PATH = "./data/cronops.db"
DEFAULT_OCCURRENCE_COUNT = 5
MAX_OCCURRENCE_COUNT = 50


# =============================================================================
# Environment helpers
# =============================================================================

def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    val = os.getenv(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_int(key: str, default: int) -> int:
    """Get integer value from environment variable."""
    val = os.getenv(key)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            logger.warning(f"[Settings] Invalid integer for {key}: {val}, using default: {default}")
    return default


# =============================================================================
# Paths
# =============================================================================

def get_project_root() -> Path:
    """
    Get the project root directory.

    File is at cronops/infra/settings.py, so project root is 2 levels up.
    """
    return Path(__file__).parent.parent.parent.resolve()


def get_db_path() -> str:
    """SQLite registry path, overridable via CRONOPS_DB_PATH."""
    return os.getenv("CRONOPS_DB_PATH", DEFAULT_DB_PATH)


def get_static_dir() -> Path:
    """Static asset directory, overridable via STATIC_DIR."""
    env_path = os.getenv("STATIC_DIR")
    if env_path:
        return Path(env_path).resolve()
    return get_project_root() / "static"


def get_log_dir() -> str:
    return os.getenv("LOG_DIR", "logs")


# =============================================================================
# Server and engine
# =============================================================================

def get_host() -> str:
    return os.getenv("HOST", DEFAULT_HOST)


def get_port() -> int:
    return _get_env_int("PORT", DEFAULT_PORT)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_default_occurrence_count() -> int:
    """
    Occurrences returned by a conversion when the request names none.

    Clamped to 1..MAX_OCCURRENCE_COUNT.
    """
    count = _get_env_int("DEFAULT_OCCURRENCE_COUNT", DEFAULT_OCCURRENCE_COUNT)
    if count < 1 or count > MAX_OCCURRENCE_COUNT:
        logger.warning(
            f"[Settings] DEFAULT_OCCURRENCE_COUNT={count} outside 1..{MAX_OCCURRENCE_COUNT}, "
            f"using {DEFAULT_OCCURRENCE_COUNT}"
        )
        return DEFAULT_OCCURRENCE_COUNT
    return count


def is_api_auth_enabled() -> bool:
    return _get_env_bool("API_AUTH_ENABLED", False)


def get_api_key() -> str:
    """Expected X-API-Key value. Never included in get_all_settings()."""
    return os.getenv("API_KEY", "")


def should_seed_presets() -> bool:
    """Whether a freshly created registry gets the preset expressions."""
    return _get_env_bool("CRONOPS_SEED_PRESETS", True)


def get_all_settings() -> dict:
    """
    All settings as a dictionary.

    Useful for debugging and configuration display.
    """
    return {
        "host": get_host(),
        "port": get_port(),
        "db_path": get_db_path(),
        "static_dir": get_static_dir(),
        "log_level": get_log_level(),
        "log_dir": get_log_dir(),
        "default_occurrence_count": get_default_occurrence_count(),
        "api_auth_enabled": is_api_auth_enabled(),
        "seed_presets": should_seed_presets(),
    }
