"""Configuration management for the photogallery backend.

Configuration comes from environment variables, optionally seeded from a
``.env`` file by the server and CLI entry points (see ``load_env_file``).
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .logging_config import get_logger

logger = get_logger(__name__)

DEVELOPMENT_ADMIN_PASSWORD = "admin123"


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        value = os.getenv(key)
        if value is None or value == "":
            value = default

        if value is not None:
            try:
                if cast_type is bool:
                    if isinstance(value, str):
                        value = value.lower() in ("true", "1", "yes", "on")  # type: ignore[assignment]
                    else:
                        value = bool(value)  # type: ignore[assignment]
                elif cast_type is not str:
                    value = cast_type(value)
            except (ValueError, TypeError) as e:
                logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                value = default

        self._cache[cache_key] = value
        return value

    def get_required(self, key: str, cast_type: type = str) -> Any:
        """Get required configuration value.

        Raises:
            ValueError: If the required configuration is not found
        """
        value = self.get(key, cast_type=cast_type)
        if value is None:
            raise ValueError(f"Required configuration '{key}' not found")
        return value

    def is_development(self) -> bool:
        """Check if running in development mode."""
        environment = self.get("ENVIRONMENT", "development").lower()
        return environment in ["development", "dev", "local", "test"]

    def is_production(self) -> bool:
        """Check if running in production mode."""
        environment = self.get("ENVIRONMENT", "development").lower()
        return environment in ["production", "prod"]

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def load_env_file(env_file: str = ".env") -> bool:
    """Load variables from a .env file without overriding the process environment.

    Returns:
        True if the file existed and was loaded
    """
    if not Path(env_file).exists():
        return False
    load_dotenv(dotenv_path=env_file, override=False)
    get_config().clear_cache()
    logger.info("env_file_loaded", env_file=env_file)
    return True


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


def get_required_env(key: str, cast_type: type = str) -> Any:
    """Get required environment variable.

    Raises:
        ValueError: If the required environment variable is not found
    """
    return get_config().get_required(key, cast_type)


def is_development() -> bool:
    """Check if running in development mode."""
    return get_config().is_development()


def is_production() -> bool:
    """Check if running in production mode."""
    return get_config().is_production()


def get_environment() -> str:
    """Get current environment."""
    return str(get_env("ENVIRONMENT", "development"))


def get_admin_password() -> str:
    """Get the shared admin password.

    Development environments fall back to a well-known password; any other
    environment must set ADMIN_PASSWORD explicitly.
    """
    if is_development():
        return str(get_env("ADMIN_PASSWORD", DEVELOPMENT_ADMIN_PASSWORD))
    return str(get_required_env("ADMIN_PASSWORD"))


def get_metadata_db_path() -> str:
    """Get the DuckDB file backing the metadata store."""
    return str(get_env("METADATA_DB_PATH", "data/metadata.duckdb"))


def get_blob_backend() -> str:
    """Get the blob store backend name ('local' or 'gcs')."""
    return str(get_env("BLOB_BACKEND", "local")).lower()


def get_local_blob_root() -> str:
    """Get the root directory of the local blob store."""
    return str(get_env("LOCAL_BLOB_ROOT", "data/blobs"))


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins."""
    raw = str(get_env("CORS_ALLOW_ORIGINS", "*"))
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_session_cookie_secure() -> bool:
    """Whether the session cookie carries the Secure attribute."""
    return bool(get_env("SESSION_COOKIE_SECURE", True, bool))


def get_server_host() -> str:
    return str(get_env("SERVER_HOST", "0.0.0.0"))  # nosec B104


def get_server_port() -> int:
    return int(get_env("SERVER_PORT", 8000, int))


def get_thumbnail_size() -> int:
    """Edge length of the square thumbnail variant."""
    return int(get_env("THUMBNAIL_SIZE", 300, int))


def get_medium_width() -> int:
    """Maximum width of the medium variant."""
    return int(get_env("MEDIUM_WIDTH", 800, int))


def get_resize_quality() -> int:
    """JPEG/WebP quality used when re-encoding size variants."""
    return int(get_env("RESIZE_QUALITY", 85, int))
