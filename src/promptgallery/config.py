"""Configuration management for the promptgallery application.

Values are read from environment variables first and Streamlit secrets second,
so the same code runs under ``streamlit run`` (secrets.toml) and from the
command-line tasks (.env / environment).
"""

import os
from typing import Any

import streamlit as st

from .error_handling import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local", "test")

METADATA_BACKENDS = ("supabase", "duckdb")
STORAGE_BACKENDS = ("supabase", "gcs")
AUTH_BACKENDS = ("supabase", "development")


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables or Streamlit secrets.

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

        if value is None:
            try:
                value = st.secrets.get(key)
            except Exception:  # nosec B110
                # No secrets.toml outside a Streamlit run
                pass

        # Misses are not cached so each caller's default applies
        if value is None:
            return default

        try:
            if cast_type is bool:
                if isinstance(value, str):
                    value = value.lower() in ("true", "1", "yes", "on")
                else:
                    value = bool(value)
            elif cast_type is not str:
                value = cast_type(value)
            else:
                value = str(value)
        except (ValueError, TypeError) as e:
            logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
            return default

        self._cache[cache_key] = value
        return value

    def get_required(self, key: str, cast_type: type = str) -> Any:
        """Get required configuration value.

        Raises:
            ConfigurationError: If the value is missing or empty
        """
        value = self.get(key, cast_type=cast_type)
        if value is None or value == "":
            raise ConfigurationError(f"Required configuration '{key}' not found", details={"key": key})
        return value

    def get_choice(self, key: str, choices: tuple[str, ...], default: str) -> str:
        """Get a lower-cased value that must be one of ``choices``.

        Raises:
            ConfigurationError: If the value is not one of the allowed choices
        """
        value = str(self.get(key, default)).strip().lower()
        if value not in choices:
            raise ConfigurationError(
                f"Configuration '{key}' must be one of {', '.join(choices)}, got '{value}'",
                details={"key": key, "value": value, "choices": list(choices)},
            )
        return value

    def is_development(self) -> bool:
        """Check if running in development mode."""
        return str(self.get("ENVIRONMENT", "development")).lower() in DEVELOPMENT_ENVIRONMENTS

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return str(self.get("ENVIRONMENT", "development")).lower() in ("production", "prod")

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()

    # Backend settings

    @property
    def supabase_url(self) -> str:
        return str(self.get_required("SUPABASE_URL"))

    @property
    def supabase_key(self) -> str:
        return str(self.get_required("SUPABASE_KEY"))

    @property
    def cards_table(self) -> str:
        return str(self.get("CARDS_TABLE", "cards"))

    @property
    def images_bucket(self) -> str:
        return str(self.get("IMAGES_BUCKET", "images"))

    @property
    def metadata_backend(self) -> str:
        return self.get_choice("METADATA_BACKEND", METADATA_BACKENDS, "supabase")

    @property
    def storage_backend(self) -> str:
        return self.get_choice("STORAGE_BACKEND", STORAGE_BACKENDS, "supabase")

    @property
    def auth_backend(self) -> str:
        backend = self.get_choice("AUTH_BACKEND", AUTH_BACKENDS, "supabase")
        if backend == "development" and not self.is_development():
            raise ConfigurationError(
                "AUTH_BACKEND=development is only allowed in development environments",
                details={"environment": self.get("ENVIRONMENT", "development")},
            )
        return backend

    @property
    def duckdb_path(self) -> str:
        return str(self.get("DUCKDB_PATH", "data/promptgallery.duckdb"))

    @property
    def gcs_bucket(self) -> str:
        return str(self.get_required("GCS_BUCKET"))

    @property
    def gcs_project(self) -> str | None:
        return self.get("GOOGLE_CLOUD_PROJECT")

    @property
    def dev_admin_email(self) -> str:
        return str(self.get("DEV_ADMIN_EMAIL", ""))

    @property
    def dev_admin_password(self) -> str:
        return str(self.get("DEV_ADMIN_PASSWORD", ""))


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get a configuration value through the global instance."""
    return get_config().get(key, default, cast_type)


def is_development() -> bool:
    """Check if running in development mode."""
    return get_config().is_development()
