"""
Environment-based configuration for the object storage client.

Settings are read from ``UTHO_*`` environment variables and, when present,
from a ``.env`` file in the working directory.
"""

from typing import Any

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..configs import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_MS

logger = structlog.get_logger(__name__)


class StorageSettings(BaseSettings):
    """Client settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UTHO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    token: str | None = None
    access_key: str | None = None
    secret_key: str | None = None

    # Connection
    timeout: int = DEFAULT_TIMEOUT_MS
    endpoint: str = DEFAULT_ENDPOINT

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def has_credentials(self) -> bool:
        if self.token and self.token.strip():
            return True
        return bool(
            self.access_key and self.access_key.strip()
            and self.secret_key and self.secret_key.strip()
        )

    def get_client_config(self) -> dict[str, Any]:
        """Get client configuration as a dictionary."""
        return {
            "token": self.token,
            "access_key": self.access_key,
            "secret_key": self.secret_key,
            "timeout": self.timeout,
            "endpoint": self.endpoint,
        }


# Global settings instance
_settings: StorageSettings | None = None


def get_settings() -> StorageSettings:
    """Get the cached settings instance."""
    global _settings
    if _settings is None:
        _settings = StorageSettings()
        logger.info("Loaded storage settings", endpoint=_settings.endpoint, has_credentials=_settings.has_credentials)
    return _settings


def reload_settings() -> StorageSettings:
    """Re-read settings from the environment."""
    global _settings
    _settings = StorageSettings()
    logger.info("Reloaded storage settings", endpoint=_settings.endpoint, has_credentials=_settings.has_credentials)
    return _settings
