"""
Factory for creating client instances.
"""

import httpx

from ..client import UthoObjectStorage
from ..configs import ClientConfig
from ..utils.env_config import StorageSettings, get_settings


def create_client(
    settings: StorageSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UthoObjectStorage | None:
    """Create a client from settings, or None when no credentials are configured."""
    settings = settings or get_settings()
    if not settings.has_credentials:
        return None

    config = ClientConfig.from_options(**settings.get_client_config())
    return UthoObjectStorage(config, transport=transport)
