"""
Client configuration and authentication header derivation.

A ``ClientConfig`` is validated once when it is built and never changes
afterwards. The authentication headers derived from it are computed once per
client and reused for every request.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .base import ConfigurationError
from .enums import AuthType

DEFAULT_ENDPOINT = "https://api.utho.com/v2"
DEFAULT_TIMEOUT_MS = 30000


class ClientConfig(BaseModel):
    """Configuration for the Utho object storage client."""

    model_config = ConfigDict(frozen=True)

    # Option 1: bearer token
    token: str | None = Field(default=None, description="Bearer token")

    # Option 2: access key pair
    access_key: str | None = Field(default=None, description="Access key, used together with secret_key")
    secret_key: str | None = Field(default=None, description="Secret key, used together with access_key")

    timeout: int = Field(default=DEFAULT_TIMEOUT_MS, description="Request timeout in milliseconds")
    # Only override for testing environments or private deployments
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="API base URL")

    @field_validator("token", "access_key", "secret_key", mode="before")
    @classmethod
    def blank_credentials_are_missing(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("endpoint", mode="before")
    @classmethod
    def validate_endpoint(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_ENDPOINT
        if isinstance(v, str):
            v = v.strip()
            if not v.startswith(("http://", "https://")):
                raise ConfigurationError(
                    "Endpoint URL must start with http:// or https://",
                    details={"endpoint": v},
                )
            return v.rstrip("/")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        if v is None or v == 0:
            return DEFAULT_TIMEOUT_MS
        if isinstance(v, (int, float)) and v < 0:
            raise ConfigurationError("Timeout must be a positive number of milliseconds", details={"timeout": v})
        return v

    @model_validator(mode="after")
    def validate_credentials(self) -> "ClientConfig":
        if not self.token and not (self.access_key and self.secret_key):
            raise ConfigurationError(
                "Authentication required. Provide either a bearer token (token=...) "
                "or an access key pair (access_key=..., secret_key=...)",
                code="MISSING_CREDENTIALS",
            )
        return self

    @classmethod
    def from_options(cls, **options: Any) -> "ClientConfig":
        """
        Build a configuration from keyword options.

        Type errors reported by pydantic are converted to ``ConfigurationError``
        so construction only ever fails with one exception type.
        """
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid client configuration",
                details={"errors": e.errors(include_url=False, include_input=False)},
                original_exception=e,
            ) from e

    @property
    def auth_type(self) -> AuthType:
        # Bearer wins when both credential sets are present
        return AuthType.BEARER if self.token else AuthType.ACCESS_KEY

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0

    @property
    def is_custom_endpoint(self) -> bool:
        return self.endpoint != DEFAULT_ENDPOINT

    def describe(self) -> dict[str, Any]:
        """Configuration summary without credentials."""
        return {
            "endpoint": self.endpoint,
            "timeout": self.timeout,
            "auth_type": self.auth_type.value,
            "has_auth": bool(self.token or (self.access_key and self.secret_key)),
        }


def build_auth_headers(config: ClientConfig) -> Mapping[str, str]:
    """
    Derive the authentication headers for a configuration.

    Bearer mode yields only ``Authorization``; key mode yields only the
    ``X-Access-Key``/``X-Secret-Key`` pair. The result is read-only.
    """
    if config.auth_type is AuthType.BEARER:
        headers = {"Authorization": f"Bearer {config.token}"}
    else:
        headers = {
            "X-Access-Key": config.access_key,
            "X-Secret-Key": config.secret_key,
        }
    return MappingProxyType(headers)
