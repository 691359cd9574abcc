"""
Error hierarchy and logging setup for the Utho object storage client.

Every failure surfaced by the client is a ``UthoError`` carrying the same
normalized shape (code, message, status code, request id), so callers never
have to deal with transport-library specific exceptions.
"""

import logging
from datetime import datetime, timezone
from typing import Any

import structlog


logger = structlog.get_logger(__name__)


# Error Handling Classes

class UthoError(Exception):
    """Base exception for all object storage client errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.status_code = status_code
        self.request_id = request_id
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "request_id": self.request_id,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class ConfigurationError(UthoError):
    """Missing or invalid client configuration (credentials, endpoint, timeout)."""


class InvalidArgumentError(UthoError):
    """Caller supplied an argument that cannot be sent to the API."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        field_value: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.field_value = field_value
        self.details.update({
            "field_name": field_name,
            "field_value": field_value,
        })


class TransportError(UthoError):
    """Network-level failure: timeout, DNS resolution, refused connection."""

    def __init__(
        self,
        message: str,
        is_timeout: bool = False,
        timeout_duration: float | None = None,
        **kwargs,
    ):
        kwargs.setdefault("status_code", 500)
        super().__init__(message, **kwargs)
        self.is_timeout = is_timeout
        self.timeout_duration = timeout_duration
        self.details.update({
            "is_timeout": is_timeout,
            "timeout_duration": timeout_duration,
        })


class ApiError(UthoError):
    """The API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        response_data: Any | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.response_data = response_data
        self.details.update({"response_data": response_data})

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


# Logging Configuration

def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the client.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Whether to format logs as JSON
        include_timestamp: Whether to include timestamps
    """
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
    )
    logger.debug("Logging configured", level=level, json_format=json_format)


__all__ = [
    "UthoError",
    "ConfigurationError",
    "InvalidArgumentError",
    "TransportError",
    "ApiError",
    "configure_logging",
]
