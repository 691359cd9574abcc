"""
Argument validation for client operations.

Everything here runs before a request is built, so bad input fails fast with
``InvalidArgumentError`` and nothing reaches the network.
"""

import re
from enum import Enum
from typing import TypeVar

from ..base import InvalidArgumentError
from ..enums import DurationPresets

E = TypeVar("E", bound=Enum)


class ValidationConfig:
    """Constants for argument validation."""

    # <integer><unit>: seconds, minutes, hours, days, months, years
    DURATION_PATTERN = re.compile(r"^[1-9][0-9]*[smhdMy]$")
    NEVER = DurationPresets.NEVER.value
    # Longest bounded duration the API accepts; stands in for "never"
    MAX_DURATION = DurationPresets.YEAR_1.value


def validate_duration(duration: str | DurationPresets) -> str:
    """
    Validate a sharable link duration and return the value to send.

    Args:
        duration: ``<integer><unit>`` with unit in s, m, h, d, M, y, or ``never``

    Returns:
        The duration string for the ``expire`` query parameter; ``never`` is
        translated to the maximum bounded duration.

    Raises:
        InvalidArgumentError: If the duration does not match the grammar
    """
    value = duration.value if isinstance(duration, DurationPresets) else duration
    if not isinstance(value, str):
        raise InvalidArgumentError(
            "Duration must be a string such as '1h' or 'never'",
            field_name="duration",
            field_value=repr(value),
        )

    value = value.strip()
    if value == ValidationConfig.NEVER:
        return ValidationConfig.MAX_DURATION
    if not ValidationConfig.DURATION_PATTERN.match(value):
        raise InvalidArgumentError(
            f"Invalid duration '{value}': expected <integer><unit> with unit in s, m, h, d, M, y, or 'never'",
            field_name="duration",
            field_value=value,
        )
    return value


def validate_choice(enum_cls: type[E], value: E | str, field_name: str) -> E:
    """Coerce ``value`` to a member of ``enum_cls``."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(
            f"{field_name} must be one of: {allowed}",
            field_name=field_name,
            field_value=value,
        ) from None


def require_text(value: str, field_name: str) -> str:
    """Reject empty or non-string identifiers such as data center slugs and bucket names."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            field_value=value if isinstance(value, str) else repr(value),
        )
    return value.strip()
