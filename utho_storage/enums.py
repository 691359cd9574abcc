"""
Enums for the object storage client.

This module contains enums for authentication modes, bucket policies,
access-key permissions and statuses, and sharable link durations.
"""

from enum import Enum


class AuthType(str, Enum):
    """Authentication mode resolved from the client configuration."""

    BEARER = "bearer"
    ACCESS_KEY = "accesskey"


class AccessPolicy(str, Enum):
    """Bucket access policies."""

    PUBLIC = "public"
    PRIVATE = "private"
    UPLOAD = "upload"


class PermissionLevel(str, Enum):
    """Permission an access key can hold on a bucket."""

    READ = "read"
    WRITE = "write"
    FULL = "full"
    NONE = "none"


class AccessKeyStatus(str, Enum):
    """Status transitions accepted by the access key endpoint."""

    ENABLE = "enable"
    DISABLE = "disable"
    REMOVE = "remove"


class ObjectType(str, Enum):
    """Kind of entry returned by an object listing."""

    FILE = "file"
    DIRECTORY = "directory"


class DurationPresets(str, Enum):
    """Common sharable link durations."""

    SECONDS_30 = "30s"
    MINUTES_15 = "15m"
    HOUR_1 = "1h"
    DAY_1 = "1d"
    WEEK_1 = "7d"
    MONTH_1 = "1M"
    YEAR_1 = "1y"
    NEVER = "never"  # sent to the API as the longest bounded duration
