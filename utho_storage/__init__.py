"""
Async client for Utho object storage.

This package wraps the Utho object storage REST API: bucket lifecycle,
access-key management, bucket policies and permissions, and file/directory
operations including multipart uploads and sharable download links.
"""

__version__ = "1.0.0"

from .base import (
    ApiError,
    ConfigurationError,
    InvalidArgumentError,
    TransportError,
    UthoError,
    configure_logging,
)
from .client import UthoObjectStorage
from .configs import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_MS, ClientConfig, build_auth_headers
from .enums import AccessKeyStatus, AccessPolicy, AuthType, DurationPresets, ObjectType, PermissionLevel
from .factories import create_client
from .models import (
    AccessKey,
    Bucket,
    CreateAccessKeyRequest,
    CreateBucketRequest,
    CreateDirectoryRequest,
    ModifyAccessKeyRequest,
    ObjectEntry,
    ObjectStoragePlan,
)
from .upload import BytesContent, FileContent, UploadContent, UploadForm, build_upload_form, split_path

__all__ = [
    "__version__",
    # Client
    "UthoObjectStorage",
    "ClientConfig",
    "build_auth_headers",
    "DEFAULT_ENDPOINT",
    "DEFAULT_TIMEOUT_MS",
    # Factory functions
    "create_client",
    # Data models and enums
    "Bucket",
    "AccessKey",
    "ObjectEntry",
    "ObjectStoragePlan",
    "CreateBucketRequest",
    "CreateAccessKeyRequest",
    "ModifyAccessKeyRequest",
    "CreateDirectoryRequest",
    "AuthType",
    "AccessPolicy",
    "PermissionLevel",
    "AccessKeyStatus",
    "ObjectType",
    "DurationPresets",
    # Upload builder
    "BytesContent",
    "FileContent",
    "UploadContent",
    "UploadForm",
    "build_upload_form",
    "split_path",
    # Exceptions
    "UthoError",
    "ConfigurationError",
    "InvalidArgumentError",
    "TransportError",
    "ApiError",
    # Logging
    "configure_logging",
]
