"""
Models for the object storage API.

Response models are passthrough shapes owned by the remote service: unknown
fields are kept and numbers are accepted where strings are documented.
Request models describe the JSON bodies sent by the client.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import AccessKeyStatus, ObjectType


class _ResponseModel(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class Bucket(_ResponseModel):
    """Object storage bucket."""

    name: str | None = None
    dcslug: str | None = None
    planid: str | None = None
    size: str | None = None
    billing: str | None = None
    status: str | None = None
    created_at: str | None = None


class AccessKey(_ResponseModel):
    """Access key credentials and status."""

    name: str | None = None
    key: str | None = None
    secret: str | None = None
    status: str | None = None
    created_at: str | None = None


class ObjectEntry(_ResponseModel):
    """
    File or directory entry inside a bucket.

    ``type`` is an ObjectType for known kinds and the raw string otherwise;
    ``size`` is an int when numeric and the raw string (e.g. "1.5 KB") otherwise.
    """

    name: str | None = None
    type: ObjectType | str | None = Field(None, union_mode="left_to_right")
    size: int | str | None = Field(None, union_mode="left_to_right")
    modified: str | None = None
    path: str | None = None

    @property
    def is_directory(self) -> bool:
        return self.type == ObjectType.DIRECTORY


class ObjectStoragePlan(_ResponseModel):
    """Pricing plan for object storage."""

    id: str | None = None
    name: str | None = None
    storage: str | None = None
    price: float | str | None = Field(None, union_mode="left_to_right")


# Request models

class CreateBucketRequest(BaseModel):
    """Request body to create a bucket."""

    dcslug: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1, description="Plan ID")
    billing: str = Field(..., min_length=1, description="Billing cycle")


class CreateAccessKeyRequest(BaseModel):
    """Request body to create an access key."""

    accesskey: str = Field(..., min_length=1)


class ModifyAccessKeyRequest(BaseModel):
    """Request body to change an access key status."""

    accesskey: str = Field(..., min_length=1)
    status: AccessKeyStatus


class CreateDirectoryRequest(BaseModel):
    """Request body to create a directory."""

    path: str = Field(..., min_length=1)


# Response envelope handling

def unwrap_data(payload: Any) -> Any:
    """Return ``payload["data"]`` for enveloped responses, the payload otherwise."""
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def unwrap_list(payload: Any, *keys: str) -> list[Any]:
    """
    Normalize a listing response to a list.

    ``keys`` are checked in order before the ``data`` envelope, for endpoints
    that name their collection differently.
    """
    if isinstance(payload, dict):
        for key in keys:
            if payload.get(key) is not None:
                payload = payload[key]
                break
        else:
            payload = unwrap_data(payload)

    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def extract_url(payload: Any) -> str:
    """Pull the download URL out of a sharable link response."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        for key in ("url", "download_url"):
            if payload.get(key):
                return str(payload[key])
        data = payload.get("data")
        if isinstance(data, str) and data:
            return data
        if isinstance(data, dict):
            for key in ("url", "download_url"):
                if data.get(key):
                    return str(data[key])
    return json.dumps(payload)
