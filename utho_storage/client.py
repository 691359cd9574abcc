"""
Utho object storage client.

This module provides the UthoObjectStorage class, an async client for the
Utho object storage REST API: bucket lifecycle, access keys, bucket policies
and permissions, and file/directory operations.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from . import __version__
from .base import ApiError, InvalidArgumentError, TransportError, UthoError
from .configs import ClientConfig, build_auth_headers
from .enums import AccessPolicy, DurationPresets, PermissionLevel
from .models import (
    AccessKey,
    Bucket,
    CreateAccessKeyRequest,
    CreateBucketRequest,
    CreateDirectoryRequest,
    ModifyAccessKeyRequest,
    ObjectEntry,
    ObjectStoragePlan,
    extract_url,
    unwrap_data,
    unwrap_list,
)
from .upload import BytesContent, UploadForm, build_upload_form
from .utils.file_utils import get_content_type, read_file_bytes
from .utils.validators import require_text, validate_choice, validate_duration

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": f"utho-object-storage-python/{__version__}",
}


def merge_headers(base: Mapping[str, str], body_headers: Mapping[str, str]) -> httpx.Headers:
    """Merge request headers; body headers win over base headers, case-insensitively."""
    merged = httpx.Headers(dict(base))
    merged.update(dict(body_headers))
    return merged


def parse_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when possible, text otherwise, None when empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def error_from_response(response: httpx.Response) -> ApiError:
    """Normalize a non-2xx response into an ``ApiError``."""
    payload = parse_body(response)
    code = None
    message = None
    if isinstance(payload, dict):
        code = payload.get("code")
        message = payload.get("message") or payload.get("error")
    elif isinstance(payload, str) and payload.strip():
        message = payload.strip()

    status = response.status_code
    return ApiError(
        str(message) if message else f"Request failed with status {status}",
        code=str(code) if code else f"HTTP_{status}",
        status_code=status,
        request_id=response.headers.get("x-request-id"),
        response_data=payload,
    )


def _segment(value: str, field_name: str) -> str:
    return quote(require_text(value, field_name), safe="")


class UthoObjectStorage:
    """
    Async client for Utho object storage.

    Authenticates with either a bearer token or an access key pair. Every
    call is one HTTP request; failures are raised as ``UthoError``
    subclasses and nothing is retried.

    Usage:
        async with UthoObjectStorage(token="...") as client:
            await client.put_object("innoida", "my-bucket", "hello.txt", "Hello")
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        token: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        timeout: int | None = None,
        endpoint: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Create a client.

        Args:
            config: Prebuilt configuration; keyword options are ignored when given
            token: Bearer token
            access_key: Access key, used with ``secret_key``
            secret_key: Secret key, used with ``access_key``
            timeout: Request timeout in milliseconds (default 30000)
            endpoint: API base URL, for testing or private deployments only
            transport: httpx transport override

        Raises:
            ConfigurationError: If no complete credential set is supplied
        """
        if config is None:
            config = ClientConfig.from_options(
                token=token,
                access_key=access_key,
                secret_key=secret_key,
                timeout=timeout,
                endpoint=endpoint,
            )
        self.config = config
        self.logger = logger.bind(endpoint=config.endpoint, auth_type=config.auth_type.value)

        if config.is_custom_endpoint:
            self.logger.warning(
                "custom_endpoint_configured",
                hint="custom endpoints should only be used for testing or private deployments",
            )

        self._auth_headers = build_auth_headers(config)
        self._client = httpx.AsyncClient(
            base_url=config.endpoint,
            headers=DEFAULT_HEADERS,
            timeout=config.timeout_seconds,
            transport=transport,
            event_hooks={"response": [self._raise_for_status]},
        )
        self.logger.info("Object storage client initialized", timeout_ms=config.timeout)

    async def __aenter__(self) -> "UthoObjectStorage":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._client.aclose()

    @property
    def auth_headers(self) -> Mapping[str, str]:
        return self._auth_headers

    def get_configuration(self) -> dict[str, Any]:
        """Current configuration without credentials."""
        return self.config.describe()

    # ==================== OBJECT STORAGE MANAGEMENT ====================

    async def list_buckets(self, dcslug: str) -> list[Bucket]:
        """
        List buckets in a data center.

        Args:
            dcslug: Data center slug (e.g. 'innoida')

        Returns:
            List of Bucket
        """
        payload = await self._request("GET", f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/")
        return self._parse_list(Bucket, payload)

    async def create_bucket(self, request: CreateBucketRequest) -> Bucket:
        """
        Create a bucket.

        Args:
            request: Data center, bucket name, plan size and billing cycle

        Returns:
            The created Bucket
        """
        payload = await self._request("POST", "/objectstorage/bucket/create/", json=request.model_dump())
        return self._parse_model(Bucket, unwrap_data(payload) or {}, payload)

    async def get_bucket_details(self, dcslug: str, name: str) -> Bucket:
        """
        Get a bucket.

        Raises:
            ApiError: With status_code 404 when the bucket does not exist
        """
        path = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/"
        payload = await self._request("GET", path)
        return self._parse_model(Bucket, unwrap_data(payload) or {}, payload)

    async def delete_bucket(self, dcslug: str, name: str) -> None:
        """Delete a bucket. The API does not guarantee idempotency."""
        path = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/delete/"
        await self._request("DELETE", path)

    async def list_plans(self) -> list[ObjectStoragePlan]:
        """List the available object storage plans."""
        payload = await self._request("GET", "/pricing/objectstorage/")
        return self._parse_list(ObjectStoragePlan, payload)

    # ==================== ACCESS KEY MANAGEMENT ====================

    async def list_access_keys(self, dcslug: str) -> list[AccessKey]:
        """List access keys in a data center."""
        payload = await self._request("GET", f"/objectstorage/{_segment(dcslug, 'dcslug')}/accesskeys")
        return self._parse_list(AccessKey, payload)

    async def create_access_key(self, dcslug: str, request: CreateAccessKeyRequest) -> AccessKey:
        """Create an access key."""
        payload = await self._request(
            "POST",
            f"/objectstorage/{_segment(dcslug, 'dcslug')}/accesskey/create",
            json=request.model_dump(),
        )
        return self._parse_model(AccessKey, unwrap_data(payload) or {}, payload)

    async def modify_access_key(self, dcslug: str, name: str, request: ModifyAccessKeyRequest) -> None:
        """
        Change an access key status.

        Args:
            dcslug: Data center slug
            name: Access key name
            request: Access key and its new status (enable, disable, remove)
        """
        path = f"/objectstorage/{_segment(dcslug, 'dcslug')}/accesskey/{_segment(name, 'name')}/status"
        await self._request("POST", path, json=request.model_dump(mode="json"))

    # ==================== BUCKET POLICY & PERMISSIONS ====================

    async def update_policy(self, dcslug: str, name: str, policy: AccessPolicy | str) -> None:
        """
        Update the access policy of a bucket.

        Raises:
            InvalidArgumentError: If policy is not public, private or upload
        """
        policy = validate_choice(AccessPolicy, policy, "policy")
        path = (
            f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}"
            f"/policy/{policy.value}/"
        )
        await self._request("POST", path, json={"policy": policy.value})

    async def update_permission(
        self,
        dcslug: str,
        name: str,
        permission: PermissionLevel | str,
        access_key: str,
    ) -> None:
        """
        Grant an access key a permission level on a bucket.

        Args:
            dcslug: Data center slug
            name: Bucket name
            permission: read, write, full or none
            access_key: Access key to update
        """
        permission = validate_choice(PermissionLevel, permission, "permission")
        path = (
            f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}"
            f"/permission/{permission.value}/accesskey/{_segment(access_key, 'access_key')}"
        )
        await self._request(
            "POST",
            path,
            json={"selected_permission": permission.value, "selected_key": access_key},
        )

    # ==================== FILE & DIRECTORY OPERATIONS ====================

    async def list_objects(self, dcslug: str, name: str) -> list[ObjectEntry]:
        """
        List files and directories in a bucket.

        The service is known to return an empty listing for buckets that do
        contain objects; an empty result is not proof that a bucket is empty.
        """
        path = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/objects/"
        payload = await self._request("GET", path)
        return self._parse_list(ObjectEntry, payload, "objects")

    async def create_directory(self, dcslug: str, name: str, path: str | CreateDirectoryRequest) -> None:
        """Create a directory in a bucket."""
        request = path if isinstance(path, CreateDirectoryRequest) else CreateDirectoryRequest(
            path=require_text(path, "path")
        )
        url = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/createdirectory/"
        await self._request("POST", url, json=request.model_dump())

    async def upload_file(self, dcslug: str, name: str, content: Any, path: str) -> None:
        """
        Upload content to a bucket.

        Args:
            dcslug: Data center slug
            name: Bucket name
            content: Bytes, a readable binary file handle, or an UploadContent
            path: Target path, e.g. 'folder/file.txt' or 'file.txt'

        Raises:
            InvalidArgumentError: If the content or path is unusable; raised
                before any request is made
        """
        url = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/upload/"
        form = build_upload_form(content, path)
        self.logger.info(
            "Uploading object",
            bucket=name,
            directory=form.directory or "/",
            filename=form.filename,
            size_bytes=len(form.data),
        )
        await self._request("POST", url, form=form)

    async def upload_local_file(
        self,
        dcslug: str,
        name: str,
        local_path: str | Path,
        path: str | None = None,
    ) -> None:
        """
        Upload a file from the local filesystem.

        Args:
            dcslug: Data center slug
            name: Bucket name
            local_path: File to read
            path: Target path; defaults to the local file name at bucket root,
                a trailing '/' uploads into that directory under the local name
        """
        local_path = Path(local_path)
        if not local_path.is_file():
            raise InvalidArgumentError(
                f"Not a file: {local_path}",
                field_name="local_path",
                field_value=str(local_path),
            )

        target = path or local_path.name
        if target.endswith("/"):
            target = f"{target}{local_path.name}"

        data = await read_file_bytes(local_path)
        content = BytesContent(data, filename=local_path.name, content_type=get_content_type(local_path))
        await self.upload_file(dcslug, name, content, target)

    async def get_sharable_url(
        self,
        dcslug: str,
        name: str,
        filename: str,
        expiry_time: str | DurationPresets,
    ) -> str:
        """
        Get a time-limited download link for a file.

        Args:
            dcslug: Data center slug
            name: Bucket name
            filename: File path inside the bucket
            expiry_time: '30s', '15m', '1h', '7d', '1M', '1y' or 'never';
                'never' is sent as '1y', the longest duration the API allows

        Returns:
            Sharable URL
        """
        expire = validate_duration(expiry_time)
        url = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/download"
        payload = await self._request(
            "GET",
            url,
            params={"path": require_text(filename, "filename"), "expire": expire},
        )
        return extract_url(payload)

    async def delete_file(self, dcslug: str, name: str, filename: str) -> None:
        """Delete a file from a bucket."""
        url = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/delete/object"
        # the object endpoint expects file paths with a trailing slash
        await self._request("DELETE", url, params={"path": f"{require_text(filename, 'filename')}/"})

    async def delete_directory(self, dcslug: str, name: str, directory_name: str) -> None:
        """Delete a directory from a bucket."""
        url = f"/objectstorage/{_segment(dcslug, 'dcslug')}/bucket/{_segment(name, 'name')}/delete/object"
        await self._request("DELETE", url, params={"path": require_text(directory_name, "directory_name")})

    # ==================== CONVENIENCE METHODS ====================

    async def bucket_exists(self, dcslug: str, name: str) -> bool:
        """
        Check whether a bucket exists.

        Returns:
            False when the details call answers 404, True on success

        Raises:
            UthoError: Any failure other than a 404
        """
        try:
            await self.get_bucket_details(dcslug, name)
        except ApiError as e:
            if e.is_not_found:
                return False
            raise
        return True

    async def put_object(
        self,
        dcslug: str,
        name: str,
        filename: str,
        content: str | bytes | Any,
        path: str = "",
    ) -> None:
        """
        Upload content under ``path``/``filename``.

        Text content is encoded as UTF-8.
        """
        file_path = f"{path.rstrip('/')}/{filename}" if path else filename
        if isinstance(content, str):
            content = content.encode("utf-8")
        await self.upload_file(dcslug, name, content, file_path)

    async def get_object(
        self,
        dcslug: str,
        name: str,
        filename: str,
        expiry_time: str | DurationPresets = DurationPresets.HOUR_1,
    ) -> str:
        """
        Get a download URL for a file; fetching the content is up to the caller.
        """
        return await self.get_sharable_url(dcslug, name, filename, expiry_time)

    # ==================== PRIVATE HELPER METHODS ====================

    def _parse_model(self, model: type[ModelT], data: Any, payload: Any) -> ModelT:
        """Validate one response item; a body that does not fit becomes an ApiError."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            error = ApiError(
                f"Unexpected {model.__name__} in Utho API response",
                response_data=payload,
                code="INVALID_RESPONSE",
                original_exception=e,
            )
            self.logger.error("Invalid response body", model=model.__name__, error=error.to_dict())
            raise error from e

    def _parse_list(self, model: type[ModelT], payload: Any, *keys: str) -> list[ModelT]:
        return [self._parse_model(model, item, payload) for item in unwrap_list(payload, *keys)]

    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        await response.aread()
        raise error_from_response(response)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any | None = None,
        form: UploadForm | None = None,
    ) -> Any:
        """Send one authenticated request and return the decoded body."""
        content = None
        body_headers: dict[str, str] = {}
        if form is not None:
            content, body_headers = form.encode()
        headers = merge_headers(self._auth_headers, body_headers)

        self.logger.debug("Sending request", method=method, path=path)
        try:
            response = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            error = TransportError(
                "Request to Utho API timed out",
                code="TIMEOUT",
                is_timeout=True,
                timeout_duration=self.config.timeout_seconds,
                original_exception=e,
            )
            self.logger.error("Request failed", method=method, path=path, error=error.to_dict())
            raise error from e
        except httpx.RequestError as e:
            error = TransportError(
                f"Network error calling Utho API: {e}",
                code="CONNECTION_ERROR",
                original_exception=e,
            )
            self.logger.error("Request failed", method=method, path=path, error=error.to_dict())
            raise error from e
        except UthoError as e:
            self.logger.warning(
                "Request rejected",
                method=method,
                path=path,
                status_code=e.status_code,
                code=e.code,
                request_id=e.request_id,
            )
            raise

        self.logger.debug("Request completed", method=method, path=path, status_code=response.status_code)
        return parse_body(response)
