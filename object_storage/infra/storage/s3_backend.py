"""S3-compatible storage backend implementation.

This module provides a storage backend that works with AWS S3, MinIO, and
other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, BinaryIO, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from object_storage.infra.storage.calls import provider_call
from object_storage.infra.storage.client import StorageObject
from object_storage.infra.storage.context import OperationContext
from object_storage.infra.storage.errors import (
    ErrorCode,
    StorageError,
    StorageOperation,
    StorageProvider,
)
from object_storage.infra.storage.paths import (
    clean_prefix,
    listing_prefix,
    relative_path,
    resolve_key,
)

_NOT_FOUND_MARKERS = ("NoSuchKey", "NotFound", "404")


@dataclass(frozen=True, slots=True)
class S3Credentials:
    """Static credentials for an S3 client."""

    access_key_id: str
    secret_access_key: str
    session_token: str | None = None


class S3Client(Protocol):
    """Subset of the boto3 S3 client used by :class:`S3Backend`."""

    def list_objects(self, **kwargs: Any) -> dict[str, Any]: ...

    def get_object(self, **kwargs: Any) -> dict[str, Any]: ...

    def upload_fileobj(self, Fileobj: BinaryIO, Bucket: str, Key: str) -> None: ...

    def delete_object(self, **kwargs: Any) -> dict[str, Any]: ...

    def copy_object(self, **kwargs: Any) -> dict[str, Any]: ...


def is_s3_not_found(exc: BaseException) -> bool:
    """Return True if an S3 failure means the key does not exist.

    Structured ``ClientError`` fields are inspected first. Anything else falls
    back to matching the error text, which may misclassify a message that
    merely mentions "404".
    """
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        if str(error.get("Code", "")) in _NOT_FOUND_MARKERS:
            return True
        metadata = exc.response.get("ResponseMetadata", {})
        if metadata.get("HTTPStatusCode") == 404:
            return True
    text = str(exc)
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


class S3Backend:
    """S3-compatible object storage backend.

    Supports AWS S3, MinIO, and other S3-compatible services.
    All keys are resolved under the configured prefix.
    """

    provider = StorageProvider.S3

    def __init__(self, *, bucket: str, prefix: str, client: S3Client) -> None:
        """Initialize the backend around an existing client.

        Args:
            bucket: Target bucket name.
            prefix: Key prefix joined to every path; slashes are trimmed.
            client: boto3 S3 client or any object with the same methods.
        """
        self._bucket = bucket
        self._prefix = clean_prefix(prefix)
        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def prefix(self) -> str:
        return self._prefix

    @classmethod
    def create(
        cls,
        bucket: str,
        prefix: str,
        region: str,
        disable_ssl: bool,
        *,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
    ) -> "S3Backend":
        """Create a backend using the default credential chain."""
        client = cls._build_client(
            region=region,
            disable_ssl=disable_ssl,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )
        return cls(bucket=bucket, prefix=prefix, client=client)

    @classmethod
    def create_with_credentials(
        cls,
        bucket: str,
        prefix: str,
        region: str,
        disable_ssl: bool,
        credentials: S3Credentials,
        *,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
    ) -> "S3Backend":
        """Create a backend with explicit static credentials."""
        client = cls._build_client(
            region=region,
            disable_ssl=disable_ssl,
            credentials=credentials,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )
        return cls(bucket=bucket, prefix=prefix, client=client)

    @classmethod
    def create_with_endpoint(
        cls,
        bucket: str,
        prefix: str,
        region: str,
        endpoint: str,
        disable_ssl: bool,
        credentials: S3Credentials | None,
        *,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
    ) -> "S3Backend":
        """Create a backend for an S3-compatible endpoint such as MinIO.

        Path-style addressing is forced since most self-hosted services do
        not resolve bucket subdomains.
        """
        client = cls._build_client(
            region=region,
            disable_ssl=disable_ssl,
            credentials=credentials,
            endpoint_url=endpoint,
            force_path_style=True,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )
        return cls(bucket=bucket, prefix=prefix, client=client)

    @staticmethod
    def _build_client(
        *,
        region: str,
        disable_ssl: bool,
        credentials: S3Credentials | None = None,
        endpoint_url: str | None = None,
        force_path_style: bool = False,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
    ) -> Any:
        """Create a boto3 S3 client."""
        config_kwargs: dict[str, Any] = {}
        if force_path_style:
            config_kwargs["s3"] = {"addressing_style": "path"}
        if connect_timeout is not None:
            config_kwargs["connect_timeout"] = connect_timeout
        if read_timeout is not None:
            config_kwargs["read_timeout"] = read_timeout

        params: dict[str, Any] = {
            "region_name": region,
            "use_ssl": not disable_ssl,
            "config": Config(**config_kwargs),
        }
        if endpoint_url:
            params["endpoint_url"] = endpoint_url
        if credentials is not None:
            params["aws_access_key_id"] = credentials.access_key_id
            params["aws_secret_access_key"] = credentials.secret_access_key
            if credentials.session_token:
                params["aws_session_token"] = credentials.session_token

        try:
            session = boto3.session.Session()
            return session.client("s3", **params)
        except Exception as exc:
            raise StorageError.from_exception(ErrorCode.S3_CLIENT, exc) from exc

    def _call(
        self,
        ctx: OperationContext,
        operation: StorageOperation,
        key: str,
        partial: list[StorageObject] | None = None,
    ):
        return provider_call(
            ctx,
            provider=self.provider,
            operation=operation,
            key=key,
            # Upload failures are never reported as a missing object
            is_not_found=(
                None if operation is StorageOperation.PUT_OBJECT else is_s3_not_found
            ),
            partial=partial if partial is not None else (),
        )

    def get_object(self, ctx: OperationContext, path: str) -> StorageObject:
        """Retrieve an object and its content from the bucket."""
        with self._call(ctx, StorageOperation.GET_OBJECT, path):
            key = resolve_key(self._prefix, path)
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                content = body.read()
            finally:
                body.close()

        return StorageObject(
            path=path,
            content=content,
            last_modified=response.get("LastModified"),
        )

    def list_objects(self, ctx: OperationContext, prefix: str) -> list[StorageObject]:
        """List all objects under the prefix using marker-based pagination."""
        objects: list[StorageObject] = []

        with self._call(ctx, StorageOperation.LIST_OBJECTS, prefix, objects):
            full_prefix = listing_prefix(self._prefix, prefix)
            params: dict[str, Any] = {"Bucket": self._bucket, "Prefix": full_prefix}
            while True:
                ctx.raise_if_done()
                response = self._client.list_objects(**params)
                contents = response.get("Contents") or []
                for item in contents:
                    objects.append(
                        StorageObject(
                            path=relative_path(self._prefix, full_prefix, item["Key"]),
                            last_modified=item.get("LastModified"),
                        )
                    )

                if not response.get("IsTruncated") or not contents:
                    break
                params["Marker"] = contents[-1]["Key"]

        return objects

    def put_object(self, ctx: OperationContext, path: str, content: bytes) -> None:
        """Upload an object, overwriting any existing one."""
        with self._call(ctx, StorageOperation.PUT_OBJECT, path):
            key = resolve_key(self._prefix, path)
            self._client.upload_fileobj(io.BytesIO(content), self._bucket, key)

    def delete_object(self, ctx: OperationContext, path: str) -> None:
        """Delete an object from the bucket.

        S3 reports success for keys that do not exist, so a missing object
        normally does not raise ObjectNotFoundError here.
        """
        with self._call(ctx, StorageOperation.DELETE_OBJECT, path):
            key = resolve_key(self._prefix, path)
            self._client.delete_object(Bucket=self._bucket, Key=key)

    def copy_object(self, ctx: OperationContext, src_path: str, dst_path: str) -> None:
        """Copy an object to another key in the same bucket."""
        with self._call(ctx, StorageOperation.COPY_OBJECT, dst_path):
            src_key = resolve_key(self._prefix, src_path)
            dst_key = resolve_key(self._prefix, dst_path)
            self._client.copy_object(
                Bucket=self._bucket,
                CopySource={"Bucket": self._bucket, "Key": src_key},
                Key=dst_key,
            )
