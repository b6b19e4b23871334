"""Google Cloud Storage backend implementation.

Dependencies:
    - google-cloud-storage
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from object_storage.infra.storage.calls import provider_call
from object_storage.infra.storage.client import StorageObject
from object_storage.infra.storage.context import DEFAULT_CALL_TIMEOUT, OperationContext
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


class GCSBucket(Protocol):
    """Subset of ``google.cloud.storage.Bucket`` used by :class:`GCSBackend`."""

    def blob(self, blob_name: str) -> Any: ...

    def list_blobs(self, *, prefix: str | None = None, timeout: float = ...) -> Iterable[Any]: ...

    def copy_blob(
        self,
        blob: Any,
        destination_bucket: Any,
        new_name: str | None = None,
        *,
        timeout: float = ...,
    ) -> Any: ...


def is_gcs_not_found(exc: BaseException) -> bool:
    return isinstance(exc, gcs_exceptions.NotFound)


class GCSBackend:
    """Google Cloud Storage backend.

    Every call is issued with a timeout derived from the operation context.
    """

    provider = StorageProvider.GCS

    def __init__(
        self,
        *,
        bucket: GCSBucket,
        prefix: str,
        call_timeout: float = DEFAULT_CALL_TIMEOUT,
    ) -> None:
        self._bucket = bucket
        self._prefix = clean_prefix(prefix)
        self._call_timeout = call_timeout

    @property
    def prefix(self) -> str:
        return self._prefix

    @classmethod
    def create(
        cls,
        ctx: OperationContext,
        bucket: str,
        prefix: str,
        *,
        project: str | None = None,
        call_timeout: float = DEFAULT_CALL_TIMEOUT,
    ) -> "GCSBackend":
        """Create a backend using Application Default Credentials.

        Raises:
            StorageError: If the context is done or the client cannot be built.
        """
        try:
            ctx.raise_if_done()
            client = storage.Client(project=project)
            bucket_handle = client.bucket(bucket)
        except Exception as exc:
            raise StorageError.from_exception(ErrorCode.GCS_CLIENT, exc) from exc
        return cls(bucket=bucket_handle, prefix=prefix, call_timeout=call_timeout)

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
                None if operation is StorageOperation.PUT_OBJECT else is_gcs_not_found
            ),
            partial=partial if partial is not None else (),
        )

    def get_object(self, ctx: OperationContext, path: str) -> StorageObject:
        """Retrieve an object, reading its attributes before the content."""
        with self._call(ctx, StorageOperation.GET_OBJECT, path):
            blob = self._bucket.blob(resolve_key(self._prefix, path))
            blob.reload(timeout=ctx.call_timeout(self._call_timeout))
            content = blob.download_as_bytes(timeout=ctx.call_timeout(self._call_timeout))

        return StorageObject(path=path, content=content, last_modified=blob.updated)

    def list_objects(self, ctx: OperationContext, prefix: str) -> list[StorageObject]:
        """List all objects under the prefix by draining the blob iterator."""
        objects: list[StorageObject] = []

        with self._call(ctx, StorageOperation.LIST_OBJECTS, prefix, objects):
            full_prefix = listing_prefix(self._prefix, prefix)
            blobs = self._bucket.list_blobs(
                prefix=full_prefix, timeout=ctx.call_timeout(self._call_timeout)
            )
            for blob in blobs:
                ctx.raise_if_done()
                objects.append(
                    StorageObject(
                        path=relative_path(self._prefix, full_prefix, blob.name),
                        last_modified=blob.updated,
                    )
                )

        return objects

    def put_object(self, ctx: OperationContext, path: str, content: bytes) -> None:
        with self._call(ctx, StorageOperation.PUT_OBJECT, path):
            self._bucket.blob(resolve_key(self._prefix, path)).upload_from_string(
                content, timeout=ctx.call_timeout(self._call_timeout)
            )

    def delete_object(self, ctx: OperationContext, path: str) -> None:
        with self._call(ctx, StorageOperation.DELETE_OBJECT, path):
            self._bucket.blob(resolve_key(self._prefix, path)).delete(
                timeout=ctx.call_timeout(self._call_timeout)
            )

    def copy_object(self, ctx: OperationContext, src_path: str, dst_path: str) -> None:
        """Copy an object within the bucket.

        Unlike the other operations, ``src_path`` and ``dst_path`` are used as
        full object names: the configured prefix is not applied to them.
        """
        with self._call(ctx, StorageOperation.COPY_OBJECT, dst_path):
            self._bucket.copy_blob(
                self._bucket.blob(src_path),
                self._bucket,
                dst_path,
                timeout=ctx.call_timeout(self._call_timeout),
            )
