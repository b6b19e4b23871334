"""Storage backend protocol and data types.

This module defines the interface shared by the S3 and Google Cloud Storage
backends, together with the object entity exchanged with callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from object_storage.infra.storage.context import OperationContext


@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Additional information about an object. Not populated by the backends."""

    name: str = ""
    version: str = ""


@dataclass(frozen=True, slots=True)
class StorageObject:
    """An object as seen by the caller.

    ``path`` is relative to the backend prefix. ``content`` is only filled in
    by ``get_object``; listings return metadata with empty content.
    """

    path: str
    content: bytes = b""
    last_modified: datetime | None = None
    meta: ObjectMetadata = field(default_factory=ObjectMetadata)


class StorageBackend(Protocol):
    """Protocol defining the interface for object storage backends.

    Implementations must provide all methods defined here.
    Currently implemented for Amazon S3 (and S3-compatible services) and
    Google Cloud Storage.
    """

    def get_object(self, ctx: OperationContext, path: str) -> StorageObject:
        """Retrieve a single object with its content.

        Args:
            ctx: Execution context checked before the provider call.
            path: Object path relative to the backend prefix.

        Returns:
            StorageObject with content and last-modified time.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            StorageError: If the operation fails.
        """
        ...

    def list_objects(self, ctx: OperationContext, prefix: str) -> list[StorageObject]:
        """List every object under ``prefix``, following pagination.

        Args:
            ctx: Execution context, rechecked before every page.
            prefix: Listing prefix relative to the backend prefix.

        Returns:
            Objects without content, with paths relative to the listing prefix.

        Raises:
            StorageError: If any page fails. Objects gathered before the
                failure are available as ``partial_objects``.
        """
        ...

    def put_object(self, ctx: OperationContext, path: str, content: bytes) -> None:
        """Upload ``content`` to ``path``, replacing any existing object.

        Raises:
            StorageError: If the operation fails.
        """
        ...

    def delete_object(self, ctx: OperationContext, path: str) -> None:
        """Delete the object at ``path``.

        Raises:
            ObjectNotFoundError: If the provider reports the object missing.
            StorageError: If the operation fails.
        """
        ...

    def copy_object(self, ctx: OperationContext, src_path: str, dst_path: str) -> None:
        """Copy an object to a new key within the same bucket.

        Raises:
            ObjectNotFoundError: If the source object does not exist.
            StorageError: If the operation fails.
        """
        ...
