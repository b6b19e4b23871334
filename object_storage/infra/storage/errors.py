"""Storage error taxonomy.

Every failure raised by a backend is a :class:`StorageError` tagged with an
:class:`ErrorCode` naming the provider and the operation. Failures the
provider reports as a missing object are raised as
:class:`ObjectNotFoundError` (HTTP 404); everything else is internal (HTTP 500).
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from object_storage.infra.storage.client import StorageObject


class StorageProvider(str, Enum):
    GCS = "gcs"
    S3 = "s3"


class StorageOperation(str, Enum):
    INIT_CLIENT = "init_client"
    LIST_OBJECTS = "list_objects"
    GET_OBJECT = "get_object"
    PUT_OBJECT = "put_object"
    DELETE_OBJECT = "delete_object"
    COPY_OBJECT = "copy_object"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INTERNAL = "internal"

    @property
    def status_code(self) -> int:
        return 404 if self is ErrorKind.NOT_FOUND else 500


class ErrorCode(Enum):
    """Identifier and description for each provider operation."""

    GCS_CLIENT = ("ERR_OS_GCS_1000", "failed to initialise the gcs client")
    GCS_GET_OBJECTS = ("ERR_OS_GCS_1001", "error while getting objects from gcs bucket")
    GCS_GET_OBJECT = ("ERR_OS_GCS_1002", "error while getting object from gcs bucket")
    GCS_PUT_OBJECT = ("ERR_OS_GCS_1003", "error while putting object to gcs bucket")
    GCS_DELETE_OBJECT = (
        "ERR_OS_GCS_1004",
        "error while deleting object from gcs bucket",
    )
    GCS_COPY_OBJECT = ("ERR_OS_GCS_1005", "error while copying object in gcs bucket")
    S3_CLIENT = ("ERR_OS_S3_2000", "failed to initialise the s3 client")
    S3_GET_OBJECTS = ("ERR_OS_S3_2001", "error while getting objects from s3 bucket")
    S3_GET_OBJECT = ("ERR_OS_S3_2002", "error while getting object from s3 bucket")
    S3_PUT_OBJECT = ("ERR_OS_S3_2003", "error while putting object to s3 bucket")
    S3_DELETE_OBJECT = ("ERR_OS_S3_2004", "error while deleting object from s3 bucket")
    S3_COPY_OBJECT = ("ERR_OS_S3_2005", "error while copying object in s3 bucket")

    def __init__(self, code: str, description: str) -> None:
        self.code = code
        self.description = description

    @classmethod
    def lookup(
        cls, provider: StorageProvider, operation: StorageOperation
    ) -> "ErrorCode":
        return _ERROR_CODES[(provider, operation)]


_ERROR_CODES: dict[tuple[StorageProvider, StorageOperation], ErrorCode] = {
    (StorageProvider.GCS, StorageOperation.INIT_CLIENT): ErrorCode.GCS_CLIENT,
    (StorageProvider.GCS, StorageOperation.LIST_OBJECTS): ErrorCode.GCS_GET_OBJECTS,
    (StorageProvider.GCS, StorageOperation.GET_OBJECT): ErrorCode.GCS_GET_OBJECT,
    (StorageProvider.GCS, StorageOperation.PUT_OBJECT): ErrorCode.GCS_PUT_OBJECT,
    (StorageProvider.GCS, StorageOperation.DELETE_OBJECT): ErrorCode.GCS_DELETE_OBJECT,
    (StorageProvider.GCS, StorageOperation.COPY_OBJECT): ErrorCode.GCS_COPY_OBJECT,
    (StorageProvider.S3, StorageOperation.INIT_CLIENT): ErrorCode.S3_CLIENT,
    (StorageProvider.S3, StorageOperation.LIST_OBJECTS): ErrorCode.S3_GET_OBJECTS,
    (StorageProvider.S3, StorageOperation.GET_OBJECT): ErrorCode.S3_GET_OBJECT,
    (StorageProvider.S3, StorageOperation.PUT_OBJECT): ErrorCode.S3_PUT_OBJECT,
    (StorageProvider.S3, StorageOperation.DELETE_OBJECT): ErrorCode.S3_DELETE_OBJECT,
    (StorageProvider.S3, StorageOperation.COPY_OBJECT): ErrorCode.S3_COPY_OBJECT,
}


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        error_code: ErrorCode,
        partial_objects: Iterable["StorageObject"] = (),
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.partial_objects: tuple["StorageObject", ...] = tuple(partial_objects)

    @property
    def code(self) -> str:
        return self.error_code.code

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND

    @classmethod
    def from_exception(
        cls,
        error_code: ErrorCode,
        exc: BaseException,
        *,
        not_found: bool = False,
        partial_objects: Iterable["StorageObject"] = (),
    ) -> "StorageError":
        """Build the error for a failed provider call.

        The caller is expected to raise the result ``from exc``.
        """
        error_cls = ObjectNotFoundError if not_found else StorageError
        return error_cls(
            f"{error_code.description}: {exc}",
            error_code=error_code,
            partial_objects=partial_objects,
        )


class ObjectNotFoundError(StorageError):
    """Raised when the provider reports that the object does not exist."""

    kind = ErrorKind.NOT_FOUND
