"""Object storage abstraction layer.

This module provides a protocol-based abstraction for object storage backends,
with implementations for Amazon S3 (and S3-compatible services such as MinIO)
and Google Cloud Storage.
"""

from .client import ObjectMetadata, StorageBackend, StorageObject
from .context import (
    ContextDoneError,
    DeadlineExceededError,
    OperationCancelledError,
    OperationContext,
)
from .errors import (
    ErrorCode,
    ErrorKind,
    ObjectNotFoundError,
    StorageError,
    StorageOperation,
    StorageProvider,
)
from .factory import StorageBackendNotConfiguredError, build_storage_backend
from .gcs_backend import GCSBackend
from .paths import KeyOutsidePrefixError
from .s3_backend import S3Backend, S3Credentials

__all__ = [
    "ContextDoneError",
    "DeadlineExceededError",
    "ErrorCode",
    "ErrorKind",
    "GCSBackend",
    "KeyOutsidePrefixError",
    "ObjectMetadata",
    "ObjectNotFoundError",
    "OperationCancelledError",
    "OperationContext",
    "S3Backend",
    "S3Credentials",
    "StorageBackend",
    "StorageBackendNotConfiguredError",
    "StorageError",
    "StorageObject",
    "StorageOperation",
    "StorageProvider",
    "build_storage_backend",
]
