"""Build a storage backend from application settings."""

from __future__ import annotations

import logging

from object_storage.common.config import Settings, get_settings
from object_storage.infra.storage.client import StorageBackend
from object_storage.infra.storage.context import OperationContext
from object_storage.infra.storage.gcs_backend import GCSBackend
from object_storage.infra.storage.s3_backend import S3Backend, S3Credentials

logger = logging.getLogger("object_storage.storage")


class StorageBackendNotConfiguredError(Exception):
    """Raised when the storage backend is not properly configured."""


def build_storage_backend(
    settings: Settings | None = None,
    *,
    ctx: OperationContext | None = None,
) -> StorageBackend:
    """Build the backend selected by ``STORAGE_BACKEND``.

    For S3 a custom endpoint takes precedence, then explicit credentials,
    then the default credential chain.
    """
    settings = settings or get_settings()
    if settings.STORAGE_BACKEND == "gcs":
        return _build_gcs_backend(settings, ctx or OperationContext.background())
    return _build_s3_backend(settings)


def _build_s3_backend(settings: Settings) -> S3Backend:
    if not settings.S3_BUCKET:
        raise StorageBackendNotConfiguredError("S3_BUCKET is required")

    credentials = None
    if settings.has_s3_credentials:
        credentials = S3Credentials(
            access_key_id=settings.S3_ACCESS_KEY_ID or "",
            secret_access_key=settings.S3_SECRET_ACCESS_KEY or "",
            session_token=settings.S3_SESSION_TOKEN,
        )
    timeouts = {
        "connect_timeout": settings.S3_CONNECT_TIMEOUT,
        "read_timeout": settings.S3_READ_TIMEOUT,
    }

    if settings.S3_ENDPOINT_URL:
        logger.info(
            "storage_backend_selected backend=s3 variant=endpoint endpoint=%s bucket=%s",
            settings.S3_ENDPOINT_URL,
            settings.S3_BUCKET,
        )
        return S3Backend.create_with_endpoint(
            settings.S3_BUCKET,
            settings.S3_PREFIX,
            settings.S3_REGION,
            settings.S3_ENDPOINT_URL,
            settings.S3_DISABLE_SSL,
            credentials,
            **timeouts,
        )
    if credentials is not None:
        logger.info(
            "storage_backend_selected backend=s3 variant=credentials bucket=%s",
            settings.S3_BUCKET,
        )
        return S3Backend.create_with_credentials(
            settings.S3_BUCKET,
            settings.S3_PREFIX,
            settings.S3_REGION,
            settings.S3_DISABLE_SSL,
            credentials,
            **timeouts,
        )
    logger.info(
        "storage_backend_selected backend=s3 variant=default_chain bucket=%s",
        settings.S3_BUCKET,
    )
    return S3Backend.create(
        settings.S3_BUCKET,
        settings.S3_PREFIX,
        settings.S3_REGION,
        settings.S3_DISABLE_SSL,
        **timeouts,
    )


def _build_gcs_backend(settings: Settings, ctx: OperationContext) -> GCSBackend:
    if not settings.GCS_BUCKET:
        raise StorageBackendNotConfiguredError("GCS_BUCKET is required")
    logger.info(
        "storage_backend_selected backend=gcs variant=adc bucket=%s",
        settings.GCS_BUCKET,
    )
    return GCSBackend.create(
        ctx,
        settings.GCS_BUCKET,
        settings.GCS_PREFIX,
        project=settings.GCS_PROJECT,
        call_timeout=settings.GCS_CALL_TIMEOUT,
    )
