from __future__ import annotations

import pytest

from object_storage.common.config import get_settings
from object_storage.infra.storage.gcs_backend import GCSBackend
from object_storage.infra.storage.s3_backend import S3Backend
from tests.infra.mock_clients import MockGCSBucket, MockS3Client

_STORAGE_ENV_VARS = (
    "STORAGE_BACKEND",
    "STORAGE_OPERATION_TIMEOUT",
    "S3_BUCKET",
    "S3_PREFIX",
    "S3_REGION",
    "S3_ENDPOINT_URL",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_SESSION_TOKEN",
    "S3_DISABLE_SSL",
    "S3_CONNECT_TIMEOUT",
    "S3_READ_TIMEOUT",
    "GCS_BUCKET",
    "GCS_PREFIX",
    "GCS_PROJECT",
    "GCS_CALL_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep host environment and .env files out of settings-driven tests."""
    for name in _STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("object_storage.common.config.ENV_FILE", tmp_path / ".env")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def s3_client() -> MockS3Client:
    return MockS3Client()


@pytest.fixture
def gcs_bucket() -> MockGCSBucket:
    return MockGCSBucket()


@pytest.fixture(params=["s3", "gcs"])
def backend_factory(request, s3_client, gcs_bucket):
    """Build a backend of each kind around the in-memory clients."""

    def build(prefix: str = ""):
        if request.param == "s3":
            return S3Backend(bucket="test-bucket", prefix=prefix, client=s3_client)
        return GCSBackend(bucket=gcs_bucket, prefix=prefix)

    build.provider = request.param
    return build
