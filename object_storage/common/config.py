from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

SUPPORTED_BACKENDS: tuple[str, ...] = ("s3", "gcs")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_float(value: str | None, default: float | None) -> float | None:
    if value is None or not value.strip():
        return default
    return float(value)


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


@dataclass
class Settings:
    STORAGE_BACKEND: str = "s3"
    STORAGE_OPERATION_TIMEOUT: float | None = None
    S3_BUCKET: str | None = None
    S3_PREFIX: str = ""
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_SESSION_TOKEN: str | None = None
    S3_DISABLE_SSL: bool = False
    S3_CONNECT_TIMEOUT: float = 60.0
    S3_READ_TIMEOUT: float = 60.0
    GCS_BUCKET: str | None = None
    GCS_PREFIX: str = ""
    GCS_PROJECT: str | None = None
    GCS_CALL_TIMEOUT: float = 60.0
    LOG_LEVEL: str = "INFO"

    def __post_init__(self) -> None:
        self.STORAGE_BACKEND = self.STORAGE_BACKEND.strip().lower()
        if self.STORAGE_BACKEND not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(SUPPORTED_BACKENDS)}, "
                f"got {self.STORAGE_BACKEND!r}."
            )

    @property
    def has_s3_credentials(self) -> bool:
        return bool(self.S3_ACCESS_KEY_ID and self.S3_SECRET_ACCESS_KEY)

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_BACKEND=os.environ.get("STORAGE_BACKEND", cls.STORAGE_BACKEND),
            STORAGE_OPERATION_TIMEOUT=_as_float(
                os.environ.get("STORAGE_OPERATION_TIMEOUT"),
                cls.STORAGE_OPERATION_TIMEOUT,
            ),
            S3_BUCKET=_as_optional(os.environ.get("S3_BUCKET")),
            S3_PREFIX=os.environ.get("S3_PREFIX", cls.S3_PREFIX),
            S3_REGION=os.environ.get("S3_REGION") or cls.S3_REGION,
            S3_ENDPOINT_URL=_as_optional(os.environ.get("S3_ENDPOINT_URL")),
            S3_ACCESS_KEY_ID=_as_optional(os.environ.get("S3_ACCESS_KEY_ID")),
            S3_SECRET_ACCESS_KEY=_as_optional(os.environ.get("S3_SECRET_ACCESS_KEY")),
            S3_SESSION_TOKEN=_as_optional(os.environ.get("S3_SESSION_TOKEN")),
            S3_DISABLE_SSL=_as_bool(
                os.environ.get("S3_DISABLE_SSL"), cls.S3_DISABLE_SSL
            ),
            S3_CONNECT_TIMEOUT=float(
                os.environ.get("S3_CONNECT_TIMEOUT", cls.S3_CONNECT_TIMEOUT)
            ),
            S3_READ_TIMEOUT=float(
                os.environ.get("S3_READ_TIMEOUT", cls.S3_READ_TIMEOUT)
            ),
            GCS_BUCKET=_as_optional(os.environ.get("GCS_BUCKET")),
            GCS_PREFIX=os.environ.get("GCS_PREFIX", cls.GCS_PREFIX),
            GCS_PROJECT=_as_optional(os.environ.get("GCS_PROJECT")),
            GCS_CALL_TIMEOUT=float(
                os.environ.get("GCS_CALL_TIMEOUT", cls.GCS_CALL_TIMEOUT)
            ),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL).upper(),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
