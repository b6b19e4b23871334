#!/usr/bin/env python3
"""Run the basic object operations against the configured bucket.

Usage:
  .venv/bin/python scripts/storage_demo.py --backend s3
  .venv/bin/python scripts/storage_demo.py --backend gcs --timeout 30 --show-metrics

Settings come from the environment (or .env): S3_BUCKET, S3_PREFIX, S3_REGION,
S3_ENDPOINT_URL, S3_ACCESS_KEY_ID, S3_SECRET_ACCESS_KEY for S3 and GCS_BUCKET,
GCS_PREFIX for GCS (with Application Default Credentials).
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from prometheus_client import generate_latest

from object_storage.common.config import Settings, get_settings
from object_storage.common.logging import setup_logging
from object_storage.infra.storage import (
    OperationContext,
    StorageBackend,
    StorageBackendNotConfiguredError,
    StorageError,
    build_storage_backend,
)

logger = logging.getLogger("object_storage.cli")

TEST_PATH = "test/hello.txt"
COPY_PATH = "test/hello-copy.txt"
TEST_CONTENT = b"Hello, World! This is a test file."


def _new_context(settings: Settings) -> OperationContext:
    if settings.STORAGE_OPERATION_TIMEOUT:
        return OperationContext.with_timeout(settings.STORAGE_OPERATION_TIMEOUT)
    return OperationContext.background()


def run_demo(backend: StorageBackend, settings: Settings, provider_name: str) -> None:
    print(f"\n=== {provider_name} Storage Operations ===\n")

    print(f"1. Uploading object to '{TEST_PATH}'...")
    backend.put_object(_new_context(settings), TEST_PATH, TEST_CONTENT)
    print("   Object uploaded successfully")

    print(f"\n2. Retrieving object from '{TEST_PATH}'...")
    obj = backend.get_object(_new_context(settings), TEST_PATH)
    print(f"   Content: {obj.content.decode('utf-8', errors='replace')}")
    print(f"   Last Modified: {obj.last_modified}")

    print("\n3. Listing objects in 'test/' prefix...")
    objects = backend.list_objects(_new_context(settings), "test/")
    print(f"   Found {len(objects)} object(s):")
    for item in objects:
        print(f"     - {item.path} (modified: {item.last_modified})")

    print(f"\n4. Copying object to '{COPY_PATH}'...")
    backend.copy_object(_new_context(settings), TEST_PATH, COPY_PATH)
    print("   Object copied successfully")

    print("\n5. Cleaning up - deleting test objects...")
    backend.delete_object(_new_context(settings), TEST_PATH)
    print(f"   Deleted '{TEST_PATH}'")
    backend.delete_object(_new_context(settings), COPY_PATH)
    print(f"   Deleted '{COPY_PATH}'")

    print(f"\n=== {provider_name} Operations Complete ===")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Exercise the object storage backends")
    parser.add_argument(
        "--backend",
        choices=["s3", "gcs"],
        default=None,
        help="Override STORAGE_BACKEND",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Deadline in seconds for each operation (default: STORAGE_OPERATION_TIMEOUT)",
    )
    parser.add_argument(
        "--show-metrics",
        action="store_true",
        help="Print the Prometheus metrics collected during the run",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.backend:
        overrides["STORAGE_BACKEND"] = args.backend
    if args.timeout is not None:
        overrides["STORAGE_OPERATION_TIMEOUT"] = args.timeout
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    setup_logging(settings.LOG_LEVEL)

    try:
        backend = build_storage_backend(settings, ctx=_new_context(settings))
        run_demo(backend, settings, settings.STORAGE_BACKEND.upper())
    except StorageBackendNotConfiguredError as exc:
        logger.error("storage backend is not configured: %s", exc)
        return 1
    except StorageError as exc:
        logger.error(
            "storage operation failed code=%s status=%s error=%s",
            exc.code,
            exc.status_code,
            exc,
        )
        return 1
    finally:
        if args.show_metrics:
            print(generate_latest().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
