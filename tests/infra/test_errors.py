"""Tests for the storage error taxonomy."""

import pytest

from object_storage.infra.storage.client import StorageObject
from object_storage.infra.storage.errors import (
    ErrorCode,
    ErrorKind,
    ObjectNotFoundError,
    StorageError,
    StorageOperation,
    StorageProvider,
)


def test_every_provider_operation_has_a_distinct_code():
    codes = {
        ErrorCode.lookup(provider, operation)
        for provider in StorageProvider
        for operation in StorageOperation
    }

    assert codes == set(ErrorCode)
    assert len({code.code for code in ErrorCode}) == len(ErrorCode)


@pytest.mark.parametrize(
    ("provider", "operation", "code"),
    [
        (StorageProvider.GCS, StorageOperation.INIT_CLIENT, "ERR_OS_GCS_1000"),
        (StorageProvider.GCS, StorageOperation.COPY_OBJECT, "ERR_OS_GCS_1005"),
        (StorageProvider.S3, StorageOperation.LIST_OBJECTS, "ERR_OS_S3_2001"),
        (StorageProvider.S3, StorageOperation.DELETE_OBJECT, "ERR_OS_S3_2004"),
    ],
)
def test_lookup(provider, operation, code):
    assert ErrorCode.lookup(provider, operation).code == code


def test_from_exception_internal():
    cause = RuntimeError("boom")

    error = StorageError.from_exception(ErrorCode.S3_PUT_OBJECT, cause)

    assert type(error) is StorageError
    assert error.kind is ErrorKind.INTERNAL
    assert error.status_code == 500
    assert not error.not_found
    assert error.code == "ERR_OS_S3_2003"
    assert str(error) == "error while putting object to s3 bucket: boom"
    assert error.partial_objects == ()


def test_from_exception_not_found():
    error = StorageError.from_exception(
        ErrorCode.GCS_GET_OBJECT, RuntimeError("missing"), not_found=True
    )

    assert isinstance(error, ObjectNotFoundError)
    assert error.kind is ErrorKind.NOT_FOUND
    assert error.status_code == 404
    assert error.not_found


def test_partial_objects_are_snapshotted():
    objects = [StorageObject(path="a")]

    error = StorageError.from_exception(
        ErrorCode.S3_GET_OBJECTS, RuntimeError("x"), partial_objects=objects
    )
    objects.append(StorageObject(path="b"))

    assert [obj.path for obj in error.partial_objects] == ["a"]
