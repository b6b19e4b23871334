"""Wrapper applied around every provider call made by a backend."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

from object_storage.infra.observability.metrics import track_operation
from object_storage.infra.storage.client import StorageObject
from object_storage.infra.storage.context import ContextDoneError, OperationContext
from object_storage.infra.storage.errors import (
    ErrorCode,
    StorageError,
    StorageOperation,
    StorageProvider,
)
from object_storage.infra.storage.paths import KeyOutsidePrefixError

logger = logging.getLogger("object_storage.storage")


@contextmanager
def provider_call(
    ctx: OperationContext,
    *,
    provider: StorageProvider,
    operation: StorageOperation,
    key: str,
    is_not_found: Callable[[BaseException], bool] | None,
    partial: Sequence[StorageObject] = (),
) -> Iterator[None]:
    """Check the context, record metrics and translate provider failures.

    ``partial`` is read only when a failure occurs, so a listing can pass the
    list it is still filling. Without ``is_not_found`` every failure is
    internal.
    """
    error_code = ErrorCode.lookup(provider, operation)
    logger.debug(
        "storage_operation provider=%s operation=%s key=%s",
        provider.value,
        operation.value,
        key,
    )
    with track_operation(provider.value, operation.value):
        try:
            ctx.raise_if_done()
            yield
        except StorageError:
            raise
        except Exception as exc:
            not_found = (
                is_not_found is not None
                and not isinstance(exc, (ContextDoneError, KeyOutsidePrefixError))
                and is_not_found(exc)
            )
            error = StorageError.from_exception(
                error_code, exc, not_found=not_found, partial_objects=partial
            )
            logger.warning(
                "storage_operation_failed provider=%s operation=%s key=%s code=%s status=%s error=%s",
                provider.value,
                operation.value,
                key,
                error.code,
                error.status_code,
                exc,
                extra={
                    "extra": {
                        "provider": provider.value,
                        "operation": operation.value,
                        "key": key,
                        "error_code": error.code,
                        "status_code": error.status_code,
                    }
                },
            )
            raise error from exc
