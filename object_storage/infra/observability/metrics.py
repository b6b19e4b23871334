import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

# Labels stay low-cardinality: object keys are never used as label values
OPERATIONS = Counter(
    "object_storage_operations_total",
    "Total object storage operations",
    ["provider", "operation", "outcome"],
)

LATENCY = Histogram(
    "object_storage_operation_duration_seconds",
    "Object storage operation latency in seconds",
    ["provider", "operation"],
)


@contextmanager
def track_operation(provider: str, operation: str) -> Iterator[None]:
    start = time.perf_counter()
    outcome = "success"
    try:
        yield
    except Exception as exc:
        outcome = "not_found" if getattr(exc, "not_found", False) else "error"
        raise
    finally:
        LATENCY.labels(provider=provider, operation=operation).observe(
            time.perf_counter() - start
        )
        OPERATIONS.labels(
            provider=provider, operation=operation, outcome=outcome
        ).inc()
