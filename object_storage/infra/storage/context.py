"""Execution context passed as the first argument of every storage call.

The context carries an optional deadline and a cancellation flag. Backends
check it before each provider request; a request already in flight is left
to the SDK's own timeout handling.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

DEFAULT_CALL_TIMEOUT = 60.0


class ContextDoneError(RuntimeError):
    """Raised when an operation is attempted on a finished context."""


class OperationCancelledError(ContextDoneError):
    """Raised when the context was cancelled explicitly."""


class DeadlineExceededError(ContextDoneError, TimeoutError):
    """Raised when the context deadline has passed."""


@dataclass(frozen=True)
class OperationContext:
    """Deadline and cancellation state shared by one or more calls."""

    deadline: float | None = None
    _cancelled: threading.Event = field(
        default_factory=threading.Event, repr=False, compare=False
    )

    @classmethod
    def background(cls) -> "OperationContext":
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "OperationContext":
        if seconds < 0:
            raise ValueError("timeout must not be negative")
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or ``None`` without one."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)

    def raise_if_done(self) -> None:
        if self._cancelled.is_set():
            raise OperationCancelledError("operation context was cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError("operation context deadline exceeded")

    def call_timeout(self, default: float = DEFAULT_CALL_TIMEOUT) -> float:
        """Timeout for a single SDK call, bounded by the remaining time."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)
