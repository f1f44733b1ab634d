"""Per-pass context: correlation IDs, deadlines and cancellation."""

from __future__ import annotations

import contextvars
import threading
import time
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

from .errors import DeadlineExceeded, ReconcileCancelled

# Context variable for storing correlation ID
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(corr_id: str) -> None:
    """Set the correlation ID in the current context."""
    correlation_id.set(corr_id)


def get_correlation_id() -> str | None:
    """Get the correlation ID from the current context."""
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str | None = None) -> Iterator[str]:
    """Context manager to set a correlation ID for the duration of a block.

    Args:
        corr_id: Correlation ID to use, a random one is generated when omitted

    Yields:
        The correlation ID
    """
    corr_id = corr_id or uuid.uuid4().hex[:16]
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get a dictionary of context values."""
    ctx: dict[str, Any] = {}

    corr_id = get_correlation_id()
    if corr_id:
        ctx["correlation_id"] = corr_id

    if additional:
        ctx.update(additional)

    return ctx


class ReconcileContext:
    """Deadline and cancellation shared by every external call of one pass.

    Args:
        timeout: Seconds the whole pass may take, or None for no deadline
        stop_event: Event that cancels the pass when set
    """

    def __init__(
        self,
        timeout: float | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.stop_event = stop_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), None if unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the pass was cancelled or its deadline has passed."""
        if self.cancelled:
            raise ReconcileCancelled("reconciliation cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise DeadlineExceeded("reconciliation deadline exceeded")
