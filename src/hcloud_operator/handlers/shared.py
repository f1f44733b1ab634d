"""Shared utilities for kopf handlers."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from .. import metrics
from ..config import OperatorConfig
from ..controller import get_controller
from ..models import RecordKey
from ..utils.errors import ReconcileError, sanitize_exception

logger = logging.getLogger(__name__)

# Retry delay for handlers called before the startup handler built the controller
STARTUP_RETRY_DELAY_SECONDS = 5.0


def drift_check_interval() -> float:
    """Timer interval for periodic drift checks.

    Timers are registered when the handler modules are imported, before the
    startup handler loads the configuration, so the value is read here.
    """
    return OperatorConfig.from_env().drift_check_interval_seconds


def record_key(kind: str, meta: dict[str, Any]) -> RecordKey:
    """Build the key of the object a handler was called for."""
    return RecordKey(kind, meta.get("namespace") or "default", meta["name"])


def reconcile_record(kind: str, meta: dict[str, Any], retry: int = 0) -> None:
    """Reconcile the object a kopf handler was called for.

    Args:
        kind: Resource kind of the object
        meta: Object metadata
        retry: Number of failed attempts kopf has made for this handler

    Raises:
        kopf.TemporaryError: If the pass failed or drift remains, with the
            delay after which kopf should call the handler again
    """
    key = record_key(kind, meta)
    controller = get_controller()
    if controller is None:
        raise kopf.TemporaryError(f"controller not started, cannot reconcile {key}", delay=STARTUP_RETRY_DELAY_SECONDS)

    try:
        result = controller.reconcile(key)
    except ReconcileError as e:
        delay = controller.retry_delay(retry)
        metrics.reconcile_retry_total.labels(kind=kind, reason=e.reason).inc()
        logger.warning(f"Reconciling {key} failed, retrying in {delay:.1f}s: {sanitize_exception(e)}")
        raise kopf.TemporaryError(sanitize_exception(e), delay=delay) from e

    if result.pending:
        metrics.reconcile_retry_total.labels(kind=kind, reason="Progressing").inc()
        raise kopf.TemporaryError(f"{key} is still converging", delay=result.requeue_after)


def finalize_record(kind: str, meta: dict[str, Any], retry: int = 0) -> None:
    """Run the deletion pass of an object and forget it once released."""
    reconcile_record(kind, meta, retry)
    controller = get_controller()
    if controller is not None:
        controller.forget(record_key(kind, meta))
