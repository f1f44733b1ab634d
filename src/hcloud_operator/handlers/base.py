"""Base handler class with common functionality for all CRD reconcilers."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

from .. import metrics
from ..constants import CONTROLLER_NAME, FINALIZER
from ..logging import log_resource_event
from ..models import RecordKey, ResourceRecord
from ..utils.errors import sanitize_exception

_T = TypeVar("_T")


class BaseHandler:
    """Base class for all CRD reconcilers with common functionality."""

    def __init__(self, kind: str):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "HcloudNetwork")
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _get_resource_context(self, target: ResourceRecord | RecordKey) -> dict[str, Any]:
        """Extract common resource context from a record or a bare key.

        Args:
            target: Record, or key when the record has not been loaded

        Returns:
            Dictionary with resource context fields
        """
        if isinstance(target, ResourceRecord):
            return {
                "name": target.key.name,
                "namespace": target.key.namespace,
                "uid": target.uid or "unknown",
            }
        return {
            "name": target.name,
            "namespace": target.namespace,
            "uid": "unknown",
        }

    def _log(
        self,
        level: int,
        target: ResourceRecord | RecordKey,
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        ctx = self._get_resource_context(target)
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        target: ResourceRecord | RecordKey,
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message.

        Args:
            target: Record or key the message is about
            message: Log message
            event: Event type (default: "info")
            reason: Reason for the event (default: "Info")
            **kwargs: Additional fields to include in the log
        """
        self._log(logging.INFO, target, message, event, reason, **kwargs)

    def log_warning(
        self,
        target: ResourceRecord | RecordKey,
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, target, message, event, reason, **kwargs)

    def log_error(
        self,
        target: ResourceRecord | RecordKey,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            target: Record or key the message is about
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()

        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__

        self._log(logging.ERROR, target, message, event, reason, **log_data)

    def ensure_finalizer(self, record: ResourceRecord) -> bool:
        """Add this controller's finalizer; True if the record changed."""
        return record.finalizers.add(FINALIZER)

    def remove_finalizer(self, record: ResourceRecord) -> bool:
        """Remove this controller's finalizer; True if the record changed."""
        return record.finalizers.remove(FINALIZER)

    def reconcile_with_metrics(self, key: RecordKey, reconcile_fn: Callable[[], _T]) -> _T:
        """Execute reconciliation with metrics and error logging.

        Args:
            key: Key of the record being reconciled
            reconcile_fn: Function to execute for reconciliation

        Returns:
            Whatever ``reconcile_fn`` returns
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            result = reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            return result
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            self.log_error(key, "Reconciliation failed", error=e, reason="ReconciliationFailed")
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)

    def record_resource_status(self, ready: bool) -> None:
        """Count the readiness outcome of a pass."""
        status = "ready" if ready else "not_ready"
        metrics.resource_status_total.labels(kind=self.kind, status=status).inc()
