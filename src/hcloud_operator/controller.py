"""Controller wiring: one reconciler per kind, driven by kopf handlers."""

from __future__ import annotations

import logging
import threading

from .config import OperatorConfig
from .kinds import RESOURCE_KINDS
from .models import RecordKey
from .reconciler import Reconciler, ReconcileResult
from .services.hcloud.base import ResourceProvider
from .services.kubernetes.store import RecordStore
from .utils.context import ReconcileContext

logger = logging.getLogger(__name__)

_controller: Controller | None = None


class Controller:
    """Routes keys to the reconciler of their kind.

    kopf may run a timer and a change handler of the same object at the same
    time in different threads, so passes for one key are serialised here.
    """

    def __init__(
        self,
        config: OperatorConfig,
        store: RecordStore,
        providers: dict[str, ResourceProvider],
    ) -> None:
        self.config = config
        self.reconcilers: dict[str, Reconciler] = {
            kind: Reconciler(
                resource_kind,
                store,
                providers.get(kind),
                drift_interval=config.drift_check_interval_seconds,
                pending_requeue=config.pending_requeue_seconds,
            )
            for kind, resource_kind in RESOURCE_KINDS.items()
        }
        self.stop_event = threading.Event()
        self._locks: dict[RecordKey, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def ready(self) -> bool:
        return not self.stop_event.is_set()

    def _lock_for(self, key: RecordKey) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def reconcile(self, key: RecordKey) -> ReconcileResult:
        """Run one pass for ``key`` under its lock and the configured deadline.

        Raises:
            ValueError: If no reconciler handles ``key.kind``
            ReconcileError: If the pass failed
        """
        reconciler = self.reconcilers.get(key.kind)
        if reconciler is None:
            raise ValueError(f"no reconciler registered for kind {key.kind}")

        ctx = ReconcileContext(timeout=self.config.reconcile_timeout_seconds, stop_event=self.stop_event)
        with self._lock_for(key):
            return reconciler.reconcile(key, ctx)

    def forget(self, key: RecordKey) -> None:
        """Drop the lock of a record that no longer exists."""
        with self._locks_guard:
            self._locks.pop(key, None)

    def retry_delay(self, retry: int) -> float:
        """Backoff before the next attempt after ``retry`` failed ones."""
        delay = self.config.retry_base_delay_seconds * (2 ** retry)
        return min(delay, self.config.retry_max_delay_seconds)

    def stop(self) -> None:
        """Cancel in-flight passes."""
        self.stop_event.set()
        logger.info("Controller stopped")


def get_controller() -> Controller | None:
    """Return the running controller, None before startup."""
    return _controller


def set_controller(controller: Controller | None) -> None:
    global _controller
    _controller = controller
