"""Reconciliation of one HcloudNetwork or HcloudDnsZone record.

A pass loads the record, then either drains the external resource (deletion
path) or adopts, creates, updates or merely observes it (live path), gated by
the record's sync policy. The reconciler never retries: any error is returned
to the kopf handler, which turns it into a delayed retry.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from . import metrics
from .constants import (
    ANNOTATION_SYNC_POLICY,
    FINALIZER,
    REASON_DELETION_FAILED,
    REASON_FAILED,
    REASON_INVALID_SPEC,
    REASON_INVALID_SYNC_POLICY,
    REASON_PROGRESSING,
    REASON_READY,
)
from .differ import OperationKind, UpdateOperation, diff
from .handlers.base import BaseHandler
from .kinds import ResourceKind
from .models import RecordKey, ResourceRecord
from .policy import DEFAULT_SYNC_POLICY, PolicyDecision, evaluate, lookup_sync_policy
from .services.hcloud.base import ResourceProvider
from .services.hcloud.models import ExternalResource
from .services.kubernetes.store import RecordStore
from .tracing import add_span_attribute, trace_span
from .utils.conditions import set_available_condition
from .utils.context import ReconcileContext, with_correlation_id
from .utils.errors import NotConfiguredError, ReconcileError, sanitize_error_message
from .utils.events import (
    emit_adopted,
    emit_created,
    emit_deleted,
    emit_deletion_failed,
    emit_orphaned,
    emit_reconcile_failed,
    emit_updated,
)

# Timeout for recording a failure once the pass deadline is already spent
FAILURE_WRITE_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a successful pass.

    ``requeue_after`` asks for another pass after the given number of seconds;
    None means wait for the next change. ``pending`` is set when drift remains
    after the one update a pass may apply.
    """

    requeue_after: float | None = None
    pending: bool = False


class Reconciler(BaseHandler):
    """Drives one kind of Hetzner Cloud resource toward its records' desired state."""

    def __init__(
        self,
        resource_kind: ResourceKind,
        store: RecordStore,
        provider: ResourceProvider | None,
        drift_interval: float | None = None,
        pending_requeue: float = 1.0,
    ):
        """Initialize reconciler.

        Args:
            resource_kind: Kind wiring (spec builder, status mirror)
            store: Record store
            provider: Hetzner Cloud provider, None when no API token is configured
            drift_interval: Requeue delay after a converged pass, None to disable
            pending_requeue: Requeue delay while drift remains after a pass
        """
        super().__init__(resource_kind.kind)
        self.resource_kind = resource_kind
        self.store = store
        self.provider = provider
        self.drift_interval = drift_interval
        self.pending_requeue = pending_requeue

    def reconcile(self, key: RecordKey, ctx: ReconcileContext | None = None) -> ReconcileResult:
        """Run one reconciliation pass for ``key``.

        Raises:
            ReconcileError: Any failure; the pass should be retried later
        """
        ctx = ctx or ReconcileContext()
        with with_correlation_id(), trace_span("reconcile", kind=self.kind, attributes={"resource.key": str(key)}):
            return self.reconcile_with_metrics(key, lambda: self._reconcile(key, ctx))

    def _reconcile(self, key: RecordKey, ctx: ReconcileContext) -> ReconcileResult:
        ctx.check()
        record = self.store.get(key, timeout=ctx.remaining())
        if record is None:
            self.log_info(key, "Record no longer exists, nothing to do", event="skip", reason="NotFound")
            return ReconcileResult()

        if record.deletion_requested:
            return self._reconcile_deletion(record, ctx)
        return self._reconcile_live(record, ctx)

    # Deletion path

    def _reconcile_deletion(self, record: ResourceRecord, ctx: ReconcileContext) -> ReconcileResult:
        if not record.finalizers.has(FINALIZER):
            return ReconcileResult()

        raw_policy, _ = lookup_sync_policy(record.annotations)
        decision = evaluate(raw_policy)
        external_id = record.external_id
        what = self.resource_kind.display_name

        try:
            if external_id and decision.drains_on_delete:
                existing = self._provider_call(ctx, "get_by_id", external_id)
                if existing is None:
                    self.log_info(record, f"{what} {external_id} already gone", event="delete", reason="AlreadyDeleted")
                else:
                    with trace_span("delete", kind=self.kind, attributes={"hcloud.id": external_id}):
                        self._provider_call(ctx, "delete", external_id)
                    self.log_info(record, f"Deleted {what} {external_id}", event="delete", reason="Deleted")
                    emit_deleted(record.body, what, external_id)
            elif external_id:
                self.log_info(
                    record,
                    f"Leaving {what} {external_id} in place (sync policy {decision.raw})",
                    event="delete",
                    reason="Orphaned",
                )
                emit_orphaned(record.body, what, external_id)

            self.remove_finalizer(record)
            self._persist_metadata(record, ctx)
        except Exception as e:
            self._record_failure(record, ctx, e, reason=REASON_DELETION_FAILED)
            raise

        self.log_info(record, "Finalizer removed", event="delete", reason="FinalizerRemoved")
        return ReconcileResult()

    # Live path

    def _reconcile_live(self, record: ResourceRecord, ctx: ReconcileContext) -> ReconcileResult:
        status_before = copy.deepcopy(record.status)
        try:
            result = self._converge(record, ctx)
            if record.status != status_before:
                ctx.check()
                self.store.update_status(record, timeout=ctx.remaining())
            return result
        except Exception as e:
            self._record_failure(record, ctx, e)
            raise

    def _converge(self, record: ResourceRecord, ctx: ReconcileContext) -> ReconcileResult:
        raw_policy, present = lookup_sync_policy(record.annotations)
        decision = evaluate(raw_policy)

        metadata_changed = False
        if not present:
            record.annotations[ANNOTATION_SYNC_POLICY] = DEFAULT_SYNC_POLICY.value
            metadata_changed = True
        if decision.requires_finalizer and self.ensure_finalizer(record):
            metadata_changed = True
        if metadata_changed:
            self._persist_metadata(record, ctx)

        if not decision.valid:
            self.log_warning(
                record,
                f"Unknown sync policy {decision.raw!r}, treating as read-only",
                reason=REASON_INVALID_SYNC_POLICY,
            )

        desired = self.resource_kind.build_desired(record.spec)
        observed = self._provider_call(ctx, "get_by_name", desired.name)

        add_span_attribute("sync.policy", decision.raw)
        if observed is not None:
            add_span_attribute("hcloud.id", observed.id)
            return self._reconcile_existing(record, ctx, decision, desired, observed)
        return self._reconcile_missing(record, ctx, decision, desired)

    def _reconcile_existing(
        self,
        record: ResourceRecord,
        ctx: ReconcileContext,
        decision: PolicyDecision,
        desired: Any,
        observed: ExternalResource,
    ) -> ReconcileResult:
        what = self.resource_kind.display_name
        pending: list[UpdateOperation] = []

        if decision.may_update:
            if record.external_id != observed.id:
                self.log_info(record, f"Adopting existing {what} {observed.id}", event="adopt", reason="Adopted")
                emit_adopted(record.body, what, observed.id)

            operations = diff(desired, observed)
            for operation in operations:
                metrics.drift_detected_total.labels(kind=self.kind, field=operation.field).inc()

            if operations:
                observed = self._apply(record, ctx, observed, operations[0])
                pending = diff(desired, observed)

        self._mirror(record, observed)

        if not decision.valid:
            return self._finish(
                record,
                ready=False,
                reason=REASON_INVALID_SYNC_POLICY,
                message=f"invalid sync policy {decision.raw!r}; observing {what} {observed.id} read-only",
            )
        if pending:
            fields = ", ".join(op.field for op in pending)
            return self._finish(
                record,
                ready=False,
                reason=REASON_PROGRESSING,
                message=f"{what} {observed.id} still differs in: {fields}",
                advance=False,
                requeue_after=self.pending_requeue,
                pending=True,
            )
        if decision.may_update:
            message = f"{what} {observed.id} is in sync"
        else:
            message = f"{what} {observed.id} observed (sync policy {decision.raw})"
        return self._finish(record, ready=True, reason=REASON_READY, message=message)

    def _reconcile_missing(
        self,
        record: ResourceRecord,
        ctx: ReconcileContext,
        decision: PolicyDecision,
        desired: Any,
    ) -> ReconcileResult:
        what = self.resource_kind.display_name

        if decision.may_create:
            with trace_span("create", kind=self.kind, attributes={"hcloud.name": desired.name}):
                created = self._provider_call(ctx, "create", desired)
            self.log_info(record, f"Created {what} {created.id}", event="create", reason="Created")
            emit_created(record.body, what, created.id)
            self._mirror(record, created)
            return self._finish(record, ready=True, reason=REASON_READY, message=f"{what} {created.id} created")

        self._clear_mirror(record)
        if not decision.valid:
            return self._finish(
                record,
                ready=False,
                reason=REASON_INVALID_SYNC_POLICY,
                message=f"invalid sync policy {decision.raw!r}; {what} {desired.name} not found",
            )
        return self._finish(
            record,
            ready=False,
            reason=REASON_FAILED,
            message=f"{what} {desired.name} not found and read-only",
        )

    def _apply(
        self,
        record: ResourceRecord,
        ctx: ReconcileContext,
        observed: ExternalResource,
        operation: UpdateOperation,
    ) -> ExternalResource:
        what = self.resource_kind.display_name
        with trace_span("update", kind=self.kind, attributes={"hcloud.id": observed.id, "field": operation.field}):
            if operation.kind is OperationKind.LABELS:
                updated = self._provider_call(ctx, "update_labels", observed.id, operation.payload)
            else:
                updated = self._provider_call(ctx, "update_structural", observed.id, operation.field, operation.payload)
        self.log_info(record, f"Updated {what} {observed.id} {operation.field}", event="update", reason="Updated")
        emit_updated(record.body, what, operation.field)
        return updated

    # Helpers

    def _provider_call(self, ctx: ReconcileContext, operation: str, *args: Any) -> Any:
        ctx.check()
        if self.provider is None:
            raise NotConfiguredError(f"no Hetzner Cloud API token configured for {self.kind}")

        try:
            result = getattr(self.provider, operation)(*args)
        except Exception:
            metrics.provider_operations_total.labels(kind=self.kind, operation=operation, result="error").inc()
            raise
        metrics.provider_operations_total.labels(kind=self.kind, operation=operation, result="success").inc()
        return result

    def _persist_metadata(self, record: ResourceRecord, ctx: ReconcileContext) -> None:
        ctx.check()
        self.store.update_metadata(record, timeout=ctx.remaining())

    def _mirror(self, record: ResourceRecord, resource: ExternalResource) -> None:
        self._clear_mirror(record)
        record.status.update(self.resource_kind.mirror_status(resource))

    def _clear_mirror(self, record: ResourceRecord) -> None:
        for field in self.resource_kind.mirrored_fields:
            record.status.pop(field, None)
        record.status["externalId"] = 0

    def _finish(
        self,
        record: ResourceRecord,
        ready: bool,
        reason: str,
        message: str,
        advance: bool = True,
        requeue_after: float | None = None,
        pending: bool = False,
    ) -> ReconcileResult:
        set_available_condition(record.conditions, ready, reason, message, record.generation)
        if advance:
            record.status["observedGeneration"] = record.generation
        self.record_resource_status(ready)
        self.log_info(record, message, event="reconcile", reason=reason)
        if requeue_after is None and ready:
            requeue_after = self.drift_interval
        return ReconcileResult(requeue_after=requeue_after, pending=pending)

    def _record_failure(
        self,
        record: ResourceRecord,
        ctx: ReconcileContext,
        error: Exception,
        reason: str | None = None,
    ) -> None:
        """Set a failed Available condition and persist it.

        The caller re-raises ``error``; a failure to persist is logged only.
        """
        if reason is None:
            reason = error.reason if isinstance(error, ReconcileError) else REASON_FAILED
        message = sanitize_error_message(str(error)) or type(error).__name__

        set_available_condition(record.conditions, False, reason, message, record.generation)
        if reason == REASON_INVALID_SPEC:
            record.status["observedGeneration"] = record.generation
        self.record_resource_status(False)

        if reason == REASON_DELETION_FAILED:
            emit_deletion_failed(record.body, message)
        else:
            emit_reconcile_failed(record.body, message)

        timeout = ctx.remaining()
        if timeout is not None and timeout <= 0:
            timeout = FAILURE_WRITE_TIMEOUT_SECONDS
        try:
            self.store.update_status(record, timeout=timeout)
        except Exception as persist_error:
            self.log_error(
                record,
                "Failed to record failure condition",
                error=persist_error,
                reason="StatusUpdateFailed",
            )
