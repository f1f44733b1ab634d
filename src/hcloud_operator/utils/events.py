"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_ADOPTED,
    EVENT_REASON_CREATED,
    EVENT_REASON_DELETED,
    EVENT_REASON_DELETION_FAILED,
    EVENT_REASON_ORPHANED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_UPDATED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object body (apiVersion, kind, metadata) the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_created(body: dict[str, Any], what: str, external_id: int) -> None:
    """Emit resource created event."""
    emit_event(body, EVENT_REASON_CREATED, f"{what} created with ID {external_id}")


def emit_adopted(body: dict[str, Any], what: str, external_id: int) -> None:
    """Emit resource adopted event."""
    emit_event(body, EVENT_REASON_ADOPTED, f"Existing {what} with ID {external_id} adopted")


def emit_updated(body: dict[str, Any], what: str, field: str) -> None:
    """Emit resource updated event."""
    emit_event(body, EVENT_REASON_UPDATED, f"{what} {field} updated")


def emit_deleted(body: dict[str, Any], what: str, external_id: int) -> None:
    """Emit resource deleted event."""
    emit_event(body, EVENT_REASON_DELETED, f"{what} with ID {external_id} deleted")


def emit_orphaned(body: dict[str, Any], what: str, external_id: int) -> None:
    """Emit resource orphaned event."""
    emit_event(body, EVENT_REASON_ORPHANED, f"{what} with ID {external_id} left in place (sync policy orphan)")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_deletion_failed(body: dict[str, Any], message: str) -> None:
    """Emit deletion failed event."""
    emit_event(body, EVENT_REASON_DELETION_FAILED, message, type_="Warning")
