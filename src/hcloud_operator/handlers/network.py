"""Handlers for HcloudNetwork resources."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_NETWORK
from .shared import drift_check_interval, finalize_record, reconcile_record

DRIFT_CHECK_INTERVAL_SECONDS = drift_check_interval()


@kopf.on.create(API_GROUP_VERSION, KIND_NETWORK)
@kopf.on.update(API_GROUP_VERSION, KIND_NETWORK)
@kopf.on.resume(API_GROUP_VERSION, KIND_NETWORK)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_NETWORK,
    interval=DRIFT_CHECK_INTERVAL_SECONDS,
    initial_delay=DRIFT_CHECK_INTERVAL_SECONDS,
)
def handle_network(meta: dict[str, Any], retry: int = 0, **_: Any) -> None:
    """Reconcile an HcloudNetwork on changes, on resume and periodically."""
    reconcile_record(KIND_NETWORK, meta, retry)


@kopf.on.delete(API_GROUP_VERSION, KIND_NETWORK)
def handle_network_delete(meta: dict[str, Any], retry: int = 0, **_: Any) -> None:
    """Drain the Hetzner Cloud network of a deleted HcloudNetwork."""
    finalize_record(KIND_NETWORK, meta, retry)
