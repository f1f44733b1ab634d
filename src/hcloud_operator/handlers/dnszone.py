"""Handlers for HcloudDnsZone resources."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_DNS_ZONE
from .shared import drift_check_interval, finalize_record, reconcile_record

DRIFT_CHECK_INTERVAL_SECONDS = drift_check_interval()


@kopf.on.create(API_GROUP_VERSION, KIND_DNS_ZONE)
@kopf.on.update(API_GROUP_VERSION, KIND_DNS_ZONE)
@kopf.on.resume(API_GROUP_VERSION, KIND_DNS_ZONE)
@kopf.timer(
    API_GROUP_VERSION,
    KIND_DNS_ZONE,
    interval=DRIFT_CHECK_INTERVAL_SECONDS,
    initial_delay=DRIFT_CHECK_INTERVAL_SECONDS,
)
def handle_dns_zone(meta: dict[str, Any], retry: int = 0, **_: Any) -> None:
    """Reconcile an HcloudDnsZone on changes, on resume and periodically."""
    reconcile_record(KIND_DNS_ZONE, meta, retry)


@kopf.on.delete(API_GROUP_VERSION, KIND_DNS_ZONE)
def handle_dns_zone_delete(meta: dict[str, Any], retry: int = 0, **_: Any) -> None:
    """Drain the Hetzner Cloud zone of a deleted HcloudDnsZone."""
    finalize_record(KIND_DNS_ZONE, meta, retry)
