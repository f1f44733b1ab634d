"""Builder for DNS zone specifications."""

from __future__ import annotations

from typing import Any

from ..constants import ZONE_MODE_PRIMARY, ZONE_MODES
from ..services.hcloud.models import DnsZoneSpec, ExternalResource
from ..utils.errors import SpecValidationError


def create_dns_zone_spec_from_crd(spec: dict[str, Any]) -> DnsZoneSpec:
    """Create a DNS zone specification from HcloudDnsZone CRD spec.

    Args:
        spec: HcloudDnsZone CRD spec

    Returns:
        Validated DNS zone specification

    Raises:
        SpecValidationError: If the spec is incomplete or a field is out of range
    """
    name = spec.get("name")
    if not name:
        raise SpecValidationError("zone name is required")

    mode = str(spec.get("mode") or ZONE_MODE_PRIMARY).upper()
    if mode not in ZONE_MODES:
        raise SpecValidationError(f"Invalid zone mode {spec.get('mode')!r}, expected one of {', '.join(ZONE_MODES)}")

    ttl = spec.get("ttl")
    if ttl is not None:
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise SpecValidationError(f"Invalid ttl {ttl!r}, expected a positive integer")

    labels = spec.get("labels") or None

    return DnsZoneSpec(name=name, mode=mode, ttl=ttl, labels=labels)


def dns_zone_status_from_resource(resource: ExternalResource) -> dict[str, Any]:
    """Status fields mirrored from an observed DNS zone."""
    return {
        "externalId": resource.id,
        "mode": resource.mode,
        "ttl": resource.ttl,
        "labels": dict(resource.labels),
    }
