"""Builder for network specifications."""

from __future__ import annotations

from typing import Any

from ..differ import canonical_network
from ..services.hcloud.models import ExternalResource, NetworkSpec
from ..utils.errors import SpecValidationError


def create_network_spec_from_crd(spec: dict[str, Any]) -> NetworkSpec:
    """Create a network specification from HcloudNetwork CRD spec.

    Args:
        spec: HcloudNetwork CRD spec

    Returns:
        Validated network specification

    Raises:
        SpecValidationError: If the spec is incomplete or the IP range is malformed
    """
    name = spec.get("name")
    if not name:
        raise SpecValidationError("network name is required")

    ip_range = spec.get("ipRange")
    if not ip_range:
        raise SpecValidationError("ipRange is required")

    try:
        canonical_network(str(ip_range))
    except ValueError as e:
        raise SpecValidationError(f"Invalid IP range {ip_range!r}: {e}") from e

    labels = spec.get("labels") or None

    return NetworkSpec(name=name, ip_range=str(ip_range), labels=labels)


def network_status_from_resource(resource: ExternalResource) -> dict[str, Any]:
    """Status fields mirrored from an observed network."""
    return {
        "externalId": resource.id,
        "ipRange": resource.ip_range,
        "labels": dict(resource.labels),
    }
