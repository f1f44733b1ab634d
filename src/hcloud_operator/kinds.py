"""Per-kind wiring between CRD specs, typed desired state and mirrored status."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .builders.dnszone import create_dns_zone_spec_from_crd, dns_zone_status_from_resource
from .builders.network import create_network_spec_from_crd, network_status_from_resource
from .constants import KIND_DNS_ZONE, KIND_NETWORK, PLURAL_DNS_ZONE, PLURAL_NETWORK
from .services.hcloud.models import DnsZoneSpec, ExternalResource, NetworkSpec


@dataclass(frozen=True)
class ResourceKind:
    """How one custom resource kind maps onto a Hetzner Cloud resource."""

    kind: str
    plural: str
    display_name: str
    build_desired: Callable[[dict[str, Any]], NetworkSpec | DnsZoneSpec]
    mirror_status: Callable[[ExternalResource], dict[str, Any]]
    mirrored_fields: tuple[str, ...]


NETWORK_KIND = ResourceKind(
    kind=KIND_NETWORK,
    plural=PLURAL_NETWORK,
    display_name="Network",
    build_desired=create_network_spec_from_crd,
    mirror_status=network_status_from_resource,
    mirrored_fields=("ipRange", "labels"),
)

DNS_ZONE_KIND = ResourceKind(
    kind=KIND_DNS_ZONE,
    plural=PLURAL_DNS_ZONE,
    display_name="Zone",
    build_desired=create_dns_zone_spec_from_crd,
    mirror_status=dns_zone_status_from_resource,
    mirrored_fields=("mode", "ttl", "labels"),
)

RESOURCE_KINDS = {k.kind: k for k in (NETWORK_KIND, DNS_ZONE_KIND)}
