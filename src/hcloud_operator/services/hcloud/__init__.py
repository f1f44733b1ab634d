"""Hetzner Cloud resource providers."""

from .base import ResourceProvider
from .dnszone import HcloudDnsZoneProvider
from .models import DnsZoneSpec, ExternalResource, NetworkSpec
from .network import HcloudNetworkProvider

__all__ = [
    "ResourceProvider",
    "HcloudNetworkProvider",
    "HcloudDnsZoneProvider",
    "NetworkSpec",
    "DnsZoneSpec",
    "ExternalResource",
]
