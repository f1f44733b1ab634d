"""Models for Hetzner Cloud resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NetworkSpec:
    """Desired state of a Hetzner Cloud network."""

    name: str
    ip_range: str
    labels: dict[str, str] | None = None

    def structural_fields(self) -> dict[str, Any]:
        return {"ip_range": self.ip_range}


@dataclass(frozen=True)
class DnsZoneSpec:
    """Desired state of a Hetzner Cloud DNS zone."""

    name: str
    mode: str
    ttl: int | None = None
    labels: dict[str, str] | None = None

    def structural_fields(self) -> dict[str, Any]:
        # ttl first: it is correctable, while a mode change is always rejected
        fields: dict[str, Any] = {}
        if self.ttl is not None:
            fields["ttl"] = self.ttl
        fields["mode"] = self.mode
        return fields


@dataclass
class ExternalResource:
    """A Hetzner Cloud resource as observed through the API."""

    id: int
    name: str
    labels: dict[str, str] = field(default_factory=dict)
    ip_range: str | None = None
    ttl: int | None = None
    mode: str | None = None
