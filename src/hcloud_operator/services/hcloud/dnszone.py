"""Hetzner Cloud DNS zone provider implementation."""

from __future__ import annotations

import logging
from typing import Any

from hcloud import Client
from hcloud.zones import Zone

from ...constants import KIND_DNS_ZONE
from ...utils.errors import ProviderError, SpecValidationError
from .base import BaseHcloudProvider
from .models import DnsZoneSpec, ExternalResource

logger = logging.getLogger(__name__)


def _to_resource(zone: Any) -> ExternalResource:
    mode = zone.mode
    return ExternalResource(
        id=int(zone.id),
        name=zone.name,
        labels=dict(zone.labels or {}),
        ttl=zone.ttl,
        mode=str(mode).upper() if mode else None,
    )


class HcloudDnsZoneProvider(BaseHcloudProvider):
    """DNS zone operations against the Hetzner Cloud API."""

    kind = KIND_DNS_ZONE

    def __init__(self, client: Client) -> None:
        """Initialize DNS zone provider.

        Args:
            client: Configured hcloud client
        """
        self.client = client

    def get_by_id(self, external_id: int) -> ExternalResource | None:
        """Get a zone by ID."""
        self._require_id(external_id, "zone")
        zone = self._call("get_zone", self.client.zones.get_by_id, external_id, not_found_ok=True)
        return _to_resource(zone) if zone is not None else None

    def get_by_name(self, name: str) -> ExternalResource | None:
        """Get a zone by name."""
        self._require_name(name, "zone")
        zone = self._call("get_zone_by_name", self.client.zones.get_by_name, name)
        return _to_resource(zone) if zone is not None else None

    def create(self, spec: DnsZoneSpec) -> ExternalResource:
        """Create a zone and wait for the creation action to finish."""
        self._require_name(spec.name, "zone")
        response = self._call(
            "create_zone",
            self.client.zones.create,
            name=spec.name,
            mode=spec.mode.lower(),
            ttl=spec.ttl,
            labels=dict(spec.labels or {}),
        )
        if response.action is not None:
            self._call("wait_create_zone", response.action.wait_until_finished)
        logger.info(f"Created zone {spec.name} with ID {response.zone.id}")
        return _to_resource(response.zone)

    def update_labels(self, external_id: int, labels: dict[str, str]) -> ExternalResource:
        """Replace the labels of a zone."""
        self._require_id(external_id, "zone")
        zone = self._call("update_zone_labels", self.client.zones.update, Zone(id=external_id), labels=dict(labels))
        return _to_resource(zone)

    def update_structural(self, external_id: int, field: str, value: Any) -> ExternalResource:
        """Change the default TTL of a zone and wait for the action to finish.

        The zone mode is fixed at creation and cannot be changed.
        """
        self._require_id(external_id, "zone")
        if field == "mode":
            raise SpecValidationError(f"zone mode cannot be changed after creation (requested {value})")
        if field != "ttl":
            raise SpecValidationError(f"zone field {field!r} cannot be updated")

        action = self._call("change_zone_ttl", self.client.zones.change_ttl, Zone(id=external_id), value)
        self._call("wait_change_zone_ttl", action.wait_until_finished)

        updated = self.get_by_id(external_id)
        if updated is None:
            raise ProviderError(f"zone {external_id} disappeared while changing its TTL")
        return updated

    def delete(self, external_id: int) -> None:
        """Delete a zone and wait for the deletion action to finish."""
        self._require_id(external_id, "zone")
        response = self._call("delete_zone", self.client.zones.delete, Zone(id=external_id))
        if response is not None and response.action is not None:
            self._call("wait_delete_zone", response.action.wait_until_finished)
        logger.info(f"Deleted zone {external_id}")

    def list(self) -> list[ExternalResource]:
        """List all zones."""
        zones = self._call("list_zones", self.client.zones.get_all)
        return [_to_resource(zone) for zone in zones or []]
