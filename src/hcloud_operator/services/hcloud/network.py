"""Hetzner Cloud network provider implementation."""

from __future__ import annotations

import logging
from typing import Any

from hcloud import Client
from hcloud.networks import Network

from ...constants import KIND_NETWORK
from ...utils.errors import ProviderError, SpecValidationError
from .base import BaseHcloudProvider
from .models import ExternalResource, NetworkSpec

logger = logging.getLogger(__name__)


def _to_resource(network: Any) -> ExternalResource:
    return ExternalResource(
        id=int(network.id),
        name=network.name,
        labels=dict(network.labels or {}),
        ip_range=network.ip_range,
    )


class HcloudNetworkProvider(BaseHcloudProvider):
    """Network operations against the Hetzner Cloud API."""

    kind = KIND_NETWORK

    def __init__(self, client: Client) -> None:
        """Initialize network provider.

        Args:
            client: Configured hcloud client
        """
        self.client = client

    def get_by_id(self, external_id: int) -> ExternalResource | None:
        """Get a network by ID."""
        self._require_id(external_id, "network")
        network = self._call("get_network", self.client.networks.get_by_id, external_id, not_found_ok=True)
        return _to_resource(network) if network is not None else None

    def get_by_name(self, name: str) -> ExternalResource | None:
        """Get a network by name."""
        self._require_name(name, "network")
        network = self._call("get_network_by_name", self.client.networks.get_by_name, name)
        return _to_resource(network) if network is not None else None

    def create(self, spec: NetworkSpec) -> ExternalResource:
        """Create a network."""
        self._require_name(spec.name, "network")
        network = self._call(
            "create_network",
            self.client.networks.create,
            name=spec.name,
            ip_range=spec.ip_range,
            labels=dict(spec.labels or {}),
        )
        logger.info(f"Created network {spec.name} with ID {network.id}")
        return _to_resource(network)

    def update_labels(self, external_id: int, labels: dict[str, str]) -> ExternalResource:
        """Replace the labels of a network."""
        self._require_id(external_id, "network")
        network = self._call(
            "update_network_labels",
            self.client.networks.update,
            Network(id=external_id),
            labels=dict(labels),
        )
        return _to_resource(network)

    def update_structural(self, external_id: int, field: str, value: Any) -> ExternalResource:
        """Change the IP range of a network and wait for the action to finish."""
        self._require_id(external_id, "network")
        if field != "ip_range":
            raise SpecValidationError(f"network field {field!r} cannot be updated")

        action = self._call("change_network_ip_range", self.client.networks.change_ip_range, Network(id=external_id), value)
        self._call("wait_change_network_ip_range", action.wait_until_finished)

        updated = self.get_by_id(external_id)
        if updated is None:
            raise ProviderError(f"network {external_id} disappeared while changing its IP range")
        return updated

    def delete(self, external_id: int) -> None:
        """Delete a network."""
        self._require_id(external_id, "network")
        self._call("delete_network", self.client.networks.delete, Network(id=external_id))
        logger.info(f"Deleted network {external_id}")

    def list(self) -> list[ExternalResource]:
        """List all networks."""
        networks = self._call("list_networks", self.client.networks.get_all)
        return [_to_resource(network) for network in networks or []]
