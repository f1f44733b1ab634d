"""Builder for Hetzner Cloud provider instances."""

from __future__ import annotations

from typing import Any

from hcloud import Client

from .. import __version__
from ..config import OperatorConfig
from ..constants import CONTROLLER_NAME, KIND_DNS_ZONE, KIND_NETWORK
from ..services.hcloud import HcloudDnsZoneProvider, HcloudNetworkProvider, ResourceProvider


def create_hcloud_client(config: OperatorConfig) -> Client:
    """Create an hcloud client from operator configuration.

    Args:
        config: Operator configuration carrying the API token

    Returns:
        Configured hcloud client

    Raises:
        ValueError: If no API token is configured
    """
    if not config.hcloud_token:
        raise ValueError("HCLOUD_TOKEN is required to build a Hetzner Cloud client")

    kwargs: dict[str, Any] = {
        "token": config.hcloud_token,
        "application_name": CONTROLLER_NAME,
        "application_version": __version__,
        "poll_interval": config.hcloud_poll_interval_seconds,
        "timeout": config.hcloud_timeout_seconds,
    }
    if config.hcloud_endpoint:
        kwargs["api_endpoint"] = config.hcloud_endpoint

    return Client(**kwargs)


def create_providers(config: OperatorConfig) -> dict[str, ResourceProvider]:
    """Create the per-kind resource providers.

    Returns an empty mapping when no API token is configured, in which case
    reconciliation reports the kinds as not configured.
    """
    if not config.hcloud_configured:
        return {}

    client = create_hcloud_client(config)
    return {
        KIND_NETWORK: HcloudNetworkProvider(client),
        KIND_DNS_ZONE: HcloudDnsZoneProvider(client),
    }
