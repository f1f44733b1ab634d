"""Tests for the Hetzner Cloud network provider."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from hcloud import APIException, HCloudException

from hcloud_operator.services.hcloud.models import NetworkSpec
from hcloud_operator.services.hcloud.network import HcloudNetworkProvider
from hcloud_operator.utils.errors import ProviderError, SpecValidationError


def sdk_network(**kwargs):
    values = {"id": 42, "name": "net", "labels": {"a": "1"}, "ip_range": "10.0.0.0/16"}
    values.update(kwargs)
    return SimpleNamespace(**values)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def provider(client):
    return HcloudNetworkProvider(client)


class TestNetworkLookup:
    """Test cases for reading networks."""

    def test_get_by_id(self, provider, client):
        """Test reading a network by ID."""
        client.networks.get_by_id.return_value = sdk_network()

        resource = provider.get_by_id(42)

        client.networks.get_by_id.assert_called_once_with(42)
        assert resource.id == 42
        assert resource.name == "net"
        assert resource.ip_range == "10.0.0.0/16"
        assert resource.labels == {"a": "1"}

    def test_get_by_id_not_found(self, provider, client):
        """Test that not_found is returned as None."""
        client.networks.get_by_id.side_effect = APIException("not_found", "network not found", None)

        assert provider.get_by_id(42) is None

    def test_get_by_id_rejects_invalid_id(self, provider, client):
        """Test that non-positive IDs are rejected without an API call."""
        with pytest.raises(SpecValidationError):
            provider.get_by_id(0)

        client.networks.get_by_id.assert_not_called()

    def test_get_by_name_missing(self, provider, client):
        """Test that a missing name is returned as None."""
        client.networks.get_by_name.return_value = None

        assert provider.get_by_name("net") is None

    def test_get_by_name_requires_name(self, provider):
        """Test that an empty name is rejected."""
        with pytest.raises(SpecValidationError):
            provider.get_by_name("")

    def test_list(self, provider, client):
        """Test listing networks."""
        client.networks.get_all.return_value = [sdk_network(), sdk_network(id=43, name="other", labels=None)]

        resources = provider.list()

        assert [r.id for r in resources] == [42, 43]
        assert resources[1].labels == {}


class TestNetworkMutations:
    """Test cases for changing networks."""

    def test_create(self, provider, client):
        """Test creating a network."""
        client.networks.create.return_value = sdk_network()

        resource = provider.create(NetworkSpec("net", "10.0.0.0/16", {"a": "1"}))

        client.networks.create.assert_called_once_with(name="net", ip_range="10.0.0.0/16", labels={"a": "1"})
        assert resource.id == 42

    def test_update_labels(self, provider, client):
        """Test replacing labels."""
        client.networks.update.return_value = sdk_network(labels={"b": "2"})

        resource = provider.update_labels(42, {"b": "2"})

        args, kwargs = client.networks.update.call_args
        assert args[0].id == 42
        assert kwargs == {"labels": {"b": "2"}}
        assert resource.labels == {"b": "2"}

    def test_change_ip_range_waits_for_action(self, provider, client):
        """Test that the IP range change is awaited before re-reading."""
        action = MagicMock()
        client.networks.change_ip_range.return_value = action
        client.networks.get_by_id.return_value = sdk_network(ip_range="10.0.0.0/8")

        resource = provider.update_structural(42, "ip_range", "10.0.0.0/8")

        args, _ = client.networks.change_ip_range.call_args
        assert args[0].id == 42
        assert args[1] == "10.0.0.0/8"
        action.wait_until_finished.assert_called_once()
        assert resource.ip_range == "10.0.0.0/8"

    def test_change_ip_range_resource_disappeared(self, provider, client):
        """Test that a network vanishing mid-change is a provider error."""
        client.networks.get_by_id.side_effect = APIException("not_found", "gone", None)

        with pytest.raises(ProviderError):
            provider.update_structural(42, "ip_range", "10.0.0.0/8")

    def test_unknown_structural_field(self, provider, client):
        """Test that unsupported fields are rejected."""
        with pytest.raises(SpecValidationError):
            provider.update_structural(42, "name", "other")

        client.networks.change_ip_range.assert_not_called()

    def test_delete(self, provider, client):
        """Test deleting a network."""
        provider.delete(42)

        args, _ = client.networks.delete.call_args
        assert args[0].id == 42


class TestNetworkErrors:
    """Test cases for mapping SDK errors."""

    def test_invalid_input_is_validation_error(self, provider, client):
        """Test that invalid_input becomes SpecValidationError."""
        client.networks.create.side_effect = APIException("invalid_input", "ip_range is invalid", None)

        with pytest.raises(SpecValidationError, match="ip_range is invalid"):
            provider.create(NetworkSpec("net", "10.0.0.0/16"))

    def test_rate_limit_is_provider_error(self, provider, client):
        """Test that rate limiting becomes a transient ProviderError."""
        client.networks.get_by_name.side_effect = APIException("rate_limit_exceeded", "slow down", None)

        with pytest.raises(ProviderError):
            provider.get_by_name("net")

    def test_not_found_on_mutation_is_provider_error(self, provider, client):
        """Test that not_found is only tolerated on lookups by ID."""
        client.networks.update.side_effect = APIException("not_found", "network not found", None)

        with pytest.raises(ProviderError):
            provider.update_labels(42, {"a": "1"})

    def test_sdk_exception_is_provider_error(self, provider, client):
        """Test that other SDK failures become ProviderError."""
        client.networks.get_all.side_effect = HCloudException("connection reset")

        with pytest.raises(ProviderError):
            provider.list()
