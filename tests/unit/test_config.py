"""Tests for operator configuration."""

from __future__ import annotations

import pytest

from hcloud_operator.config import ConfigurationError, OperatorConfig

ENV_VARS = [
    "HCLOUD_TOKEN",
    "HCLOUD_ENDPOINT",
    "HCLOUD_POLL_INTERVAL_SECONDS",
    "HCLOUD_TIMEOUT_SECONDS",
    "WORKER_COUNT",
    "RECONCILE_TIMEOUT_SECONDS",
    "DRIFT_CHECK_INTERVAL_SECONDS",
    "PENDING_REQUEUE_SECONDS",
    "RETRY_BASE_DELAY_SECONDS",
    "RETRY_MAX_DELAY_SECONDS",
    "METRICS_PORT",
    "LOG_LEVEL",
    "K8S_RATE_LIMIT_PER_SECOND",
    "HCLOUD_RATE_LIMIT_PER_SECOND",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestFromEnv:
    """Test cases for loading configuration from the environment."""

    def test_defaults(self):
        """Test the defaults with an empty environment."""
        config = OperatorConfig.from_env()

        assert config.hcloud_token is None
        assert not config.hcloud_configured
        assert config.worker_count == 4
        assert config.reconcile_timeout_seconds == 120.0
        assert config.drift_check_interval_seconds == 300.0
        assert config.pending_requeue_seconds == 1.0
        assert config.metrics_port == 8080
        assert config.log_level == "INFO"

    def test_values(self, monkeypatch):
        """Test reading explicit values."""
        monkeypatch.setenv("HCLOUD_TOKEN", "secret")
        monkeypatch.setenv("HCLOUD_ENDPOINT", "https://example.test/v1")
        monkeypatch.setenv("WORKER_COUNT", "8")
        monkeypatch.setenv("DRIFT_CHECK_INTERVAL_SECONDS", "60")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        config = OperatorConfig.from_env()

        assert config.hcloud_configured
        assert config.hcloud_endpoint == "https://example.test/v1"
        assert config.worker_count == 8
        assert config.drift_check_interval_seconds == 60.0
        assert config.log_level == "DEBUG"

    def test_token_not_in_repr(self, monkeypatch):
        """Test that the token never shows up in the repr."""
        monkeypatch.setenv("HCLOUD_TOKEN", "supersecret")

        assert "supersecret" not in repr(OperatorConfig.from_env())

    def test_non_numeric(self, monkeypatch):
        """Test that non-numeric values are rejected."""
        monkeypatch.setenv("WORKER_COUNT", "many")

        with pytest.raises(ConfigurationError, match="WORKER_COUNT"):
            OperatorConfig.from_env()


class TestValidation:
    """Test cases for configuration validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"worker_count": 0},
            {"worker_count": 65},
            {"drift_check_interval_seconds": 5},
            {"reconcile_timeout_seconds": 0},
            {"pending_requeue_seconds": 0},
            {"retry_base_delay_seconds": 10, "retry_max_delay_seconds": 1},
            {"metrics_port": 0},
            {"log_level": "LOUD"},
            {"hcloud_rate_limit_per_second": 0},
        ],
    )
    def test_invalid(self, kwargs):
        """Test that out-of-range values fail at construction."""
        with pytest.raises(ConfigurationError):
            OperatorConfig(**kwargs)

    def test_all_errors_reported(self):
        """Test that every problem is listed in one error."""
        with pytest.raises(ConfigurationError) as exc_info:
            OperatorConfig(worker_count=0, metrics_port=0)

        assert "WORKER_COUNT" in str(exc_info.value)
        assert "METRICS_PORT" in str(exc_info.value)
