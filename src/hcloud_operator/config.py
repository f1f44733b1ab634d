"""Operator configuration loaded from environment variables.

Values are validated when the configuration is built so a misconfigured
operator fails at startup rather than on its first reconciliation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_WORKER_COUNT = 4
MIN_WORKER_COUNT = 1
MAX_WORKER_COUNT = 64

DEFAULT_RECONCILE_TIMEOUT_SECONDS = 120.0
DEFAULT_DRIFT_CHECK_INTERVAL_SECONDS = 300.0
MIN_DRIFT_CHECK_INTERVAL_SECONDS = 10.0
DEFAULT_PENDING_REQUEUE_SECONDS = 1.0

DEFAULT_RETRY_BASE_DELAY_SECONDS = 1.0
DEFAULT_RETRY_MAX_DELAY_SECONDS = 300.0

DEFAULT_HCLOUD_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_HCLOUD_TIMEOUT_SECONDS = 30.0


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""


@dataclass(frozen=True)
class OperatorConfig:
    """Operator configuration.

    All fields are validated at construction time. An unset ``hcloud_token``
    is valid: the operator runs but every reconciliation reports
    ``NotConfigured``.
    """

    hcloud_token: str | None = field(default=None, repr=False)
    hcloud_endpoint: str | None = None
    hcloud_poll_interval_seconds: float = DEFAULT_HCLOUD_POLL_INTERVAL_SECONDS
    hcloud_timeout_seconds: float = DEFAULT_HCLOUD_TIMEOUT_SECONDS

    worker_count: int = DEFAULT_WORKER_COUNT
    reconcile_timeout_seconds: float = DEFAULT_RECONCILE_TIMEOUT_SECONDS
    drift_check_interval_seconds: float = DEFAULT_DRIFT_CHECK_INTERVAL_SECONDS
    pending_requeue_seconds: float = DEFAULT_PENDING_REQUEUE_SECONDS
    retry_base_delay_seconds: float = DEFAULT_RETRY_BASE_DELAY_SECONDS
    retry_max_delay_seconds: float = DEFAULT_RETRY_MAX_DELAY_SECONDS

    metrics_port: int = 8080
    log_level: str = "INFO"
    k8s_rate_limit_per_second: float = 10.0
    hcloud_rate_limit_per_second: float = 5.0

    def __post_init__(self) -> None:
        errors: list[str] = []

        if not MIN_WORKER_COUNT <= self.worker_count <= MAX_WORKER_COUNT:
            errors.append(f"WORKER_COUNT must be between {MIN_WORKER_COUNT} and {MAX_WORKER_COUNT}")

        if self.reconcile_timeout_seconds <= 0:
            errors.append("RECONCILE_TIMEOUT_SECONDS must be positive")

        if self.drift_check_interval_seconds < MIN_DRIFT_CHECK_INTERVAL_SECONDS:
            errors.append(
                f"DRIFT_CHECK_INTERVAL_SECONDS must be at least {MIN_DRIFT_CHECK_INTERVAL_SECONDS:g}"
            )

        if self.pending_requeue_seconds <= 0:
            errors.append("PENDING_REQUEUE_SECONDS must be positive")

        if self.retry_base_delay_seconds <= 0:
            errors.append("RETRY_BASE_DELAY_SECONDS must be positive")
        elif self.retry_max_delay_seconds < self.retry_base_delay_seconds:
            errors.append("RETRY_MAX_DELAY_SECONDS must not be lower than RETRY_BASE_DELAY_SECONDS")

        if self.hcloud_poll_interval_seconds <= 0:
            errors.append("HCLOUD_POLL_INTERVAL_SECONDS must be positive")

        if self.hcloud_timeout_seconds <= 0:
            errors.append("HCLOUD_TIMEOUT_SECONDS must be positive")

        if not 1 <= self.metrics_port <= 65535:
            errors.append(f"METRICS_PORT must be a valid port: {self.metrics_port}")

        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}: {self.log_level}")

        if self.k8s_rate_limit_per_second <= 0 or self.hcloud_rate_limit_per_second <= 0:
            errors.append("rate limits must be positive")

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ConfigurationError(error_msg)

    @property
    def hcloud_configured(self) -> bool:
        return bool(self.hcloud_token)

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Load configuration from environment variables.

        Environment Variables:
            HCLOUD_TOKEN: Hetzner Cloud API token (unset: providers not configured)
            HCLOUD_ENDPOINT: API endpoint override
            HCLOUD_POLL_INTERVAL_SECONDS: Action polling interval (default: 1)
            HCLOUD_TIMEOUT_SECONDS: Per-request timeout (default: 30)
            WORKER_COUNT: Worker threads (default: 4)
            RECONCILE_TIMEOUT_SECONDS: Deadline for one pass (default: 120)
            DRIFT_CHECK_INTERVAL_SECONDS: Requeue after a successful pass (default: 300)
            PENDING_REQUEUE_SECONDS: Requeue while drift remains (default: 1)
            RETRY_BASE_DELAY_SECONDS: Retry backoff base (default: 1)
            RETRY_MAX_DELAY_SECONDS: Retry backoff cap (default: 300)
            METRICS_PORT: Metrics and health port (default: 8080)
            LOG_LEVEL: Log level (default: INFO)
            K8S_RATE_LIMIT_PER_SECOND: Kubernetes API throttle (default: 10)
            HCLOUD_RATE_LIMIT_PER_SECOND: Hetzner Cloud API throttle (default: 5)
        """

        def get_int(key: str, default: int) -> int:
            value = os.environ.get(key)
            if value is None or value == "":
                return default
            try:
                return int(value)
            except ValueError as e:
                raise ConfigurationError(f"{key} must be an integer: {value}") from e

        def get_float(key: str, default: float) -> float:
            value = os.environ.get(key)
            if value is None or value == "":
                return default
            try:
                return float(value)
            except ValueError as e:
                raise ConfigurationError(f"{key} must be a number: {value}") from e

        return cls(
            hcloud_token=os.environ.get("HCLOUD_TOKEN") or None,
            hcloud_endpoint=os.environ.get("HCLOUD_ENDPOINT") or None,
            hcloud_poll_interval_seconds=get_float(
                "HCLOUD_POLL_INTERVAL_SECONDS", DEFAULT_HCLOUD_POLL_INTERVAL_SECONDS
            ),
            hcloud_timeout_seconds=get_float("HCLOUD_TIMEOUT_SECONDS", DEFAULT_HCLOUD_TIMEOUT_SECONDS),
            worker_count=get_int("WORKER_COUNT", DEFAULT_WORKER_COUNT),
            reconcile_timeout_seconds=get_float(
                "RECONCILE_TIMEOUT_SECONDS", DEFAULT_RECONCILE_TIMEOUT_SECONDS
            ),
            drift_check_interval_seconds=get_float(
                "DRIFT_CHECK_INTERVAL_SECONDS", DEFAULT_DRIFT_CHECK_INTERVAL_SECONDS
            ),
            pending_requeue_seconds=get_float("PENDING_REQUEUE_SECONDS", DEFAULT_PENDING_REQUEUE_SECONDS),
            retry_base_delay_seconds=get_float(
                "RETRY_BASE_DELAY_SECONDS", DEFAULT_RETRY_BASE_DELAY_SECONDS
            ),
            retry_max_delay_seconds=get_float("RETRY_MAX_DELAY_SECONDS", DEFAULT_RETRY_MAX_DELAY_SECONDS),
            metrics_port=get_int("METRICS_PORT", 8080),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            k8s_rate_limit_per_second=get_float("K8S_RATE_LIMIT_PER_SECOND", 10.0),
            hcloud_rate_limit_per_second=get_float("HCLOUD_RATE_LIMIT_PER_SECOND", 5.0),
        )
