"""Main entry point for the Hetzner Cloud Operator."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from . import logging as structured_logging
from . import tracing
from .builders.provider import create_providers
from .config import OperatorConfig
from .controller import Controller, get_controller, set_controller
from .handlers import dnszone, network  # noqa: F401
from .health import start_health_server
from .services.kubernetes import KubernetesRecordStore, get_k8s_client
from .utils.rate_limit import configure_rate_limits

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator and build the controller."""
    config = OperatorConfig.from_env()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging(config.log_level)

    # Keep kopf progress out of the status subresource, which the reconciler replaces
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = logging.WARNING
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = config.worker_count
    settings.execution.default_backoff = config.retry_max_delay_seconds

    configure_rate_limits(
        k8s_per_second=config.k8s_rate_limit_per_second,
        hcloud_per_second=config.hcloud_rate_limit_per_second,
    )
    tracing.initialize_tracing()

    providers = create_providers(config)
    if not providers:
        logger.warning("HCLOUD_TOKEN is not set, resources will report NotConfigured")

    controller = Controller(config, KubernetesRecordStore(get_k8s_client()), providers)
    set_controller(controller)

    # Start metrics HTTP server with health check endpoints
    start_health_server(config.metrics_port, readiness=lambda: controller.ready)


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Cancel in-flight reconciliations."""
    controller = get_controller()
    if controller is not None:
        controller.stop()
        set_controller(None)
