"""Utility functions for the Hetzner Cloud Operator."""

from .conditions import find_condition, is_available, set_available_condition, update_condition
from .context import (
    ReconcileContext,
    get_context_dict,
    get_correlation_id,
    set_correlation_id,
    with_correlation_id,
)
from .events import emit_event
from .finalizers import FinalizerSet
from .rate_limit import configure_rate_limits, rate_limit_hcloud, rate_limit_k8s

__all__ = [
    "update_condition",
    "find_condition",
    "set_available_condition",
    "is_available",
    "emit_event",
    "FinalizerSet",
    "ReconcileContext",
    "rate_limit_k8s",
    "rate_limit_hcloud",
    "configure_rate_limits",
    "set_correlation_id",
    "get_correlation_id",
    "with_correlation_id",
    "get_context_dict",
]
