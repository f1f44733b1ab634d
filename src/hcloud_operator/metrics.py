"""Prometheus metrics for the Hetzner Cloud Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "hcloud_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "hcloud_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

error_total = Counter(
    "hcloud_operator_error_total",
    "Total number of reconciliation errors",
    ["kind", "error_type"],
)

resource_status_total = Counter(
    "hcloud_operator_resource_status_total",
    "Resource status outcomes recorded by reconciliations",
    ["kind", "status"],
)

# Hetzner Cloud resource operation metrics
provider_operations_total = Counter(
    "hcloud_operator_provider_operations_total",
    "Total number of Hetzner Cloud resource operations",
    ["kind", "operation", "result"],
)

# Configuration drift detection metrics
drift_detected_total = Counter(
    "hcloud_operator_drift_detected_total",
    "Total number of configuration drift detections",
    ["kind", "field"],
)

# API call metrics
api_call_total = Counter(
    "hcloud_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "hcloud_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 30.0],
)

rate_limit_hits_total = Counter(
    "hcloud_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)

# Retry metrics
reconcile_retry_total = Counter(
    "hcloud_operator_reconcile_retry_total",
    "Total number of reconciliations handed back to kopf for a delayed retry",
    ["kind", "reason"],
)
