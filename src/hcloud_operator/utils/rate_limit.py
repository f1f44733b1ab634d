"""Rate limiting utilities for API calls."""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

_F = TypeVar("_F", bound=Callable[..., Any])

# Rate limit configuration
_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))
_HCLOUD_RATE_LIMIT_PER_SECOND = float(os.getenv("HCLOUD_RATE_LIMIT_PER_SECOND", "5.0"))

# Track last call times; workers share these across threads
_k8s_last_call_time: float = 0.0
_hcloud_last_call_time: float = 0.0
_k8s_lock = threading.Lock()
_hcloud_lock = threading.Lock()


def configure_rate_limits(k8s_per_second: float | None = None, hcloud_per_second: float | None = None) -> None:
    """Override the rate limits read from the environment at import time."""
    global _K8S_RATE_LIMIT_PER_SECOND, _HCLOUD_RATE_LIMIT_PER_SECOND
    if k8s_per_second is not None:
        _K8S_RATE_LIMIT_PER_SECOND = k8s_per_second
    if hcloud_per_second is not None:
        _HCLOUD_RATE_LIMIT_PER_SECOND = hcloud_per_second


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls.

    Spaces calls at least ``1 / K8S_RATE_LIMIT_PER_SECOND`` apart across all
    worker threads to avoid overwhelming the Kubernetes API server.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _k8s_last_call_time
        with _k8s_lock:
            min_interval = 1.0 / _K8S_RATE_LIMIT_PER_SECOND
            time_since_last_call = time.time() - _k8s_last_call_time
            if time_since_last_call < min_interval:
                time.sleep(min_interval - time_since_last_call)
            _k8s_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def rate_limit_hcloud(func: _F) -> _F:
    """Decorator to rate limit Hetzner Cloud API calls.

    Spaces calls at least ``1 / HCLOUD_RATE_LIMIT_PER_SECOND`` apart across
    all worker threads; the Hetzner API enforces a per-token hourly budget.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        global _hcloud_last_call_time
        with _hcloud_lock:
            min_interval = 1.0 / _HCLOUD_RATE_LIMIT_PER_SECOND
            time_since_last_call = time.time() - _hcloud_last_call_time
            if time_since_last_call < min_interval:
                time.sleep(min_interval - time_since_last_call)
            _hcloud_last_call_time = time.time()
        return func(*args, **kwargs)

    return wrapper  # type: ignore


def is_k8s_rate_limit_error(status: int | None, message: str = "") -> bool:
    """Check if a Kubernetes API status code signals throttling."""
    return status == 429 or (status == 503 and "rate limit" in message.lower())
