"""Base Hetzner Cloud provider interface."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol, TypeVar

from hcloud import APIException, HCloudException

from ... import metrics
from ...utils.errors import ProviderError, SpecValidationError, sanitize_exception
from ...utils.rate_limit import rate_limit_hcloud
from .models import ExternalResource

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

NOT_FOUND = "not_found"
INVALID_INPUT = "invalid_input"
RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class ResourceProvider(Protocol):
    """Protocol defining the operations the reconciler needs from Hetzner Cloud."""

    def get_by_id(self, external_id: int) -> ExternalResource | None:
        """Get a resource by ID, None if it does not exist."""
        ...

    def get_by_name(self, name: str) -> ExternalResource | None:
        """Get a resource by name, None if it does not exist."""
        ...

    def create(self, spec: Any) -> ExternalResource:
        """Create a resource from its desired spec."""
        ...

    def update_labels(self, external_id: int, labels: dict[str, str]) -> ExternalResource:
        """Replace a resource's labels."""
        ...

    def update_structural(self, external_id: int, field: str, value: Any) -> ExternalResource:
        """Change one structural field, waiting for the change to complete."""
        ...

    def delete(self, external_id: int) -> None:
        """Delete a resource."""
        ...

    def list(self) -> list[ExternalResource]:
        """List all resources of this kind."""
        ...


class BaseHcloudProvider:
    """Shared call handling for Hetzner Cloud providers.

    Every API call is throttled, timed and counted; SDK exceptions are mapped
    onto the operator's error taxonomy.
    """

    kind = "unknown"

    def _call(
        self,
        operation: str,
        fn: Callable[..., _T],
        *args: Any,
        not_found_ok: bool = False,
        **kwargs: Any,
    ) -> _T | None:
        start_time = time.time()
        try:
            result = rate_limit_hcloud(fn)(*args, **kwargs)
            metrics.api_call_total.labels(api_type="hcloud", operation=operation, result="success").inc()
            return result
        except APIException as e:
            if not_found_ok and e.code == NOT_FOUND:
                metrics.api_call_total.labels(api_type="hcloud", operation=operation, result="not_found").inc()
                return None
            metrics.api_call_total.labels(api_type="hcloud", operation=operation, result="error").inc()
            if e.code == RATE_LIMIT_EXCEEDED:
                metrics.rate_limit_hits_total.labels(api_type="hcloud").inc()
            logger.error(f"Hetzner Cloud {operation} failed for {self.kind}: {sanitize_exception(e)}")
            if e.code == INVALID_INPUT:
                raise SpecValidationError(f"{operation} rejected: {e.message}") from e
            raise ProviderError(f"{operation} failed: {e.message} ({e.code})") from e
        except HCloudException as e:
            metrics.api_call_total.labels(api_type="hcloud", operation=operation, result="error").inc()
            logger.error(f"Hetzner Cloud {operation} failed for {self.kind}: {sanitize_exception(e)}")
            raise ProviderError(f"{operation} failed: {e}") from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="hcloud", operation=operation).observe(duration)

    @staticmethod
    def _require_id(external_id: int, what: str) -> None:
        if external_id <= 0:
            raise SpecValidationError(f"invalid {what} ID: {external_id}")

    @staticmethod
    def _require_name(name: str, what: str) -> None:
        if not name:
            raise SpecValidationError(f"{what} name is required")
