"""Record store backed by Kubernetes custom objects."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import API_GROUP, API_VERSION, KIND_DNS_ZONE, KIND_NETWORK, PLURAL_DNS_ZONE, PLURAL_NETWORK
from ...models import RecordKey, ResourceRecord
from ...utils.errors import PersistenceError, sanitize_exception
from ...utils.rate_limit import is_k8s_rate_limit_error, rate_limit_k8s

logger = logging.getLogger(__name__)

PLURALS = {
    KIND_NETWORK: PLURAL_NETWORK,
    KIND_DNS_ZONE: PLURAL_DNS_ZONE,
}


class RecordStore(Protocol):
    """Persistence for resource records."""

    def get(self, key: RecordKey, timeout: float | None = None) -> ResourceRecord | None:
        """Load a record, None if it no longer exists."""
        ...

    def update_metadata(self, record: ResourceRecord, timeout: float | None = None) -> None:
        """Persist the record's annotations and finalizers."""
        ...

    def update_status(self, record: ResourceRecord, timeout: float | None = None) -> None:
        """Persist the record's status."""
        ...


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()


class KubernetesRecordStore:
    """Reads and writes HcloudNetwork and HcloudDnsZone custom objects."""

    def __init__(self, api: client.CustomObjectsApi) -> None:
        self.api = api

    def _plural(self, key: RecordKey) -> str:
        try:
            return PLURALS[key.kind]
        except KeyError:
            raise ValueError(f"unsupported kind: {key.kind}") from None

    def _call(self, operation: str, fn: Callable[..., Any], timeout: float | None, **kwargs: Any) -> Any:
        if timeout is not None:
            kwargs["_request_timeout"] = timeout

        start_time = time.time()
        try:
            result = rate_limit_k8s(fn)(**kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
            return result
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            if is_k8s_rate_limit_error(e.status, str(e.reason or "")):
                metrics.rate_limit_hits_total.labels(api_type="k8s").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)

    def get(self, key: RecordKey, timeout: float | None = None) -> ResourceRecord | None:
        """Load a record by key.

        Returns:
            The record, or None if the object no longer exists

        Raises:
            PersistenceError: If the API call fails for any other reason
        """
        try:
            obj = self._call(
                "get_record",
                self.api.get_namespaced_custom_object,
                timeout,
                group=API_GROUP,
                version=API_VERSION,
                namespace=key.namespace,
                plural=self._plural(key),
                name=key.name,
            )
        except ApiException as e:
            if e.status == 404:
                return None
            logger.error(f"Failed to read {key}: {sanitize_exception(e)}")
            raise PersistenceError(f"failed to read {key}: {e.status} {e.reason}") from e

        return ResourceRecord.from_object(key.kind, obj)

    def update_metadata(self, record: ResourceRecord, timeout: float | None = None) -> None:
        """Merge-patch annotations and finalizers, guarded by resourceVersion.

        Raises:
            PersistenceError: If the patch is rejected (including conflicts)
        """
        metadata: dict[str, Any] = {
            "annotations": dict(record.annotations),
            "finalizers": record.finalizers.to_list(),
        }
        if record.resource_version:
            metadata["resourceVersion"] = record.resource_version

        try:
            obj = self._call(
                "patch_record_metadata",
                self.api.patch_namespaced_custom_object,
                timeout,
                group=API_GROUP,
                version=API_VERSION,
                namespace=record.key.namespace,
                plural=self._plural(record.key),
                name=record.key.name,
                body={"metadata": metadata},
            )
        except ApiException as e:
            logger.error(f"Failed to update metadata of {record.key}: {sanitize_exception(e)}")
            raise PersistenceError(f"failed to update metadata of {record.key}: {e.status} {e.reason}") from e

        self._refresh_version(record, obj)

    def update_status(self, record: ResourceRecord, timeout: float | None = None) -> None:
        """Replace the status subresource.

        Raises:
            PersistenceError: If the patch is rejected
        """
        body = [{"op": "add", "path": "/status", "value": dict(record.status)}]
        try:
            obj = self._call(
                "patch_record_status",
                self.api.patch_namespaced_custom_object_status,
                timeout,
                group=API_GROUP,
                version=API_VERSION,
                namespace=record.key.namespace,
                plural=self._plural(record.key),
                name=record.key.name,
                body=body,
            )
        except ApiException as e:
            logger.error(f"Failed to update status of {record.key}: {sanitize_exception(e)}")
            raise PersistenceError(f"failed to update status of {record.key}: {e.status} {e.reason}") from e

        self._refresh_version(record, obj)

    @staticmethod
    def _refresh_version(record: ResourceRecord, obj: Any) -> None:
        if isinstance(obj, dict):
            version = obj.get("metadata", {}).get("resourceVersion")
            if version:
                record.resource_version = version
