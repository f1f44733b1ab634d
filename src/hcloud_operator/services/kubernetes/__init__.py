"""Kubernetes-backed record store."""

from .store import KubernetesRecordStore, RecordStore, get_k8s_client

__all__ = ["KubernetesRecordStore", "RecordStore", "get_k8s_client"]
