"""Records reconciled by the operator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import API_GROUP_VERSION
from .utils.finalizers import FinalizerSet


@dataclass(frozen=True)
class RecordKey:
    """Stable identity of a record: kind plus namespace and name."""

    kind: str
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.kind}:{self.namespace}/{self.name}"


@dataclass
class ResourceRecord:
    """Desired and observed state of one managed Hetzner Cloud resource."""

    key: RecordKey
    generation: int = 1
    spec: dict[str, Any] = field(default_factory=dict)
    status: dict[str, Any] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    finalizers: FinalizerSet = field(default_factory=FinalizerSet)
    deletion_requested: bool = False
    uid: str = ""
    resource_version: str | None = None

    @property
    def external_id(self) -> int:
        """ID of the bound Hetzner Cloud resource, 0 when unset."""
        return int(self.status.get("externalId") or 0)

    @property
    def conditions(self) -> list[dict[str, Any]]:
        return self.status.setdefault("conditions", [])

    @property
    def meta(self) -> dict[str, Any]:
        return {
            "name": self.key.name,
            "namespace": self.key.namespace,
            "uid": self.uid,
            "generation": self.generation,
        }

    @property
    def body(self) -> dict[str, Any]:
        """Minimal object body used to attach Kubernetes events."""
        return {
            "apiVersion": API_GROUP_VERSION,
            "kind": self.key.kind,
            "metadata": {
                "name": self.key.name,
                "namespace": self.key.namespace,
                "uid": self.uid,
            },
        }

    @classmethod
    def from_object(cls, kind: str, obj: dict[str, Any]) -> ResourceRecord:
        """Build a record from a Kubernetes custom object."""
        metadata = obj.get("metadata", {})
        return cls(
            key=RecordKey(kind, metadata.get("namespace", "default"), metadata.get("name", "")),
            generation=int(metadata.get("generation") or 0),
            spec=dict(obj.get("spec") or {}),
            status=dict(obj.get("status") or {}),
            annotations=dict(metadata.get("annotations") or {}),
            finalizers=FinalizerSet(metadata.get("finalizers") or []),
            deletion_requested=metadata.get("deletionTimestamp") is not None,
            uid=metadata.get("uid", ""),
            resource_version=metadata.get("resourceVersion"),
        )
