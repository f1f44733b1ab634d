"""Drift detection between desired spec and observed Hetzner Cloud state."""

from __future__ import annotations

import ipaddress
import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .services.hcloud.models import DnsZoneSpec, ExternalResource, NetworkSpec


class OperationKind(str, Enum):
    """Kinds of update calls a provider accepts."""

    LABELS = "LabelsUpdate"
    STRUCTURAL = "StructuralUpdate"


@dataclass(frozen=True)
class UpdateOperation:
    """One provider update call needed to correct drift."""

    kind: OperationKind
    field: str
    payload: Any


def canonical_network(value: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    """Parse a CIDR string into its canonical network value."""
    return ipaddress.ip_network(value.strip(), strict=False)


def cidr_equal(desired: str | None, observed: str | None) -> bool:
    """Compare two CIDR strings by network value rather than spelling."""
    if desired is None or observed is None:
        return desired == observed
    try:
        return canonical_network(desired) == canonical_network(observed)
    except ValueError:
        return desired == observed


def labels_drift(desired: dict[str, str] | None, observed: dict[str, str] | None) -> bool:
    """Check whether labels need updating.

    Empty or missing desired labels express no opinion and never drift.
    """
    if not desired:
        return False
    return dict(desired) != dict(observed or {})


_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    "ip_range": cidr_equal,
    "mode": lambda desired, observed: str(desired).upper() == str(observed or "").upper(),
}


def diff(desired: NetworkSpec | DnsZoneSpec, observed: ExternalResource) -> list[UpdateOperation]:
    """Compute the ordered update operations needed to converge.

    Labels always come first; each differing structural field gets its own
    operation, in the order ``structural_fields`` returns them.
    """
    operations: list[UpdateOperation] = []

    if labels_drift(desired.labels, observed.labels):
        operations.append(UpdateOperation(OperationKind.LABELS, "labels", dict(desired.labels or {})))

    for field, desired_value in desired.structural_fields().items():
        equal = _COMPARATORS.get(field, operator.eq)
        if not equal(desired_value, getattr(observed, field, None)):
            operations.append(UpdateOperation(OperationKind.STRUCTURAL, field, desired_value))

    return operations
