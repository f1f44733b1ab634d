"""Sync policy evaluation.

The sync policy is read from the ``sync-policy`` annotation and decides which
mutations the operator may perform against Hetzner Cloud for a record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from .constants import ANNOTATION_SYNC_POLICY


class SyncPolicy(str, Enum):
    """Supported sync policies."""

    MANAGE = "manage"
    READ_ONLY = "read-only"
    ORPHAN = "orphan"


DEFAULT_SYNC_POLICY = SyncPolicy.MANAGE


@dataclass(frozen=True)
class PolicyDecision:
    """What a sync policy allows."""

    raw: str
    may_create: bool
    may_update: bool
    may_delete_external: bool
    valid: bool = True

    @property
    def requires_finalizer(self) -> bool:
        # Anything but read-only can bind an external resource to the record
        return self.may_update

    @property
    def drains_on_delete(self) -> bool:
        """Whether deleting a finalized record deletes its external resource.

        Only ``orphan`` keeps the resource. A record switched to ``read-only``
        after it bound a resource still drains it, because it still holds the
        finalizer. Unknown policies fail closed and never delete.
        """
        return self.valid and self.raw != SyncPolicy.ORPHAN.value


_DECISIONS = {
    SyncPolicy.MANAGE: (True, True, True),
    SyncPolicy.READ_ONLY: (False, False, False),
    SyncPolicy.ORPHAN: (True, True, False),
}


def lookup_sync_policy(annotations: Mapping[str, str] | None) -> tuple[str | None, bool]:
    """Return the annotated policy string and whether it is present."""
    if not annotations or ANNOTATION_SYNC_POLICY not in annotations:
        return None, False
    return annotations[ANNOTATION_SYNC_POLICY], True


def evaluate(policy: str | None) -> PolicyDecision:
    """Interpret a policy string.

    ``None`` means the default policy. Unknown strings fail closed to
    read-only semantics with ``valid=False``.
    """
    raw = DEFAULT_SYNC_POLICY.value if policy is None else policy
    try:
        known = SyncPolicy(raw)
    except ValueError:
        return PolicyDecision(raw, False, False, False, valid=False)
    may_create, may_update, may_delete = _DECISIONS[known]
    return PolicyDecision(raw, may_create, may_update, may_delete)
