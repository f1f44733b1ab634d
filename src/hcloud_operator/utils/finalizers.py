"""Finalizer token set and the add/remove protocol."""

from __future__ import annotations

from typing import Iterable, Iterator


class FinalizerSet:
    """Insertion-ordered set of finalizer tokens.

    Tokens are opaque strings; duplicates are never stored and equality does
    not depend on order.
    """

    def __init__(self, tokens: Iterable[str] | None = None) -> None:
        self._tokens: list[str] = []
        for token in tokens or ():
            self.add(token)

    def has(self, token: str) -> bool:
        return token in self._tokens

    def add(self, token: str) -> bool:
        """Add a token. Returns True if the set changed."""
        if token in self._tokens:
            return False
        self._tokens.append(token)
        return True

    def remove(self, token: str) -> bool:
        """Remove a token. Returns True if the set changed."""
        if token not in self._tokens:
            return False
        self._tokens.remove(token)
        return True

    def to_list(self) -> list[str]:
        return list(self._tokens)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tokens))

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FinalizerSet):
            return set(self._tokens) == set(other._tokens)
        return NotImplemented

    def __repr__(self) -> str:
        return f"FinalizerSet({self._tokens!r})"
