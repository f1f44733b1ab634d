"""In-memory stand-ins for the record store and Hetzner Cloud providers."""

from .provider import FakeProvider
from .store import InMemoryRecordStore, make_record

__all__ = ["FakeProvider", "InMemoryRecordStore", "make_record"]
