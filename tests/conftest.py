"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests to path for hcloud_mock imports
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))


@pytest.fixture
def mock_kopf_event():
    """Patch kopf.event so event emission needs no running operator."""
    with patch("hcloud_operator.utils.events.kopf.event") as mock_event:
        yield mock_event


@pytest.fixture(autouse=True)
def fast_rate_limits(monkeypatch):
    """Lift API throttles so tests do not sleep between calls."""
    monkeypatch.setattr("hcloud_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 10000.0)
    monkeypatch.setattr("hcloud_operator.utils.rate_limit._HCLOUD_RATE_LIMIT_PER_SECOND", 10000.0)
