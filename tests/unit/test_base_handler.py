"""Tests for base handler functionality."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from hcloud_mock import make_record
from hcloud_operator.constants import FINALIZER, KIND_NETWORK
from hcloud_operator.handlers.base import BaseHandler
from hcloud_operator.models import RecordKey
from hcloud_operator.utils.context import with_correlation_id


class TestBaseHandler:
    """Test cases for BaseHandler class."""

    def test_init(self):
        """Test handler initialization."""
        handler = BaseHandler(kind="TestKind")
        assert handler.kind == "TestKind"
        assert handler.logger is not None

    def test_ensure_finalizer_adds_when_missing(self):
        """Test that finalizer is added when not present."""
        handler = BaseHandler(kind=KIND_NETWORK)
        record = make_record(KIND_NETWORK)

        assert handler.ensure_finalizer(record) is True
        assert FINALIZER in record.finalizers

    def test_ensure_finalizer_no_duplicate(self):
        """Test that finalizer is not duplicated if already present."""
        handler = BaseHandler(kind=KIND_NETWORK)
        record = make_record(KIND_NETWORK, finalizers=[FINALIZER, "other-finalizer"])

        assert handler.ensure_finalizer(record) is False
        assert record.finalizers.to_list().count(FINALIZER) == 1

    def test_remove_finalizer(self):
        """Test that only our finalizer is removed."""
        handler = BaseHandler(kind=KIND_NETWORK)
        record = make_record(KIND_NETWORK, finalizers=[FINALIZER, "other-finalizer"])

        assert handler.remove_finalizer(record) is True
        assert record.finalizers.to_list() == ["other-finalizer"]

    def test_remove_finalizer_when_absent(self):
        """Test that removing an absent finalizer is a no-op."""
        handler = BaseHandler(kind=KIND_NETWORK)
        record = make_record(KIND_NETWORK)

        assert handler.remove_finalizer(record) is False


class TestStructuredLogging:
    """Test cases for the structured log helpers."""

    def test_log_info_includes_resource_context(self, caplog):
        """Test that log lines carry the record identity and correlation id."""
        handler = BaseHandler(kind=KIND_NETWORK)
        record = make_record(KIND_NETWORK, name="net-a", namespace="infra")

        with caplog.at_level(logging.INFO, logger="hcloud_operator.handlers.base"):
            with with_correlation_id("abc123"):
                handler.log_info(record, "hello", reason="Testing", extra_field=1)

        data = json.loads(caplog.records[-1].getMessage())
        assert data["resource"] == KIND_NETWORK
        assert data["name"] == "net-a"
        assert data["namespace"] == "infra"
        assert data["uid"] == "uid-net-a"
        assert data["reason"] == "Testing"
        assert data["correlation_id"] == "abc123"
        assert data["extra_field"] == 1

    def test_log_error_sanitizes_error(self, caplog):
        """Test that errors are sanitized in log output."""
        handler = BaseHandler(kind=KIND_NETWORK)
        key = RecordKey(KIND_NETWORK, "default", "net")

        with caplog.at_level(logging.ERROR, logger="hcloud_operator.handlers.base"):
            handler.log_error(key, "failed", error=RuntimeError("token=supersecret"))

        record = caplog.records[-1]
        data = json.loads(record.getMessage())
        assert record.levelno == logging.ERROR
        assert "supersecret" not in data["error"]
        assert data["error_type"] == "RuntimeError"
        assert data["uid"] == "unknown"


class TestReconcileWithMetrics:
    """Test cases for reconcile_with_metrics."""

    def test_returns_result(self):
        """Test that the reconcile function's result is returned."""
        handler = BaseHandler(kind=KIND_NETWORK)
        key = RecordKey(KIND_NETWORK, "default", "net")

        assert handler.reconcile_with_metrics(key, lambda: "done") == "done"

    @patch("hcloud_operator.handlers.base.metrics")
    def test_counts_success(self, mock_metrics):
        """Test that success is counted."""
        handler = BaseHandler(kind=KIND_NETWORK)
        key = RecordKey(KIND_NETWORK, "default", "net")

        handler.reconcile_with_metrics(key, lambda: None)

        mock_metrics.reconcile_total.labels.assert_any_call(kind=KIND_NETWORK, result="success")
        mock_metrics.reconcile_duration_seconds.labels.assert_called_once_with(kind=KIND_NETWORK)

    @patch("hcloud_operator.handlers.base.metrics")
    def test_counts_and_reraises_errors(self, mock_metrics):
        """Test that errors are counted and propagated."""
        handler = BaseHandler(kind=KIND_NETWORK)
        key = RecordKey(KIND_NETWORK, "default", "net")

        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            handler.reconcile_with_metrics(key, fail)

        mock_metrics.error_total.labels.assert_called_once_with(kind=KIND_NETWORK, error_type="ValueError")
        mock_metrics.reconcile_total.labels.assert_any_call(kind=KIND_NETWORK, result="error")
