"""Tests for rate limiting utilities."""

from __future__ import annotations

import time
from unittest.mock import patch

import hcloud_operator.utils.rate_limit as rl
from hcloud_operator.utils.rate_limit import (
    configure_rate_limits,
    is_k8s_rate_limit_error,
    rate_limit_hcloud,
    rate_limit_k8s,
)


class TestRateLimitK8s:
    """Test cases for Kubernetes API rate limiting."""

    def test_rate_limit_k8s_decorator(self):
        """Test that k8s rate limiting decorator works."""
        call_count = 0

        @rate_limit_k8s
        def test_func():
            nonlocal call_count
            call_count += 1
            return "success"

        result = test_func()
        assert result == "success"
        assert call_count == 1

    def test_rate_limit_k8s_with_args(self):
        """Test rate limiting with function arguments."""
        @rate_limit_k8s
        def test_func(a, b, c=None):
            return f"{a}-{b}-{c}"

        result = test_func("x", "y", c="z")
        assert result == "x-y-z"

    @patch("hcloud_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 100.0)
    def test_rate_limit_k8s_enforces_rate(self):
        """Test that rate limiting enforces minimum interval."""
        call_times = []

        @rate_limit_k8s
        def test_func():
            call_times.append(time.time())
            return "ok"

        for _ in range(3):
            test_func()

        # With 100 calls/sec, minimum interval is 0.01 seconds
        assert len(call_times) == 3
        assert call_times[1] - call_times[0] >= 0.009
        assert call_times[2] - call_times[1] >= 0.009

    @patch("hcloud_operator.utils.rate_limit.time.sleep")
    def test_rate_limit_k8s_sleeps_when_needed(self, mock_sleep):
        """Test that rate limiter sleeps when calls are too fast."""
        with patch("hcloud_operator.utils.rate_limit._K8S_RATE_LIMIT_PER_SECOND", 1.0):
            rl._k8s_last_call_time = 0.0

            @rate_limit_k8s
            def test_func():
                return "ok"

            with patch("hcloud_operator.utils.rate_limit.time.time", return_value=10.0):
                test_func()

            with patch("hcloud_operator.utils.rate_limit.time.time", return_value=10.1):
                test_func()

            assert mock_sleep.call_count >= 1


class TestRateLimitHcloud:
    """Test cases for Hetzner Cloud API rate limiting."""

    def test_rate_limit_hcloud_with_args(self):
        """Test Hetzner Cloud rate limiting with function arguments."""
        @rate_limit_hcloud
        def test_func(x, y):
            return x + y

        assert test_func(5, 10) == 15

    @patch("hcloud_operator.utils.rate_limit._HCLOUD_RATE_LIMIT_PER_SECOND", 100.0)
    def test_rate_limit_hcloud_enforces_rate(self):
        """Test that Hetzner Cloud rate limiting enforces minimum interval."""
        call_times = []

        @rate_limit_hcloud
        def test_func():
            call_times.append(time.time())

        for _ in range(3):
            test_func()

        assert call_times[1] - call_times[0] >= 0.009
        assert call_times[2] - call_times[1] >= 0.009


class TestConfigureRateLimits:
    """Test cases for overriding limits at startup."""

    def test_configure_overrides_given_limits_only(self, monkeypatch):
        """Test that only the limits passed are replaced."""
        monkeypatch.setattr(rl, "_K8S_RATE_LIMIT_PER_SECOND", 10.0)
        monkeypatch.setattr(rl, "_HCLOUD_RATE_LIMIT_PER_SECOND", 5.0)

        configure_rate_limits(hcloud_per_second=2.0)

        assert rl._K8S_RATE_LIMIT_PER_SECOND == 10.0
        assert rl._HCLOUD_RATE_LIMIT_PER_SECOND == 2.0


class TestIsK8sRateLimitError:
    """Test cases for recognising throttling responses."""

    def test_429(self):
        """Test that 429 is a rate limit error."""
        assert is_k8s_rate_limit_error(429)

    def test_503_with_rate_limit_message(self):
        """Test that 503 mentioning rate limits is a rate limit error."""
        assert is_k8s_rate_limit_error(503, "Rate limit exceeded")

    def test_other_errors(self):
        """Test that other statuses are not rate limit errors."""
        assert not is_k8s_rate_limit_error(503, "unavailable")
        assert not is_k8s_rate_limit_error(404)
        assert not is_k8s_rate_limit_error(None)
