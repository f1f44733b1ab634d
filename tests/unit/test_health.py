"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from hcloud_operator.health import create_combined_wsgi_app, start_health_server


def make_environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }


class TestCombinedWsgiApp:
    """Test cases for the combined metrics and health WSGI app."""

    def test_combined_app_healthz(self):
        """Test combined app handles /healthz."""
        app = create_combined_wsgi_app()

        start_response = MagicMock()
        result = app(make_environ("/healthz"), start_response)

        assert b'"status":"ok"' in b"".join(result)
        assert "200" in start_response.call_args[0][0]

    def test_combined_app_readyz(self):
        """Test combined app handles /readyz when ready."""
        app = create_combined_wsgi_app(readiness=lambda: True)

        start_response = MagicMock()
        result = app(make_environ("/readyz"), start_response)

        assert b'"status":"ready"' in b"".join(result)
        assert "200" in start_response.call_args[0][0]

    def test_combined_app_not_ready(self):
        """Test /readyz reports 503 while the operator is not ready."""
        app = create_combined_wsgi_app(readiness=lambda: False)

        start_response = MagicMock()
        result = app(make_environ("/readyz"), start_response)

        assert b"not ready" in b"".join(result)
        assert "503" in start_response.call_args[0][0]

    def test_content_type_is_json(self):
        """Test that health responses are JSON."""
        app = create_combined_wsgi_app()

        start_response = MagicMock()
        app(make_environ("/healthz"), start_response)

        headers = dict(start_response.call_args[0][1])
        assert headers["Content-Type"].startswith("application/json")

    @patch("hcloud_operator.health.make_wsgi_app")
    def test_combined_app_delegates_to_metrics(self, mock_make_wsgi):
        """Test combined app delegates /metrics to prometheus."""
        mock_metrics_app = MagicMock(return_value=[b"metrics data"])
        mock_make_wsgi.return_value = mock_metrics_app

        app = create_combined_wsgi_app()
        result = app(make_environ("/metrics"), MagicMock())

        assert mock_metrics_app.called
        assert result == [b"metrics data"]


class TestHealthServer:
    """Test cases for starting the health server."""

    @patch("hcloud_operator.health.make_server")
    @patch("hcloud_operator.health.threading.Thread")
    def test_start_health_server(self, mock_thread, mock_make_server):
        """Test that the server is created on the port and served from a daemon thread."""
        mock_server = MagicMock()
        mock_make_server.return_value = mock_server

        server = start_health_server(8080)

        assert server is mock_server
        assert mock_make_server.call_args[0][1] == 8080
        assert mock_thread.call_args[1].get("daemon") is True
        mock_thread.return_value.start.assert_called_once()
