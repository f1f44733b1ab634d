"""Health check and metrics endpoints for the operator."""

from __future__ import annotations

import threading
from typing import Any, Callable

from prometheus_client import make_wsgi_app
from werkzeug.serving import BaseWSGIServer, make_server
from werkzeug.wrappers import Response


def _always_ready() -> bool:
    return True


def create_combined_wsgi_app(readiness: Callable[[], bool] = _always_ready) -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Args:
        readiness: Called on every ``/readyz`` request; False yields 503

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> Any:
        """WSGI app that routes /healthz and /readyz, delegates /metrics to prometheus."""
        path = environ.get("PATH_INFO", "")

        if path == "/healthz":
            response = Response('{"status":"ok"}', mimetype="application/json", status=200)
            return response(environ, start_response)
        if path == "/readyz":
            if readiness():
                response = Response('{"status":"ready"}', mimetype="application/json", status=200)
            else:
                response = Response('{"status":"not ready"}', mimetype="application/json", status=503)
            return response(environ, start_response)
        # Delegate all other paths (including /metrics) to prometheus app
        return metrics_app(environ, start_response)

    return combined_app


def start_health_server(port: int, readiness: Callable[[], bool] = _always_ready) -> BaseWSGIServer:
    """Serve metrics and health endpoints from a background thread.

    Returns:
        The running server, so callers can shut it down
    """
    server = make_server("", port, create_combined_wsgi_app(readiness), threaded=True)
    thread = threading.Thread(target=server.serve_forever, name="health-server", daemon=True)
    thread.start()
    return server
