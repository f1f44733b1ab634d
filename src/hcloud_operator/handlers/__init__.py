"""Handlers for HcloudNetwork and HcloudDnsZone resources.

The watch handlers register themselves with kopf when ``handlers.network``
and ``handlers.dnszone`` are imported, which ``main`` does.
"""

from .base import BaseHandler

__all__ = ["BaseHandler"]
