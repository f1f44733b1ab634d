"""Hetzner Cloud operator: reconciles HcloudNetwork and HcloudDnsZone resources."""

__version__ = "0.1.0"
