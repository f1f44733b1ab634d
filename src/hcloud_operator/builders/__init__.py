"""Builders turning CRD specs and configuration into typed objects."""
