"""Error taxonomy and sanitization utilities to prevent information leakage."""

from __future__ import annotations

import re
from typing import Any

from ..constants import (
    REASON_FAILED,
    REASON_INVALID_SPEC,
    REASON_NOT_CONFIGURED,
)


class ReconcileError(Exception):
    """Base class for errors raised by a reconciliation pass.

    Every subclass is retryable from the point of view of the kopf handlers; the
    ``reason`` is the condition reason recorded when the error surfaces.
    """

    reason = REASON_FAILED


class ProviderError(ReconcileError):
    """Transient failure talking to Hetzner Cloud (network, timeout, rate limit)."""


class SpecValidationError(ReconcileError):
    """The desired spec cannot be applied as written (e.g. malformed CIDR)."""

    reason = REASON_INVALID_SPEC


class PersistenceError(ReconcileError):
    """Writing a record's metadata or status back to the store failed."""


class NotConfiguredError(ReconcileError):
    """No Hetzner Cloud provider is configured for the resource kind."""

    reason = REASON_NOT_CONFIGURED


class ReconcileCancelled(ReconcileError):
    """The pass was cancelled before it could finish."""


class DeadlineExceeded(ReconcileError):
    """The pass ran out of time before it could finish."""


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"(bearer)\s+[A-Za-z0-9\-_\.=]+",
    r"(authorization)[:\s]+[^\s,;\)]+",
    r"(hcloud[_\s]?token)[=:\s]+[^\s,;\)]+",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "token",
    "api_token",
    "password",
    "secret",
    "credentials",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, r"\1 [REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[=:]\s*([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    all_sensitive = SENSITIVE_FIELDS | (sensitive_keys or set())
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
