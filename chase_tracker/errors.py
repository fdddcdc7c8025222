"""
Chase Tracker — Typed Failures

Every failure the ranking pipeline can surface to its caller. Price-field
extraction never raises; everything here is request-level.
"""

from __future__ import annotations

from typing import Any


class ChaseTrackerError(Exception):
    """Base class for all Chase Tracker failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MissingCredentialError(ChaseTrackerError):
    """Price tracker key is not configured. Recoverable: serve fallback data."""


class UnsupportedSetError(ChaseTrackerError):
    """The UI set identifier has no mapping for the requested upstream API."""


class UpstreamRequestError(ChaseTrackerError):
    """Non-success status, network failure or timeout from an upstream API."""


class MalformedResponseError(UpstreamRequestError):
    """Upstream body matched none of the recognized response shapes."""


class UnsupportedCurrencyError(ChaseTrackerError, ValueError):
    """Currency tag has no configured conversion rate."""
