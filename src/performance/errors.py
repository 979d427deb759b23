# ABOUTME: Declares the exceptions raised by the analytics core.
# ABOUTME: Separates store failures and missing identities from per-record data issues.

from __future__ import annotations

from typing import Optional


class PerformanceError(Exception):
    """Base class for analytics errors surfaced to the calling layer."""


class InternalLoadError(PerformanceError):
    """An attempt store fetch failed; the whole request is aborted."""

    def __init__(self, message: str, domain: Optional[str] = None):
        super().__init__(message)
        self.domain = domain


class UnauthorizedError(PerformanceError):
    """No resolved principal was supplied for the request."""


class ConfigError(PerformanceError):
    """The analytics configuration file is unreadable or invalid."""
