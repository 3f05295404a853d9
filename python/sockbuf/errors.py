"""Exceptions raised by sockbuf."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a connection is requested with unusable settings."""


class TransportError(RuntimeError):
    """Raised when the transport cannot complete an operation."""
