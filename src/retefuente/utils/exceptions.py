"""Custom exceptions for retefuente."""

from __future__ import annotations


class RetefuenteError(Exception):
    """Base exception for retefuente."""


class ConfigError(RetefuenteError):
    """Invalid inputs file or fiscal-year table."""
