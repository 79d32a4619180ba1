"""beep error types."""

from __future__ import annotations


class BeepError(Exception):
    """Base class for beep errors."""


class ConfigParseError(BeepError):
    """A config blob could not be parsed into a mapping."""
