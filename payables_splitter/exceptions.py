"""Exceptions raised by the payables splitter."""

from __future__ import annotations


class SplitterError(Exception):
    """Base exception for the payables splitter."""


class ConfigurationError(SplitterError, ValueError):
    """A required sheet, header row, header column or config entry is missing."""
