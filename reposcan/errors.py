"""Exceptions raised by the scanner."""

from __future__ import annotations


class ScanError(Exception):
    """Fatal orchestration failure; aborts the whole scan."""


class LinterError(Exception):
    """The delegated linter could not produce usable output."""
