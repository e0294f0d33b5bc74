"""Severity levels attached to findings, most severe first."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """How urgently a finding should be looked at.

    Members are declared from most to least severe; ``rank`` follows that
    order so reports can list the worst findings first.
    """

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)
