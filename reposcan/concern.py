"""Concern identifiers and report display states."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Concern(str, Enum):
    """The security concerns the scanner knows how to evaluate."""

    SANITIZATION = "Sanitization"
    CORS = "CORS"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"

    @property
    def selector(self) -> str:
        """Return the CLI flag name that selects this concern."""

        return SELECTORS_BY_CONCERN[self]


class DisplayState(str, Enum):
    """Single display state derived for a concern in a report."""

    NOT_RUN = "NOT_RUN"
    NO_SUBJECT = "NO_SUBJECT"
    INCOMPLETE = "INCOMPLETE"
    PASSED = "PASSED"
    FAILED = "FAILED"


SELECTORS_BY_CONCERN: Dict[Concern, str] = {
    Concern.SANITIZATION: "string",
    Concern.CORS: "cors",
    Concern.AUTHENTICATION: "auth",
    Concern.AUTHORIZATION: "authz",
}

CONCERN_ORDER = (
    Concern.SANITIZATION,
    Concern.CORS,
    Concern.AUTHENTICATION,
    Concern.AUTHORIZATION,
)
