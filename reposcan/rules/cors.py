"""Evaluate CORS configuration for overly permissive settings."""

from __future__ import annotations

import re
from typing import Tuple

from reposcan.concern import Concern
from reposcan.severity import Severity

from .patterns import LineCheck

CONCERN = Concern.CORS

SUBJECT = re.compile(r"cors", re.IGNORECASE)

WILDCARD = re.compile(r"\*")
QUOTED_WILDCARD = re.compile(r"['\"]\*['\"]")
BARE_CORS_CALL = re.compile(r"\bcors\(\s*\)")

RULES: Tuple[LineCheck, ...] = (
    LineCheck(
        name="cors_wildcard_origin",
        concern=CONCERN,
        trigger=re.compile(
            r"cors|\borigins?\s*[:=]|allow_origins|Access-Control-Allow-Origin",
            re.IGNORECASE,
        ),
        forbids=re.compile(f"{QUOTED_WILDCARD.pattern}|{BARE_CORS_CALL.pattern}"),
        finding_message="CORS allows all origins (*). This is potentially insecure.",
        pass_message="CORS origin is properly configured.",
        severity=Severity.HIGH,
        quick_fix='Specify allowed origins explicitly instead of using "*".',
    ),
    LineCheck(
        name="cors_wildcard_methods",
        concern=CONCERN,
        trigger=re.compile(r"\bmethods\s*[:=]|allow_methods|Access-Control-Allow-Methods", re.IGNORECASE),
        forbids=WILDCARD,
        finding_message="CORS allows all methods (*). This is potentially insecure.",
        pass_message="CORS methods are properly configured.",
        quick_fix='Specify allowed methods explicitly instead of using "*".',
    ),
    LineCheck(
        name="cors_wildcard_headers",
        concern=CONCERN,
        trigger=re.compile(r"\ballowedHeaders\s*[:=]|allow_headers|Access-Control-Allow-Headers", re.IGNORECASE),
        forbids=WILDCARD,
        finding_message="CORS allows all headers (*). This is potentially insecure.",
        pass_message="CORS headers are properly configured.",
        quick_fix='Specify allowed headers explicitly instead of using "*".',
    ),
    LineCheck(
        name="cors_credentials",
        concern=CONCERN,
        trigger=re.compile(
            r"\bcredentials\s*[:=]|allow_credentials|supports_credentials|Access-Control-Allow-Credentials",
            re.IGNORECASE,
        ),
        forbids=re.compile(r"\btrue\b", re.IGNORECASE),
        finding_message="CORS allows credentials. Ensure this is necessary and origins are strictly limited.",
        pass_message="CORS credentials are properly configured.",
        severity=Severity.LOW,
        quick_fix="Only enable credentials when required, and then restrict origins strictly.",
    ),
)


def get_rules() -> Tuple[LineCheck, ...]:
    return RULES
