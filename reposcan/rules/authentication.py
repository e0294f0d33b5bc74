"""Evaluate authentication code for missing expiry, weak secrets and open routes."""

from __future__ import annotations

import re
from typing import Tuple

from reposcan.concern import Concern
from reposcan.severity import Severity

from .patterns import LineCheck

CONCERN = Concern.AUTHENTICATION

SUBJECT = re.compile(r"authenticate|login|passport")

ROUTE_REGISTRATION = re.compile(
    r"\b(?:app|router)\.(?:get|post|put|patch|delete|all)\s*\("
    r"|@(?:app|router|bp|blueprint)\.(?:route|get|post|put|patch|delete)\s*\("
)
AUTH_MIDDLEWARE = re.compile(
    r"\b(?:isAuthenticated|requireAuth|verifyToken|ensureAuthenticated|authenticateToken"
    r"|login_required|jwt_required|Depends\s*\()"
)

RULES: Tuple[LineCheck, ...] = (
    LineCheck(
        name="jwt_token_expiration",
        concern=CONCERN,
        trigger=re.compile(r"\bjwt\.(?:sign|verify|encode)\s*\("),
        requires=re.compile(r"expiresIn|expires_in|\bexp\s*:|['\"]exp['\"]"),
        finding_message="JWT tokens should have an expiration time.",
        pass_message="JWT token expiration is properly set.",
        severity=Severity.HIGH,
        quick_fix="Set expiresIn (or an 'exp' claim) to a short lifetime when issuing tokens.",
    ),
    LineCheck(
        name="session_secret_strength",
        concern=CONCERN,
        trigger=re.compile(r"\b(?:secret|SECRET_KEY|secret_key)\s*(?::|=(?!=))"),
        requires=re.compile(r"process\.env|os\.environ|getenv|\bconfig\b|\bsettings\.|secrets\.token_\w+\("),
        finding_message="Session secret should be a long, random value loaded from the environment.",
        pass_message="Session secret is properly configured.",
        severity=Severity.HIGH,
        quick_fix="Generate a random secret and load it from an environment variable or secret store.",
    ),
    LineCheck(
        name="oauth_state_parameter",
        concern=CONCERN,
        trigger=re.compile(r"oauth|OAuth"),
        requires=re.compile(r"\bstate\s*[:=]"),
        finding_message="OAuth implementation should use state parameter to prevent CSRF.",
        pass_message="OAuth state parameter is properly used.",
        quick_fix="Generate a per-request state value and verify it on the callback.",
    ),
    LineCheck(
        name="route_authentication_middleware",
        concern=CONCERN,
        trigger=ROUTE_REGISTRATION,
        requires=AUTH_MIDDLEWARE,
        finding_message="Route may not be properly protected with authentication middleware.",
        pass_message="Route is properly protected with authentication middleware.",
        quick_fix="Add authentication middleware (e.g. requireAuth) to the route definition.",
    ),
)


def get_rules() -> Tuple[LineCheck, ...]:
    return RULES
