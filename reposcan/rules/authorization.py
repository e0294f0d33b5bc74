"""Evaluate authorization code for ad-hoc role checks and unguarded sensitive routes."""

from __future__ import annotations

import re
from typing import Tuple, Union

from reposcan.concern import Concern
from reposcan.severity import Severity

from .authentication import ROUTE_REGISTRATION
from .patterns import AdjacentMarkersCheck, LineCheck, markers

CONCERN = Concern.AUTHORIZATION

SUBJECT = re.compile(r"authorize|permission|role")

SENSITIVE_ROUTE = re.compile(
    f"(?:{ROUTE_REGISTRATION.pattern}).*(?:admin|settings|config)",
)

AuthorizationRule = Union[LineCheck, AdjacentMarkersCheck]

RULES: Tuple[AuthorizationRule, ...] = (
    LineCheck(
        name="role_permission_check",
        concern=CONCERN,
        trigger=re.compile(r"role|permission"),
        requires=re.compile(r"check(?:Role|Permission)|check_(?:role|permission)", re.IGNORECASE),
        finding_message="Role/Permission checks may not be properly implemented.",
        pass_message="Role/Permission checks are properly implemented.",
        quick_fix="Implement proper role/permission checking functions.",
    ),
    LineCheck(
        name="hardcoded_role_comparison",
        concern=CONCERN,
        trigger=re.compile(r"role\s*[!=]==?\s*['\"][\w-]+['\"]"),
        finding_message="Hardcoded role checks found. Consider using a more flexible RBAC system.",
        severity=Severity.LOW,
        quick_fix="Use a dynamic role checking system instead of hardcoding roles.",
    ),
    LineCheck(
        name="sensitive_route_authorization",
        concern=CONCERN,
        trigger=SENSITIVE_ROUTE,
        requires=markers("isAuthorized", "checkPermission", "hasRole", "permission_required", "roles_required"),
        finding_message="Sensitive route may not be properly protected with authorization checks.",
        pass_message="Sensitive route is properly protected with authorization checks.",
        severity=Severity.HIGH,
        quick_fix="Add authorization middleware to protect sensitive routes.",
    ),
    AdjacentMarkersCheck(
        name="authentication_authorization_separation",
        concern=CONCERN,
        first=re.compile(r"authenticate"),
        second=re.compile(r"authorize"),
        window=1,
        finding_message="Authentication and authorization should be separate concerns.",
        pass_message="Authentication and authorization are properly separated.",
        quick_fix="Separate authentication and authorization logic into different modules or middleware.",
    ),
)


def get_rules() -> Tuple[AuthorizationRule, ...]:
    return RULES
