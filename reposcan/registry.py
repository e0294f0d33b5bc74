"""Concern registry: which files, markers and rules belong to each concern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Sequence, Tuple

from .concern import CONCERN_ORDER, Concern
from .config import ScanConfig
from .linter import DelegatedLinter, EslintBackend
from .rules import Rule
from .rules import authentication, authorization, cors, sanitization
from .utils.files import FileFilter

SOURCE_EXTENSIONS: Tuple[str, ...] = (".js", ".ts", ".py", ".php", ".java")
SANITIZATION_EXTENSIONS: Tuple[str, ...] = (".js", ".mjs", ".cjs", ".py", ".php", ".java")


@dataclass(frozen=True)
class ConcernProfile:
    """Everything the orchestrator needs to evaluate one concern."""

    concern: Concern
    file_filter: FileFilter
    rules: Tuple[Rule, ...]
    subject: Optional[Pattern[str]] = None
    linter: Optional[DelegatedLinter] = None

    def rules_for(self, language: Optional[str]) -> Tuple[Rule, ...]:
        return tuple(rule for rule in self.rules if rule.applies_to(language))

    def delegates(self, language: Optional[str]) -> bool:
        return self.linter is not None and self.linter.handles(language)

    def subject_observed(self, content: str, rules: Sequence[Rule]) -> bool:
        """Whether the concern's subject matter appears in ``content``.

        Concerns without a single subject marker are in scope wherever one of
        their rules' risky constructs appears.
        """

        if self.subject is not None:
            return self.subject.search(content) is not None
        return any(rule.triggers_on(content) for rule in rules)


Registry = Dict[Concern, ConcernProfile]


def build_registry(linter: Optional[DelegatedLinter] = None) -> Registry:
    """Build the concern table once; pass it explicitly to the orchestrator."""

    profiles = (
        ConcernProfile(
            concern=Concern.SANITIZATION,
            file_filter=FileFilter(extensions=SANITIZATION_EXTENSIONS),
            rules=sanitization.get_rules(),
            linter=linter,
        ),
        ConcernProfile(
            concern=Concern.CORS,
            file_filter=FileFilter(extensions=SOURCE_EXTENSIONS, path_keywords=("config", "server")),
            rules=cors.get_rules(),
            subject=cors.SUBJECT,
        ),
        ConcernProfile(
            concern=Concern.AUTHENTICATION,
            file_filter=FileFilter(extensions=SOURCE_EXTENSIONS, path_keywords=("auth", "login", "user")),
            rules=authentication.get_rules(),
            subject=authentication.SUBJECT,
        ),
        ConcernProfile(
            concern=Concern.AUTHORIZATION,
            file_filter=FileFilter(extensions=SOURCE_EXTENSIONS, path_keywords=("auth", "middleware", "permission")),
            rules=authorization.get_rules(),
            subject=authorization.SUBJECT,
        ),
    )
    registry = {profile.concern: profile for profile in profiles}
    return {concern: registry[concern] for concern in CONCERN_ORDER}


def default_registry(config: ScanConfig) -> Registry:
    """Registry wired to the real ESLint backend described by ``config``."""

    backend = EslintBackend(command=config.eslint_command, timeout=config.eslint_timeout)
    return build_registry(linter=DelegatedLinter(backend))
