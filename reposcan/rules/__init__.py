"""Rule contract shared by every concern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Tuple

from reposcan.result import Finding, PassedCheck


@dataclass(frozen=True)
class RuleOutcome:
    """Findings and passed checks produced by evaluating rules on one file."""

    findings: Tuple[Finding, ...] = ()
    passed_checks: Tuple[PassedCheck, ...] = ()

    def __add__(self, other: "RuleOutcome") -> "RuleOutcome":
        return RuleOutcome(
            findings=self.findings + other.findings,
            passed_checks=self.passed_checks + other.passed_checks,
        )

    @classmethod
    def combine(cls, outcomes: Iterable["RuleOutcome"]) -> "RuleOutcome":
        combined = cls()
        for outcome in outcomes:
            combined = combined + outcome
        return combined


class Rule(Protocol):
    """Protocol implemented by all rule evaluators."""

    name: str

    def applies_to(self, language: Optional[str]) -> bool:
        """Return whether the rule should run on files of ``language``."""

    def triggers_on(self, content: str) -> bool:
        """Return whether the rule's risky construct appears anywhere in ``content``."""

    def evaluate(self, path: str, content: str) -> RuleOutcome:
        """Analyze ``content`` of the repository-relative ``path``."""


__all__ = ["Rule", "RuleOutcome"]
