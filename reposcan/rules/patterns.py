"""Reusable rule values built from textual markers.

Two shapes cover every local heuristic:

``LineCheck``
    Line-scoped. A line matching ``trigger`` emits exactly one result: a
    ``Finding`` when the line violates the check, otherwise a ``PassedCheck``.
    Lines without the trigger are ignored. A check with neither ``requires``
    nor ``forbids`` treats every trigger as a violation.

``AdjacentMarkersCheck``
    Structural. Compares the first line carrying each of two markers and
    flags them when they sit within ``window`` lines of each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Pattern

from reposcan.concern import Concern
from reposcan.result import NO_QUICK_FIX, Finding, PassedCheck
from reposcan.severity import Severity

from . import RuleOutcome


def split_lines(content: str) -> List[str]:
    return content.split("\n")


def markers(*words: str, flags: int = 0) -> Pattern[str]:
    """Compile a pattern matching any of the literal ``words``."""

    return re.compile("|".join(re.escape(word) for word in words), flags)


@dataclass(frozen=True)
class LineCheck:
    """Single-line heuristic with an optional same-line mitigation."""

    name: str
    concern: Concern
    trigger: Pattern[str]
    finding_message: str
    pass_message: Optional[str] = None
    requires: Optional[Pattern[str]] = None
    forbids: Optional[Pattern[str]] = None
    severity: Severity = Severity.MEDIUM
    quick_fix: str = NO_QUICK_FIX
    languages: Optional[FrozenSet[str]] = None

    def __post_init__(self) -> None:
        conditional = self.requires is not None or self.forbids is not None
        if conditional and self.pass_message is None:
            raise ValueError(f"{self.name}: conditional checks need a pass_message")

    def applies_to(self, language: Optional[str]) -> bool:
        return self.languages is None or language in self.languages

    def triggers_on(self, content: str) -> bool:
        return self.trigger.search(content) is not None

    def violates(self, line: str) -> bool:
        if self.requires is not None and self.requires.search(line) is None:
            return True
        if self.forbids is not None and self.forbids.search(line) is not None:
            return True
        return self.requires is None and self.forbids is None

    def evaluate(self, path: str, content: str) -> RuleOutcome:
        findings: List[Finding] = []
        passed: List[PassedCheck] = []
        for number, line in enumerate(split_lines(content), start=1):
            match = self.trigger.search(line)
            if match is None:
                continue
            if self.violates(line):
                findings.append(
                    Finding(
                        file=path,
                        line=number,
                        column=match.start() + 1,
                        message=self.finding_message,
                        category=self.concern,
                        severity=self.severity,
                        rule=self.name,
                        quick_fix=self.quick_fix,
                    )
                )
            else:
                passed.append(
                    PassedCheck(
                        file=path,
                        line=number,
                        message=self.pass_message or "",
                        category=self.concern,
                        rule=self.name,
                    )
                )
        return RuleOutcome(tuple(findings), tuple(passed))


@dataclass(frozen=True)
class AdjacentMarkersCheck:
    """Flag two concerns implemented on the same or neighbouring lines.

    Only the first occurrence of each marker is compared, so a file with
    several marker pairs is judged by its earliest pair.
    """

    name: str
    concern: Concern
    first: Pattern[str]
    second: Pattern[str]
    finding_message: str
    pass_message: str
    window: int = 1
    severity: Severity = Severity.LOW
    quick_fix: str = NO_QUICK_FIX
    languages: Optional[FrozenSet[str]] = None

    def applies_to(self, language: Optional[str]) -> bool:
        return self.languages is None or language in self.languages

    def triggers_on(self, content: str) -> bool:
        return self.first.search(content) is not None and self.second.search(content) is not None

    def evaluate(self, path: str, content: str) -> RuleOutcome:
        lines = split_lines(content)
        first_index = _first_index(lines, self.first)
        second_index = _first_index(lines, self.second)
        if first_index is None or second_index is None:
            return RuleOutcome()
        if abs(first_index - second_index) <= self.window:
            finding = Finding(
                file=path,
                line=min(first_index, second_index) + 1,
                message=self.finding_message,
                category=self.concern,
                severity=self.severity,
                rule=self.name,
                quick_fix=self.quick_fix,
            )
            return RuleOutcome(findings=(finding,))
        check = PassedCheck(file=path, message=self.pass_message, category=self.concern, rule=self.name)
        return RuleOutcome(passed_checks=(check,))


def _first_index(lines: List[str], pattern: Pattern[str]) -> Optional[int]:
    for index, line in enumerate(lines):
        if pattern.search(line):
            return index
    return None
