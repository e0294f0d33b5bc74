"""Core result data structures for the scanner."""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .concern import Concern
from .severity import Severity

NO_QUICK_FIX = "No quick fix available."

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


@dataclass(frozen=True)
class Finding:
    """A potential issue detected by a rule, localized to a file and line."""

    file: str
    line: int
    message: str
    category: Concern
    severity: Severity
    rule: str
    column: Optional[int] = None
    quick_fix: str = NO_QUICK_FIX

    def __post_init__(self) -> None:
        if not self.file:
            raise ValueError("Finding.file must not be empty")
        if self.line < 1:
            raise ValueError(f"Finding.line must be >= 1, got {self.line}")
        if self.column is not None and self.column < 1:
            raise ValueError(f"Finding.column must be >= 1, got {self.column}")


@dataclass(frozen=True)
class PassedCheck:
    """Evidence that a specific check evaluated cleanly."""

    file: str
    message: str
    category: Concern
    rule: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.file:
            raise ValueError("PassedCheck.file must not be empty")
        if self.line is not None and self.line < 1:
            raise ValueError(f"PassedCheck.line must be >= 1, got {self.line}")

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding]) -> "Summary":
        summary = cls()
        for finding in findings:
            summary.increment(finding.severity)
        return summary

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value.lower())) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value.lower()) for severity in SEVERITY_ORDER)


@dataclass(frozen=True)
class ScanResult:
    """Frozen outcome of evaluating one concern against a repository."""

    concern: Concern
    applicable: bool = False
    implemented: bool = False
    findings: Tuple[Finding, ...] = ()
    passed_checks: Tuple[PassedCheck, ...] = ()
    rules_evaluated: Tuple[str, ...] = ()
    files_scanned: int = 0
    skipped_files: Tuple[str, ...] = ()
    notes: Tuple[str, ...] = ()
    tool_failed: bool = False

    @property
    def passed(self) -> bool:
        return (
            self.implemented
            and not self.findings
            and len(self.passed_checks) > 0
            and not self.tool_failed
        )

    @property
    def message(self) -> Optional[str]:
        """Informational message for results that have nothing to judge."""

        if not self.applicable:
            return f"No relevant files found for the {self.concern.value} scan."
        if not self.implemented and not self.tool_failed:
            return (
                f"No {self.concern.value} implementation detected. "
                "This is not necessarily an issue, but ensure it's intentional."
            )
        return None

    def top_findings(self, limit: int = 5) -> List[Finding]:
        """Return findings ordered by severity ranking, stable within a rank."""

        ordered = sorted(self.findings, key=lambda finding: finding.severity.rank)
        return ordered[:limit]


def not_applicable(concern: Concern) -> ScanResult:
    """Result for a concern that had no candidate files at all."""

    return ScanResult(concern=concern, applicable=False, implemented=False)
