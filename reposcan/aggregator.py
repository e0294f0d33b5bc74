"""Merge per-concern results into a single report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .concern import CONCERN_ORDER, Concern, DisplayState
from .result import Finding, ScanResult, Summary


def display_state(result: Optional[ScanResult]) -> DisplayState:
    """Derive the single display state for one concern.

    A concern with nothing to judge is ``NO_SUBJECT``, never ``FAILED``.
    A delegated-tool failure without findings is ``INCOMPLETE`` so it can
    never read as a pass.
    """

    if result is None:
        return DisplayState.NOT_RUN
    if result.tool_failed and not result.findings:
        return DisplayState.INCOMPLETE
    if not result.applicable or not result.implemented:
        return DisplayState.NO_SUBJECT
    return DisplayState.PASSED if result.passed else DisplayState.FAILED


@dataclass(frozen=True)
class ScanReport:
    """All concern results of one scan, in invocation order."""

    results: Dict[Concern, ScanResult] = field(default_factory=dict)

    @property
    def requested(self) -> Tuple[Concern, ...]:
        return tuple(self.results)

    @property
    def total_findings(self) -> int:
        return sum(len(result.findings) for result in self.results.values())

    @property
    def total_passed(self) -> int:
        return sum(len(result.passed_checks) for result in self.results.values())

    @property
    def concerns_without_rules(self) -> int:
        return sum(1 for result in self.results.values() if not result.rules_evaluated)

    @property
    def summary(self) -> Summary:
        return Summary.from_findings(self.findings())

    def findings(self) -> List[Finding]:
        return [finding for result in self.results.values() for finding in result.findings]

    def state(self, concern: Concern) -> DisplayState:
        return display_state(self.results.get(concern))

    def states(self) -> Dict[Concern, DisplayState]:
        """Display state for every known concern, requested or not."""

        return {concern: self.state(concern) for concern in CONCERN_ORDER}

    def state_counts(self) -> Dict[DisplayState, int]:
        counts = {state: 0 for state in DisplayState}
        for concern in self.results:
            counts[self.state(concern)] += 1
        return counts

    @property
    def passed(self) -> bool:
        """True when no requested concern failed or was left incomplete."""

        return all(
            self.state(concern) not in (DisplayState.FAILED, DisplayState.INCOMPLETE)
            for concern in self.results
        )

    def findings_by_file(self, concern: Concern) -> Dict[str, List[Finding]]:
        grouped: Dict[str, List[Finding]] = {}
        result = self.results.get(concern)
        if result is None:
            return grouped
        for finding in result.findings:
            grouped.setdefault(finding.file, []).append(finding)
        return grouped


def aggregate(results: Iterable[ScanResult], requested: Optional[Iterable[Concern]] = None) -> ScanReport:
    """Fold results into a report keyed by concern in invocation order.

    When ``requested`` is given, results for other concerns are dropped and
    requested concerns without a result raise ``ValueError``.
    """

    by_concern: Dict[Concern, ScanResult] = {}
    for result in results:
        if result.concern in by_concern:
            raise ValueError(f"Duplicate result for concern {result.concern.value}")
        by_concern[result.concern] = result
    if requested is None:
        return ScanReport(results=by_concern)

    ordered: Dict[Concern, ScanResult] = {}
    for concern in requested:
        if concern not in by_concern:
            raise ValueError(f"Missing result for requested concern {concern.value}")
        ordered[concern] = by_concern[concern]
    return ScanReport(results=ordered)
