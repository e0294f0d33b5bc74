"""Run each concern's rules over the repository and fold them into results."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple, TypeVar

from .aggregator import ScanReport, aggregate
from .concern import Concern
from .config import ScanConfig
from .errors import LinterError, ScanError
from .registry import ConcernProfile, Registry
from .result import Finding, PassedCheck, ScanResult, not_applicable
from .rules import RuleOutcome
from .utils import FileEnumerator, language_of, read_text_file
from .utils.files import relative_posix

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class FileEvaluation:
    """What one readable candidate file contributed to a concern."""

    relative: str
    outcome: RuleOutcome = RuleOutcome()
    rules_run: Tuple[str, ...] = ()
    observed: bool = False
    delegated: bool = False


class Orchestrator:
    """Evaluate concerns against a repository using an explicit registry."""

    def __init__(
        self,
        registry: Registry,
        enumerator: Optional[FileEnumerator] = None,
        config: Optional[ScanConfig] = None,
    ) -> None:
        self.config = config or ScanConfig()
        self.registry = registry
        self.enumerator = enumerator or FileEnumerator(self.config.ignore_dirs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def scan(self, repo_root: Path | str, concerns: Sequence[Concern]) -> ScanReport:
        """Run ``concerns`` in order and aggregate them into one report."""

        root = self._validate_root(repo_root)
        results = [self.run_concern(concern, root) for concern in concerns]
        return aggregate(results, requested=concerns)

    def run_concern(self, concern: Concern, repo_root: Path | str) -> ScanResult:
        root = self._validate_root(repo_root)
        profile = self._profile(concern)

        candidates = self.enumerator.list(root, profile.file_filter)
        if not candidates:
            logger.info("%s: no candidate files", concern.value)
            return not_applicable(concern)
        logger.info("%s: evaluating %d candidate file(s)", concern.value, len(candidates))

        evaluations = self._map(
            lambda path: self._evaluate_file(profile, path, relative_posix(path, root)),
            candidates,
        )
        lint_outcomes, notes, tool_failed = self._run_linter(profile, candidates, evaluations)
        return self._fold(profile, root, candidates, evaluations, lint_outcomes, notes, tool_failed)

    # ------------------------------------------------------------------
    # Per-file evaluation
    # ------------------------------------------------------------------
    def _evaluate_file(self, profile: ConcernProfile, path: Path, relative: str) -> Optional[FileEvaluation]:
        content = read_text_file(path)
        if content is None:
            return None
        language = language_of(path)
        if profile.delegates(language):
            return FileEvaluation(relative, delegated=True)
        rules = profile.rules_for(language)
        if not rules or not profile.subject_observed(content, rules):
            logger.debug("%s: no %s subject matter", relative, profile.concern.value)
            return FileEvaluation(relative)
        outcome = RuleOutcome.combine(rule.evaluate(relative, content) for rule in rules)
        return FileEvaluation(
            relative,
            outcome=outcome,
            rules_run=tuple(rule.name for rule in rules),
            observed=True,
        )

    def _run_linter(
        self,
        profile: ConcernProfile,
        candidates: Sequence[Path],
        evaluations: Sequence[Optional[FileEvaluation]],
    ) -> Tuple[Dict[str, RuleOutcome], List[str], bool]:
        delegated = [
            (path, evaluation.relative)
            for path, evaluation in zip(candidates, evaluations)
            if evaluation is not None and evaluation.delegated
        ]
        if not delegated or profile.linter is None:
            return {}, [], False
        try:
            report = profile.linter.lint(delegated)
        except LinterError as exc:
            logger.warning("%s unavailable for %s: %s", profile.linter.name, profile.concern.value, exc)
            return {}, [f"{profile.linter.name} unavailable: {exc}"], True
        return report.outcomes, list(report.notes), False

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------
    def _fold(
        self,
        profile: ConcernProfile,
        root: Path,
        candidates: Sequence[Path],
        evaluations: Sequence[Optional[FileEvaluation]],
        lint_outcomes: Dict[str, RuleOutcome],
        notes: List[str],
        tool_failed: bool,
    ) -> ScanResult:
        findings: List[Finding] = []
        passed: List[PassedCheck] = []
        ran: Set[str] = set()
        skipped: List[str] = []
        scanned = 0
        implemented = False

        for path, evaluation in zip(candidates, evaluations):
            if evaluation is None:
                skipped.append(relative_posix(path, root))
                continue
            scanned += 1
            if evaluation.delegated:
                outcome = lint_outcomes.get(evaluation.relative)
                if outcome is None:
                    continue
                ran.add(profile.linter.name)
            elif evaluation.observed:
                outcome = evaluation.outcome
                ran.update(evaluation.rules_run)
            else:
                continue
            implemented = True
            findings.extend(outcome.findings)
            passed.extend(outcome.passed_checks)

        if skipped:
            logger.warning("%s: skipped %d unreadable file(s)", profile.concern.value, len(skipped))

        rules_evaluated = [rule.name for rule in profile.rules if rule.name in ran]
        if profile.linter is not None and profile.linter.name in ran:
            rules_evaluated.append(profile.linter.name)

        return ScanResult(
            concern=profile.concern,
            applicable=True,
            implemented=implemented,
            findings=tuple(findings),
            passed_checks=tuple(passed),
            rules_evaluated=tuple(rules_evaluated),
            files_scanned=scanned,
            skipped_files=tuple(skipped),
            notes=tuple(notes),
            tool_failed=tool_failed,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Apply ``func`` to ``items`` and return results in input order."""

        if self.config.jobs <= 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=min(self.config.jobs, len(items))) as executor:
            return list(executor.map(func, items))

    def _profile(self, concern: Concern) -> ConcernProfile:
        try:
            return self.registry[concern]
        except KeyError:
            raise ScanError(f"No rules registered for concern {concern.value}") from None

    @staticmethod
    def _validate_root(repo_root: Path | str) -> Path:
        root = Path(repo_root)
        if not root.exists():
            raise ScanError(f"Repository path does not exist: {root}")
        if not root.is_dir():
            raise ScanError(f"Repository path is not a directory: {root}")
        return root
