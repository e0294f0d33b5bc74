"""Delegate JavaScript sanitization checks to ESLint.

ESLint runs with a fixed rule profile and ``--no-eslintrc`` so the target
repository's own lint configuration never changes the scan. Diagnostics from
the JSON formatter are translated into the scanner's ``Finding`` and
``PassedCheck`` model.

Requirements:
    - ``eslint`` (8.x, or 9.x with legacy config support) on ``PATH``
    - ``eslint-plugin-security`` resolvable by that eslint
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Protocol, Sequence, Tuple

from .concern import Concern
from .errors import LinterError
from .result import NO_QUICK_FIX, Finding, PassedCheck
from .rules import RuleOutcome
from .severity import Severity
from .utils.languages import JAVASCRIPT

logger = logging.getLogger(__name__)

DEFAULT_COMMAND: Tuple[str, ...] = ("eslint",)
DEFAULT_TIMEOUT = 300.0
BATCH_SIZE = 200

# rule id -> (severity, quick fix)
RULE_PROFILE: Mapping[str, Tuple[Severity, str]] = {
    "no-eval": (Severity.HIGH, "Remove eval(); parse data with JSON.parse or dispatch explicitly."),
    "no-implied-eval": (Severity.HIGH, "Pass functions, not strings, to setTimeout/setInterval."),
    "no-new-func": (Severity.HIGH, "Do not build functions from strings with new Function()."),
    "security/detect-eval-with-expression": (Severity.HIGH, "Never evaluate expressions derived from input."),
    "security/detect-child-process": (Severity.HIGH, "Use execFile/spawn with an argument array instead of exec."),
    "security/detect-non-literal-require": (Severity.MEDIUM, "Require modules by literal name only."),
    "security/detect-object-injection": (Severity.MEDIUM, "Validate keys against an allow-list or use a Map."),
    "security/detect-non-literal-regexp": (Severity.MEDIUM, "Escape input before building a RegExp from it."),
    "security/detect-unsafe-regex": (Severity.MEDIUM, "Rewrite the pattern to avoid catastrophic backtracking."),
}


class LinterBackend(Protocol):
    """Runs an external linter and returns its raw JSON report entries."""

    name: str

    def run(self, paths: Sequence[str]) -> List[Dict[str, Any]]:
        """Lint ``paths``; raise :class:`LinterError` when no usable output exists."""


class EslintBackend:
    """Invoke the ESLint CLI with the JSON formatter."""

    name = "eslint"

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        profile: Sequence[str] = tuple(RULE_PROFILE),
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.command = tuple(command)
        self.profile = tuple(profile)
        self.timeout = timeout

    def build_command(self, paths: Sequence[str]) -> List[str]:
        cmd = [
            *self.command,
            "--no-eslintrc",
            "--format", "json",
            "--env", "node,es2021",
            "--parser-options", "ecmaVersion:2021",
            "--plugin", "security",
            "--no-color",
        ]
        for rule_id in self.profile:
            cmd.extend(["--rule", f"{rule_id}: error"])
        cmd.extend(paths)
        return cmd

    def run(self, paths: Sequence[str]) -> List[Dict[str, Any]]:
        entries: List[Dict[str, Any]] = []
        for start in range(0, len(paths), BATCH_SIZE):
            entries.extend(self._run_batch(paths[start:start + BATCH_SIZE]))
        return entries

    def _run_batch(self, paths: Sequence[str]) -> List[Dict[str, Any]]:
        cmd = self.build_command(paths)
        env = dict(os.environ, ESLINT_USE_FLAT_CONFIG="false")
        logger.info("Running eslint on %d file(s)", len(paths))
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
                check=False,
            )
        except FileNotFoundError as exc:
            raise LinterError(f"{self.command[0]} executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise LinterError(f"eslint timed out after {self.timeout:g}s") from exc
        except OSError as exc:
            raise LinterError(f"eslint could not be started: {exc}") from exc

        # 0 = clean, 1 = lint errors reported, anything else = eslint itself failed
        if proc.returncode not in (0, 1):
            detail = (proc.stderr or proc.stdout or "").strip().splitlines()
            raise LinterError(
                f"eslint exited with status {proc.returncode}: {detail[0] if detail else 'no output'}"
            )
        try:
            data = json.loads(proc.stdout or "[]")
        except json.JSONDecodeError as exc:
            raise LinterError(f"eslint produced malformed JSON: {exc}") from exc
        if not isinstance(data, list):
            raise LinterError("eslint JSON output is not a list of file results")
        return data


@dataclass(frozen=True)
class LintReport:
    """Per-file outcomes from one delegated lint run."""

    outcomes: Dict[str, RuleOutcome] = field(default_factory=dict)
    notes: Tuple[str, ...] = ()


class DelegatedLinter:
    """Expose an external linter through the scanner's finding model."""

    def __init__(
        self,
        backend: LinterBackend,
        concern: Concern = Concern.SANITIZATION,
        languages: FrozenSet[str] = frozenset({JAVASCRIPT}),
        profile: Mapping[str, Tuple[Severity, str]] = RULE_PROFILE,
    ) -> None:
        self.backend = backend
        self.concern = concern
        self.languages = languages
        self.profile = profile

    @property
    def name(self) -> str:
        return self.backend.name

    def handles(self, language: Optional[str]) -> bool:
        return language in self.languages

    def lint(self, files: Sequence[Tuple[Path, str]]) -> LintReport:
        """Lint ``(absolute path, relative path)`` pairs.

        Raises :class:`LinterError` when the backend fails; callers decide how
        to degrade.
        """

        if not files:
            return LintReport()
        relative_by_absolute = {str(Path(path).resolve()): relative for path, relative in files}
        entries = self.backend.run(list(relative_by_absolute))

        outcomes: Dict[str, RuleOutcome] = {}
        notes: List[str] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise LinterError(f"{self.name} returned a malformed file result: {entry!r}")
            file_path = entry.get("filePath")
            relative = relative_by_absolute.get(str(Path(file_path).resolve())) if file_path else None
            if relative is None:
                logger.debug("Ignoring %s result for unrequested file %s", self.name, file_path)
                continue
            outcome, note = self._translate(relative, entry.get("messages") or [])
            if note:
                notes.append(note)
            if outcome is not None:
                outcomes[relative] = outcome
        return LintReport(outcomes=outcomes, notes=tuple(notes))

    def _translate(self, relative: str, messages: List[Dict[str, Any]]) -> Tuple[Optional[RuleOutcome], Optional[str]]:
        messages = [message for message in messages if isinstance(message, dict)]
        fatal = [message for message in messages if message.get("fatal")]
        if fatal:
            detail = fatal[0].get("message", "parse error")
            logger.warning("%s could not parse %s: %s", self.name, relative, detail)
            return None, f"{relative}: could not be parsed by {self.name} ({detail})"

        findings: List[Finding] = []
        for message in messages:
            rule_id = message.get("ruleId")
            if not rule_id or rule_id not in self.profile:
                continue
            severity, quick_fix = self.profile[rule_id]
            findings.append(
                Finding(
                    file=relative,
                    line=_position(message.get("line")) or 1,
                    column=_position(message.get("column")),
                    message=f"{rule_id}: {message.get('message', '')}",
                    category=self.concern,
                    severity=severity,
                    rule=self.name,
                    quick_fix=quick_fix or NO_QUICK_FIX,
                )
            )
        if findings:
            return RuleOutcome(findings=tuple(findings)), None
        passed = PassedCheck(
            file=relative,
            message=f"No unsafe sinks reported by {self.name}.",
            category=self.concern,
            rule=self.name,
        )
        return RuleOutcome(passed_checks=(passed,)), None


def _position(value: Any) -> Optional[int]:
    """Positive 1-based position, or None when absent or malformed."""

    try:
        position = int(value)
    except (TypeError, ValueError):
        return None
    return position if position >= 1 else None
