import json
import subprocess

import pytest

from reposcan.concern import Concern
from reposcan.errors import LinterError
from reposcan.linter import DelegatedLinter, EslintBackend
from reposcan.severity import Severity

from conftest import FakeEslint


class _Completed:
    def __init__(self, returncode=0, stdout="[]", stderr=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def test_build_command_pins_rule_profile():
    backend = EslintBackend(command=("npx", "eslint"), profile=("no-eval",))

    cmd = backend.build_command(["/repo/a.js"])

    assert cmd[:3] == ["npx", "eslint", "--no-eslintrc"]
    assert "--plugin" in cmd and "security" in cmd
    assert ["--rule", "no-eval: error"] == cmd[-3:-1]
    assert cmd[-1] == "/repo/a.js"


def test_eslint_backend_parses_json(monkeypatch):
    payload = [{"filePath": "/repo/a.js", "messages": []}]
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["env"] = kwargs["env"]
        return _Completed(returncode=1, stdout=json.dumps(payload))

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert EslintBackend().run(["/repo/a.js"]) == payload
    assert seen["cmd"][0] == "eslint"
    assert seen["env"]["ESLINT_USE_FLAT_CONFIG"] == "false"


@pytest.mark.parametrize(
    "outcome",
    [
        FileNotFoundError("eslint"),
        subprocess.TimeoutExpired(cmd="eslint", timeout=1),
        _Completed(returncode=2, stderr="Oops! Something went wrong!"),
        _Completed(returncode=0, stdout="not json"),
        _Completed(returncode=0, stdout='{"filePath": "a.js"}'),
    ],
)
def test_eslint_backend_failures_raise_linter_error(monkeypatch, outcome):
    def fake_run(cmd, **kwargs):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(LinterError):
        EslintBackend().run(["/repo/a.js"])


def test_delegated_linter_translates_profile_rules(tmp_path):
    source = tmp_path / "app.js"
    source.write_text("eval(input)\n", encoding="utf-8")
    backend = FakeEslint(
        messages={
            "app.js": [
                {"ruleId": "no-eval", "line": 1, "column": 1, "message": "eval can be harmful."},
                {"ruleId": "semi", "line": 1, "column": 12, "message": "Missing semicolon."},
            ]
        }
    )

    report = DelegatedLinter(backend).lint([(source, "app.js")])

    outcome = report.outcomes["app.js"]
    assert len(outcome.findings) == 1
    finding = outcome.findings[0]
    assert finding.message == "no-eval: eval can be harmful."
    assert finding.severity is Severity.HIGH
    assert finding.category is Concern.SANITIZATION
    assert finding.rule == "eslint"
    assert (finding.line, finding.column) == (1, 1)
    assert outcome.passed_checks == ()


def test_delegated_linter_clean_file_is_a_passed_check(tmp_path):
    source = tmp_path / "ok.js"
    source.write_text("module.exports = 1;\n", encoding="utf-8")

    report = DelegatedLinter(FakeEslint()).lint([(source, "ok.js")])

    outcome = report.outcomes["ok.js"]
    assert outcome.findings == ()
    assert [check.message for check in outcome.passed_checks] == ["No unsafe sinks reported by eslint."]


def test_delegated_linter_parse_error_becomes_note(tmp_path):
    source = tmp_path / "broken.js"
    source.write_text("function (\n", encoding="utf-8")
    backend = FakeEslint(
        messages={"broken.js": [{"fatal": True, "line": 1, "message": "Parsing error: Unexpected token ("}]}
    )

    report = DelegatedLinter(backend).lint([(source, "broken.js")])

    assert report.outcomes == {}
    assert report.notes == ("broken.js: could not be parsed by eslint (Parsing error: Unexpected token ()",)


def test_delegated_linter_propagates_backend_errors(tmp_path):
    source = tmp_path / "a.js"
    source.write_text("x\n", encoding="utf-8")

    with pytest.raises(LinterError):
        DelegatedLinter(FakeEslint(error=LinterError("eslint executable not found"))).lint([(source, "a.js")])


def test_delegated_linter_handles_only_javascript():
    linter = DelegatedLinter(FakeEslint())

    assert linter.handles("JavaScript")
    assert not linter.handles("Python")
    assert not linter.handles(None)
