import re

import pytest

from reposcan.concern import Concern
from reposcan.result import Finding, PassedCheck
from reposcan.rules import RuleOutcome
from reposcan.rules.patterns import AdjacentMarkersCheck, LineCheck, markers
from reposcan.severity import Severity


def _check(**overrides):
    values = dict(
        name="token_check",
        concern=Concern.AUTHENTICATION,
        trigger=re.compile(r"token\("),
        requires=re.compile(r"ttl="),
        finding_message="token without ttl",
        pass_message="token has ttl",
    )
    values.update(overrides)
    return LineCheck(**values)


def test_line_check_emits_one_result_per_triggering_line():
    content = "token(ttl=5)\nother()\n  token()\n"

    outcome = _check().evaluate("a.py", content)

    assert [check.line for check in outcome.passed_checks] == [1]
    assert len(outcome.findings) == 1
    finding = outcome.findings[0]
    assert (finding.line, finding.column) == (3, 3)
    assert finding.rule == "token_check"
    assert finding.category is Concern.AUTHENTICATION


def test_line_check_ignores_content_without_trigger():
    outcome = _check().evaluate("a.py", "nothing to see\n")

    assert outcome == RuleOutcome()


def test_line_check_forbids_marks_violation():
    check = _check(requires=None, forbids=re.compile(r"\*"))

    outcome = check.evaluate("a.js", "token('*')\ntoken('a')")

    assert [finding.line for finding in outcome.findings] == [1]
    assert [passed.line for passed in outcome.passed_checks] == [2]


def test_unconditional_check_always_finds():
    check = _check(requires=None, pass_message=None)

    outcome = check.evaluate("a.py", "token()\ntoken(ttl=1)")

    assert len(outcome.findings) == 2
    assert outcome.passed_checks == ()


def test_conditional_check_needs_pass_message():
    with pytest.raises(ValueError):
        _check(pass_message=None)


def test_language_scoping():
    check = _check(languages=frozenset({"Python"}))

    assert check.applies_to("Python")
    assert not check.applies_to("PHP")
    assert _check().applies_to(None)


def test_adjacent_markers_flags_neighbouring_lines():
    check = AdjacentMarkersCheck(
        name="adjacent",
        concern=Concern.AUTHORIZATION,
        first=re.compile("authenticate"),
        second=re.compile("authorize"),
        finding_message="too close",
        pass_message="separated",
    )

    close = check.evaluate("mw.js", "x\nauthenticate(req)\nauthorize(req)\n")
    apart = check.evaluate("mw.js", "authenticate(req)\n\n\nauthorize(req)\n")
    missing = check.evaluate("mw.js", "authenticate(req)\n")

    assert [finding.line for finding in close.findings] == [2]
    assert close.findings[0].severity is Severity.LOW
    assert apart.findings == ()
    assert apart.passed_checks[0].line is None
    assert missing == RuleOutcome()


def test_markers_escapes_literals():
    pattern = markers("a.b", "c(")

    assert pattern.search("x a.b y")
    assert pattern.search("c(")
    assert not pattern.search("axb")


def test_rule_outcome_combine_preserves_order():
    first = RuleOutcome(findings=(Finding("a", 1, "m", Concern.CORS, Severity.LOW, "r1"),))
    second = RuleOutcome(passed_checks=(PassedCheck("a", "ok", Concern.CORS, "r2"),))

    combined = RuleOutcome.combine([first, second, RuleOutcome()])

    assert [finding.rule for finding in combined.findings] == ["r1"]
    assert [check.rule for check in combined.passed_checks] == ["r2"]
    assert combined != RuleOutcome()


def test_finding_validates_location():
    with pytest.raises(ValueError):
        Finding("", 1, "m", Concern.CORS, Severity.LOW, "r")
    with pytest.raises(ValueError):
        Finding("a.js", 0, "m", Concern.CORS, Severity.LOW, "r")
    with pytest.raises(ValueError):
        Finding("a.js", 1, "m", Concern.CORS, Severity.LOW, "r", column=0)
