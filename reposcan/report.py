"""Render a ScanReport for the terminal, as HTML and as JSON."""

from __future__ import annotations

import json
from html import escape
from pathlib import Path
from typing import Dict, List, Tuple

from .aggregator import ScanReport
from .concern import DisplayState
from .result import Finding, ScanResult

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"

STATE_COLORS: Dict[DisplayState, str] = {
    DisplayState.PASSED: "#27ae60",
    DisplayState.FAILED: "#c0392b",
    DisplayState.NO_SUBJECT: "#7f8c8d",
    DisplayState.INCOMPLETE: "#e67e22",
}


def _location(finding: Finding) -> str:
    if finding.column is None:
        return f"{finding.file} (Line {finding.line})"
    return f"{finding.file} (Line {finding.line}, Column {finding.column})"


# ----------------------------------------------------------------------
# Terminal
# ----------------------------------------------------------------------
def format_terminal_report(report: ScanReport, max_findings: int = 20) -> str:
    """Create a human-readable report for console output."""

    lines: List[str] = []
    lines.append("Security Scan Report")
    lines.append("=" * 40)
    for concern, result in report.results.items():
        state = report.state(concern)
        lines.append(f"{concern.value}:")
        lines.append(f"  Status  : {state.value}")
        lines.append(f"  Findings: {len(result.findings)}  Passed checks: {len(result.passed_checks)}")
        if result.message:
            lines.append(f"  Message : {result.message}")
        for note in result.notes:
            lines.append(f"  Note    : {note}")
        findings = result.top_findings(max_findings)
        if findings:
            lines.append("  Vulnerabilities:")
            for finding in findings:
                lines.append(f"    - [{finding.severity.value}] {_location(finding)}: {finding.message}")
            hidden = len(result.findings) - len(findings)
            if hidden > 0:
                lines.append(f"    ... {hidden} more in report.json")
        lines.append("")

    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in report.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Findings      : {report.summary.total}")
    lines.append(f"Passed checks : {report.total_passed}")
    lines.append(f"Overall       : {'PASS' if report.passed else 'FAIL'}")
    return "\n".join(lines)


# ----------------------------------------------------------------------
# JSON
# ----------------------------------------------------------------------
def build_json_report(report: ScanReport) -> Dict[str, object]:
    """Findings grouped by file for each requested concern."""

    concerns: Dict[str, object] = {}
    for concern, result in report.results.items():
        grouped = {
            file: [
                {
                    "line": finding.line,
                    "column": finding.column,
                    "message": finding.message,
                    "type": finding.category.value,
                    "severity": finding.severity.value,
                    "rule": finding.rule,
                    "quickFix": finding.quick_fix,
                }
                for finding in findings
            ]
            for file, findings in report.findings_by_file(concern).items()
        }
        concerns[concern.value] = {
            "state": report.state(concern).value,
            "passed": result.passed,
            "message": result.message,
            "notes": list(result.notes),
            "rulesEvaluated": list(result.rules_evaluated),
            "findings": grouped,
            "passedChecks": [check.to_dict() for check in result.passed_checks],
        }
    return {
        "summary": {
            "requested": [concern.value for concern in report.requested],
            "totalFindings": report.total_findings,
            "totalPassed": report.total_passed,
            "concernsWithoutRules": report.concerns_without_rules,
            "severity": report.summary.to_dict(),
        },
        "concerns": concerns,
    }


def format_json_report(report: ScanReport) -> str:
    return json.dumps(build_json_report(report), indent=2)


# ----------------------------------------------------------------------
# HTML
# ----------------------------------------------------------------------
HTML_STYLE = """
body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 860px; margin: 0 auto; padding: 20px; }
h1 { color: #2c3e50; text-align: center; }
.check { background-color: #f9f9f9; border-radius: 5px; padding: 15px; margin-bottom: 20px; }
.check h2 { margin-top: 0; color: #34495e; }
.status { font-weight: bold; }
.PASSED { color: #27ae60; }
.FAILED { color: #c0392b; }
.NO_SUBJECT { color: #7f8c8d; }
.INCOMPLETE { color: #e67e22; }
.vulnerability { background-color: #ecf0f1; padding: 10px; border-radius: 3px; margin-bottom: 5px; }
.fix { color: #555; font-style: italic; }
.note { background-color: #fdf2e9; padding: 8px; border-radius: 3px; }
#chart { width: 100%; max-width: 600px; margin: 20px auto; }
"""


def _chart_data(report: ScanReport) -> Tuple[List[str], List[int], List[str]]:
    counts = report.state_counts()
    labels: List[str] = []
    values: List[int] = []
    colors: List[str] = []
    for state, color in STATE_COLORS.items():
        labels.append(state.value)
        values.append(counts[state])
        colors.append(color)
    return labels, values, colors


def _html_concern(report: ScanReport, result: ScanResult) -> List[str]:
    state = report.state(result.concern)
    parts = ['<div class="check">', f"<h2>{escape(result.concern.value)}</h2>"]
    parts.append(f'<p class="status {state.value}">Status: {state.value}</p>')
    parts.append(
        f"<p>Findings: {len(result.findings)} &middot; Passed checks: {len(result.passed_checks)}</p>"
    )
    if result.message:
        parts.append(f"<p>Message: {escape(result.message)}</p>")
    for note in result.notes:
        parts.append(f'<p class="note">{escape(note)}</p>')
    if result.findings:
        parts.append('<div class="vulnerabilities"><h3>Vulnerabilities:</h3>')
        for finding in result.findings:
            parts.append(
                '<div class="vulnerability">'
                f"[{finding.severity.value}] {escape(_location(finding))}: {escape(finding.message)}"
                f'<div class="fix">{escape(finding.quick_fix)}</div>'
                "</div>"
            )
        parts.append("</div>")
    parts.append("</div>")
    return parts


def format_html_report(report: ScanReport) -> str:
    labels, values, colors = _chart_data(report)
    chart_payload = json.dumps({"labels": labels, "values": values, "colors": colors})
    # Keep the payload from closing the script element early.
    chart_payload = chart_payload.replace("</", "<\\/")

    body: List[str] = []
    for result in report.results.values():
        body.extend(_html_concern(report, result))

    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="UTF-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
            "<title>Security Scan Report</title>",
            f'<script src="{CHART_JS_URL}"></script>',
            f"<style>{HTML_STYLE}</style>",
            "</head>",
            "<body>",
            "<h1>Security Scan Report</h1>",
            f"<p>Total findings: {report.total_findings} &middot; Total passed checks: {report.total_passed}</p>",
            '<div id="chart"><canvas id="securityChart"></canvas></div>',
            '<div id="results">',
            *body,
            "</div>",
            "<script>",
            f"const chartData = {chart_payload};",
            "new Chart(document.getElementById('securityChart').getContext('2d'), {",
            "  type: 'pie',",
            "  data: { labels: chartData.labels, datasets: [{ data: chartData.values, backgroundColor: chartData.colors }] },",
            "  options: { responsive: true, plugins: { legend: { position: 'top' },"
            " title: { display: true, text: 'Security Scan Results' } } }",
            "});",
            "</script>",
            "</body>",
            "</html>",
        ]
    )


# ----------------------------------------------------------------------
# Output
# ----------------------------------------------------------------------
def write_reports(report: ScanReport, repo_root: Path, report_dir: str) -> Tuple[Path, Path]:
    """Write ``report.html`` and ``report.json`` beneath the repository root."""

    output_dir = Path(repo_root) / report_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / "report.html"
    json_path = output_dir / "report.json"
    html_path.write_text(format_html_report(report), encoding="utf-8")
    json_path.write_text(format_json_report(report), encoding="utf-8")
    return html_path, json_path
