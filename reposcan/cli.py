"""Command-line entry point for the repository security scanner."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
import webbrowser
from pathlib import Path
from typing import List, Sequence

from . import __version__
from .aggregator import ScanReport
from .concern import CONCERN_ORDER, Concern
from .config import ScanConfig, load_config
from .orchestrator import Orchestrator
from .registry import default_registry
from .report import format_terminal_report, write_reports
from .utils import FileEnumerator, LanguageClassifier

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reposcan",
        description="Heuristic security scanner for source repositories",
    )
    parser.add_argument("path", help="Path to the repository you want to scan.")
    parser.add_argument("--all", "-a", action="store_true", help="Run all scans.")
    parser.add_argument(
        "--string",
        "-s",
        action="store_true",
        help="Run the string input sanitization scan.",
    )
    parser.add_argument("--cors", "-c", action="store_true", help="Run the CORS configuration scan.")
    parser.add_argument("--auth", "-u", action="store_true", help="Run the authentication scan.")
    parser.add_argument("--authz", "-z", action="store_true", help="Run the authorization scan.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with scanner settings (ignore dirs, jobs, eslint command).",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Directory, relative to the repository, for report.html and report.json.",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Number of files evaluated in parallel.",
    )
    parser.add_argument(
        "--open",
        dest="open_report",
        action="store_true",
        help="Open the HTML report in the default browser when done.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def selected_concerns(args: argparse.Namespace) -> List[Concern]:
    return [concern for concern in CONCERN_ORDER if args.all or getattr(args, concern.selector)]


def run_scan(repo_path: Path, concerns: Sequence[Concern], config: ScanConfig) -> ScanReport:
    orchestrator = Orchestrator(default_registry(config), config=config)
    return orchestrator.scan(repo_path, concerns)


def write_output(report: ScanReport, repo_path: Path, config: ScanConfig, open_report: bool = False) -> None:
    print(format_terminal_report(report))

    html_path, json_path = write_reports(report, repo_path, config.report_dir)
    print(f"\nHTML report saved as {html_path}")
    print(f"JSON report saved as {json_path}")

    if open_report and not webbrowser.open(html_path.resolve().as_uri()):
        print(f"Could not open a browser. You can manually open the report at: {html_path}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    concerns = selected_concerns(args)
    if not concerns:
        print("No scans were performed. Please specify at least one scan type or use --all.")
        return 0

    try:
        config = load_config(args.config).merged(report_dir=args.report_dir, jobs=args.jobs)
        repo_path = Path(args.path)
        logger.info("Scanning %s for %s", repo_path, ", ".join(concern.value for concern in concerns))
        languages = LanguageClassifier(FileEnumerator(config.ignore_dirs)).classify(repo_path)
        print(f"Languages detected: {', '.join(sorted(languages)) or 'none'}\n")
        report = run_scan(repo_path, concerns, config)
        write_output(report, repo_path, config, open_report=args.open_report)
    except Exception as exc:  # pylint: disable=broad-except
        print(f"An error occurred during the scan: {exc}", file=sys.stderr)
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
