import json
import shutil

import pytest

from reposcan import cli
from reposcan.concern import Concern, DisplayState
from reposcan.config import ScanConfig
from reposcan.linter import DelegatedLinter
from reposcan.registry import build_registry

from conftest import SAMPLES, FakeEslint


@pytest.fixture(autouse=True)
def fake_linter(monkeypatch):
    backend = FakeEslint()
    monkeypatch.setattr(cli, "default_registry", lambda config: build_registry(linter=DelegatedLinter(backend)))
    return backend


def _copy_sample(name, tmp_path):
    target = tmp_path / name
    shutil.copytree(SAMPLES / name, target)
    return target


def test_cli_reports_vulnerable_sample(tmp_path, capsys):
    repo = _copy_sample("vulnerable", tmp_path)

    exit_code = cli.main([str(repo), "--all"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "Security Scan Report" in captured.out
    assert "HTML report saved as" in captured.out
    data = json.loads((repo / "security_report" / "report.json").read_text(encoding="utf-8"))
    states = {name: concern["state"] for name, concern in data["concerns"].items()}
    assert states == {
        "Sanitization": "FAILED",
        "CORS": "FAILED",
        "Authentication": "FAILED",
        "Authorization": "FAILED",
    }
    assert data["summary"]["severity"]["high"] >= 1
    assert (repo / "security_report" / "report.html").exists()


def test_cli_passes_on_safe_sample(tmp_path, capsys):
    repo = _copy_sample("safe", tmp_path)

    exit_code = cli.main([str(repo), "-s", "-c", "-u", "-z", "--jobs", "2"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "Overall       : PASS" in captured.out
    data = json.loads((repo / "security_report" / "report.json").read_text(encoding="utf-8"))
    assert data["summary"]["totalFindings"] == 0
    assert all(concern["passed"] for concern in data["concerns"].values())


def test_cli_runs_only_selected_concerns(tmp_path, capsys):
    repo = _copy_sample("vulnerable", tmp_path)

    exit_code = cli.main([str(repo), "--cors", "--report-dir", "out"])

    capsys.readouterr()
    assert exit_code == 0
    data = json.loads((repo / "out" / "report.json").read_text(encoding="utf-8"))
    assert list(data["concerns"]) == ["CORS"]
    assert [entry["line"] for entry in data["concerns"]["CORS"]["findings"]["server.js"]] == [6]


def test_cli_without_selector_writes_nothing(tmp_path, capsys):
    repo = _copy_sample("vulnerable", tmp_path)

    exit_code = cli.main([str(repo)])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "No scans were performed" in captured.out
    assert not (repo / "security_report").exists()


def test_cli_missing_repository_exits_with_error(tmp_path, capsys):
    exit_code = cli.main([str(tmp_path / "missing"), "--all"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "Repository path does not exist" in captured.err
    assert "Traceback" in captured.err


def test_cli_reads_config_file(tmp_path, capsys):
    repo = _copy_sample("vulnerable", tmp_path)
    config = tmp_path / "reposcan.yaml"
    config.write_text("report_dir: scans\njobs: 1\n", encoding="utf-8")

    exit_code = cli.main([str(repo), "-c", "--config", str(config)])

    capsys.readouterr()
    assert exit_code == 0
    assert (repo / "scans" / "report.html").exists()


def test_cli_open_uses_browser(tmp_path, capsys, monkeypatch):
    repo = _copy_sample("safe", tmp_path)
    opened = []
    monkeypatch.setattr(cli.webbrowser, "open", lambda url: opened.append(url) or True)

    exit_code = cli.main([str(repo), "-c", "--open"])

    capsys.readouterr()
    assert exit_code == 0
    assert opened == [(repo / "security_report" / "report.html").resolve().as_uri()]


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("reposcan ")


def test_cli_run_scan_uses_default_registry(make_repo):
    repo = make_repo({"server.js": "app.use(cors({origin: '*'}))\n"})

    report = cli.run_scan(repo, [Concern.CORS], ScanConfig())

    assert report.requested == (Concern.CORS,)
    assert report.state(Concern.CORS) is DisplayState.FAILED
