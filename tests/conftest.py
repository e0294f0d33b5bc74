from pathlib import Path

import pytest

from reposcan.config import ScanConfig
from reposcan.linter import DelegatedLinter
from reposcan.orchestrator import Orchestrator
from reposcan.registry import build_registry

SAMPLES = Path(__file__).parent.parent / "samples"


class FakeEslint:
    """Stands in for the eslint CLI; returns canned messages per file name."""

    name = "eslint"

    def __init__(self, messages=None, error=None):
        self.messages = messages or {}
        self.error = error
        self.calls = []

    def run(self, paths):
        self.calls.append(list(paths))
        if self.error is not None:
            raise self.error
        return [{"filePath": path, "messages": self.messages.get(Path(path).name, [])} for path in paths]


@pytest.fixture
def fake_eslint():
    return FakeEslint()


@pytest.fixture
def make_repo(tmp_path):
    def _make(files, root=None):
        base = root or tmp_path / "repo"
        base.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return base

    return _make


@pytest.fixture
def orchestrator_for():
    def _build(backend, jobs=1):
        registry = build_registry(linter=DelegatedLinter(backend))
        return Orchestrator(registry, config=ScanConfig(jobs=jobs))

    return _build
