"""Scanner configuration and its YAML loader."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .linter import DEFAULT_COMMAND, DEFAULT_TIMEOUT
from .utils import read_yaml_file
from .utils.files import DEFAULT_IGNORE_DIRS

DEFAULT_REPORT_DIR = "security_report"
DEFAULT_JOBS = 4


@dataclass(frozen=True)
class ScanConfig:
    """Knobs that shape a scan without changing rule semantics."""

    extra_ignore_dirs: Tuple[str, ...] = ()
    report_dir: str = DEFAULT_REPORT_DIR
    jobs: int = DEFAULT_JOBS
    eslint_command: Tuple[str, ...] = DEFAULT_COMMAND
    eslint_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if self.jobs < 1:
            raise ValueError(f"jobs must be at least 1, got {self.jobs}")
        if not self.eslint_command:
            raise ValueError("eslint_command must not be empty")
        if self.eslint_timeout <= 0:
            raise ValueError("eslint_timeout must be positive")
        if not self.report_dir or Path(self.report_dir).is_absolute():
            raise ValueError("report_dir must be a relative directory name")

    @property
    def ignore_dirs(self) -> Tuple[str, ...]:
        """Directory names pruned during traversal, report output included."""

        report_root = Path(self.report_dir).parts[0]
        names = DEFAULT_IGNORE_DIRS + tuple(self.extra_ignore_dirs) + (report_root,)
        return tuple(dict.fromkeys(names))

    def merged(self, **overrides: Any) -> "ScanConfig":
        """Return a copy with the non-``None`` overrides applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values) if values else self


def _as_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    raise ValueError(f"{key} must be a string or a list of strings")


def config_from_mapping(data: Dict[str, Any]) -> ScanConfig:
    known = {item.name for item in fields(ScanConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
    values: Dict[str, Any] = dict(data)
    for key in ("extra_ignore_dirs", "eslint_command"):
        if key in values:
            values[key] = _as_tuple(key, values[key])
    if "jobs" in values:
        values["jobs"] = int(values["jobs"])
    if "eslint_timeout" in values:
        values["eslint_timeout"] = float(values["eslint_timeout"])
    if "report_dir" in values:
        values["report_dir"] = str(values["report_dir"])
    return ScanConfig(**values)


def load_config(path: Optional[Path]) -> ScanConfig:
    """Load a YAML configuration file; ``None`` yields the defaults."""

    if path is None:
        return ScanConfig()
    path = Path(path)
    if not path.is_file():
        raise ValueError(f"Configuration file not found: {path}")
    data = read_yaml_file(path)
    if data is None:
        return ScanConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Configuration at {path} is not a mapping")
    return config_from_mapping(data)
