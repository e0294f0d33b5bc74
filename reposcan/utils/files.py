"""Repository traversal with concern-specific filters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

DEFAULT_IGNORE_DIRS: Tuple[str, ...] = (
    "node_modules",
    "lib",
    "vendor",
    "dist",
    "build",
    ".venv",
    "venv",
    "env",
    "__pycache__",
    ".git",
)

# Keyword-matched files outside the source extensions are only read when
# they look like text configuration.
KEYWORD_EXTENSIONS: Tuple[str, ...] = (
    ".json",
    ".yaml",
    ".yml",
    ".toml",
    ".ini",
    ".cfg",
    ".conf",
    ".env",
)

# dotfiles such as .env or .env.production have no extension
KEYWORD_FILENAMES: Tuple[str, ...] = (".env",)


@dataclass(frozen=True)
class FileFilter:
    """Select candidate files by extension or by keywords in the path."""

    extensions: Tuple[str, ...] = ()
    path_keywords: Tuple[str, ...] = ()

    def matches(self, relative: str) -> bool:
        name = os.path.basename(relative).lower()
        suffix = os.path.splitext(name)[1]
        if suffix in self.extensions:
            return True
        if suffix not in KEYWORD_EXTENSIONS and not name.startswith(KEYWORD_FILENAMES):
            return False
        lowered = relative.lower()
        return any(keyword in lowered for keyword in self.path_keywords)


class FileEnumerator:
    """Walk a tree in a stable order, pruning ignored directories."""

    def __init__(self, ignore_dirs: Iterable[str] = DEFAULT_IGNORE_DIRS) -> None:
        self.ignore_dirs = frozenset(ignore_dirs)

    def list(self, root: Path, file_filter: FileFilter) -> List[Path]:
        """Return matching files beneath ``root`` in traversal order."""

        root = Path(root)
        matched: List[Path] = []
        for current, dirs, filenames in os.walk(root):
            dirs[:] = sorted(d for d in dirs if d not in self.ignore_dirs)
            for name in sorted(filenames):
                path = Path(current) / name
                if not path.is_file():
                    continue
                if file_filter.matches(path.relative_to(root).as_posix()):
                    matched.append(path)
        return matched


def relative_posix(path: Path, root: Path) -> str:
    """Repository-relative path with forward slashes, independent of cwd."""

    return Path(path).relative_to(root).as_posix()
