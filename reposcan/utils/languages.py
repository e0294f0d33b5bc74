"""Language detection from file extensions."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Set

from .files import FileEnumerator, FileFilter

JAVASCRIPT = "JavaScript"
PYTHON = "Python"
PHP = "PHP"
JAVA = "Java"

LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    ".js": JAVASCRIPT,
    ".mjs": JAVASCRIPT,
    ".cjs": JAVASCRIPT,
    ".jsx": JAVASCRIPT,
    ".ts": JAVASCRIPT,
    ".tsx": JAVASCRIPT,
    ".py": PYTHON,
    ".php": PHP,
    ".java": JAVA,
}


def language_of(path: Path | str) -> Optional[str]:
    """Return the language identifier for a single file, if known."""

    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix.lower())


class LanguageClassifier:
    """Derive the set of languages present in a tree purely from extensions."""

    def __init__(self, enumerator: Optional[FileEnumerator] = None) -> None:
        self.enumerator = enumerator or FileEnumerator()

    def classify(self, root: Path) -> Set[str]:
        candidates = self.enumerator.list(root, FileFilter(extensions=tuple(LANGUAGE_BY_EXTENSION)))
        return self.classify_paths(candidates)

    def classify_paths(self, paths: Iterable[Path]) -> Set[str]:
        languages: Set[str] = set()
        for path in paths:
            language = language_of(path)
            if language:
                languages.add(language)
        return languages
