"""Utility helpers for the scanner."""

from .fileio import read_yaml_file, read_text_file
from .files import DEFAULT_IGNORE_DIRS, FileEnumerator, FileFilter
from .languages import LanguageClassifier, language_of

__all__ = [
    "read_yaml_file",
    "read_text_file",
    "DEFAULT_IGNORE_DIRS",
    "FileEnumerator",
    "FileFilter",
    "LanguageClassifier",
    "language_of",
]
