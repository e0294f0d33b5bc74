"""Basic file IO helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1_000_000


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> Optional[str]:
    """Return the file contents as text, or ``None`` when it cannot be scanned.

    Missing, unreadable, oversized and binary files all yield ``None``.
    Undecodable bytes in text files are replaced rather than rejected.
    """

    try:
        if path.stat().st_size > MAX_FILE_SIZE:
            logger.warning("Skipping %s: larger than %d bytes", path, MAX_FILE_SIZE)
            return None
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("Skipping %s: %s", path, exc)
        return None
    if b"\x00" in data:
        logger.debug("Skipping %s: binary content", path)
        return None
    return data.decode("utf-8", errors="replace")
