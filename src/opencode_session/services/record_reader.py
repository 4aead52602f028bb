"""Tolerant primitives for reading JSON records and sizes from disk.

Nothing in here raises for I/O problems: a missing, unreadable or malformed
record reads as None, and a missing directory has size 0 and no entries.
"""

import logging
import os
from pathlib import Path

import orjson

from opencode_session.utils.storage_paths import RECORD_SUFFIX

logger = logging.getLogger(__name__)


def read_record(path: str | Path):
    """Decode one JSON document, or return None if it can't be read."""
    try:
        data = Path(path).read_bytes()
    except OSError:
        return None
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        logger.debug("Malformed record %s: %s", path, e)
        return None


def file_size(path: str | Path) -> int:
    try:
        return os.stat(path).st_size
    except OSError:
        return 0


def dir_size(path: str | Path) -> int:
    """Total size of regular files below path, 0 if it can't be read."""
    total = 0
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except OSError:
        return 0

    for entry in entries:
        try:
            if entry.is_file(follow_symlinks=False):
                total += entry.stat(follow_symlinks=False).st_size
            elif entry.is_dir(follow_symlinks=False):
                total += dir_size(entry.path)
        except OSError:
            continue
    return total


def list_dir(path: str | Path) -> list[str]:
    """Sorted entry names in a directory, empty if it can't be listed."""
    try:
        return sorted(os.listdir(path))
    except OSError:
        return []


def list_record_files(path: str | Path) -> list[Path]:
    """Paths of the *.json records directly inside a directory."""
    base = Path(path)
    return [base / name for name in list_dir(base) if name.endswith(RECORD_SUFFIX)]


def path_exists(path: str | Path | None) -> bool:
    if not path:
        return False
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False
