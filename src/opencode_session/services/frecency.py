"""Line-delimited frecency log: load and prune by path prefix."""

import contextlib
import logging
import os
import tempfile
from pathlib import Path

import orjson

from opencode_session.types import FrecencyEntry

logger = logging.getLogger(__name__)


class FrecencyIndex:
    """Reads and rewrites the frecency.jsonl usage log.

    Lines are appended by OpenCode itself; this class only reads the log and
    rewrites it with entries removed.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load_entries(self) -> list[FrecencyEntry]:
        """Parse every non-empty line; lines that don't parse are skipped."""
        try:
            content = self._path.read_bytes()
        except OSError:
            return []

        entries = []
        for line in content.splitlines():
            if not line.strip():
                continue
            try:
                raw = orjson.loads(line)
            except orjson.JSONDecodeError:
                continue
            entry = FrecencyEntry.from_dict(raw)
            if entry is not None:
                entries.append(entry)
        return entries

    def remove_by_path_prefix(self, prefix: str) -> int:
        """Drop entries whose path starts with prefix and rewrite the log.

        Kept lines, unparsable ones included, are written back byte for byte.
        The new log is written to a temp file and swapped in, so a failed
        write leaves the old log in place. Returns the number of entries
        removed; a missing log returns 0 and is not created.
        """
        # An empty or root prefix would match every entry.
        if not prefix.strip("/"):
            return 0
        try:
            content = self._path.read_bytes()
        except FileNotFoundError:
            return 0

        kept: list[bytes] = []
        removed = 0
        for line in content.splitlines(keepends=True):
            if not line.strip():
                continue
            try:
                raw = orjson.loads(line)
            except orjson.JSONDecodeError:
                raw = None
            path = raw.get("path") if isinstance(raw, dict) else None
            if isinstance(path, str) and path.startswith(prefix):
                removed += 1
                continue
            if not line.endswith(b"\n"):
                line += b"\n"
            kept.append(line)

        if removed == 0:
            return 0

        self._replace(b"".join(kept))
        logger.info("Removed %d frecency entries under %s", removed, prefix)
        return removed

    def _replace(self, data: bytes):
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
