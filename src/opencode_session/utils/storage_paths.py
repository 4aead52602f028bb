"""Resolve OpenCode storage locations from record ids.

Every join between namespaces goes through one of these lookups:

    session record   storage/session/<projectID>/<sessionID>.json
    message dir      storage/message/<sessionID>/
    part dir         storage/part/<messageID>/
    diff / todo      storage/session_diff|todo/<sessionID>.json
    project record   storage/project/<projectID>.json
    snapshots        snapshot/<projectID>/
"""

from dataclasses import dataclass
from pathlib import Path

RECORD_SUFFIX = ".json"


def default_data_dir() -> Path:
    return Path.home() / ".local" / "share" / "opencode"


def default_state_dir() -> Path:
    return Path.home() / ".local" / "state" / "opencode"


@dataclass(frozen=True)
class StoragePaths:
    data_dir: Path
    state_dir: Path

    @classmethod
    def default(cls) -> "StoragePaths":
        return cls(data_dir=default_data_dir(), state_dir=default_state_dir())

    @classmethod
    def from_dirs(cls, data_dir: str | Path, state_dir: str | Path) -> "StoragePaths":
        return cls(
            data_dir=Path(data_dir).expanduser(),
            state_dir=Path(state_dir).expanduser(),
        )

    # -- namespace roots --------------------------------------------------

    @property
    def storage_dir(self) -> Path:
        return self.data_dir / "storage"

    @property
    def session_root(self) -> Path:
        return self.storage_dir / "session"

    @property
    def message_root(self) -> Path:
        return self.storage_dir / "message"

    @property
    def part_root(self) -> Path:
        return self.storage_dir / "part"

    @property
    def project_root(self) -> Path:
        return self.storage_dir / "project"

    @property
    def diff_root(self) -> Path:
        return self.storage_dir / "session_diff"

    @property
    def todo_root(self) -> Path:
        return self.storage_dir / "todo"

    @property
    def snapshot_root(self) -> Path:
        return self.data_dir / "snapshot"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "log"

    @property
    def frecency_file(self) -> Path:
        return self.state_dir / "frecency.jsonl"

    # -- id lookups ---------------------------------------------------------

    def project_file(self, project_id: str) -> Path:
        return self.project_root / f"{project_id}{RECORD_SUFFIX}"

    def project_session_dir(self, project_id: str) -> Path:
        return self.session_root / project_id

    def session_file(self, project_id: str, session_id: str) -> Path:
        return self.project_session_dir(project_id) / f"{session_id}{RECORD_SUFFIX}"

    def message_dir(self, session_id: str) -> Path:
        return self.message_root / session_id

    def part_dir(self, message_id: str) -> Path:
        return self.part_root / message_id

    def diff_file(self, session_id: str) -> Path:
        return self.diff_root / f"{session_id}{RECORD_SUFFIX}"

    def todo_file(self, session_id: str) -> Path:
        return self.todo_root / f"{session_id}{RECORD_SUFFIX}"

    def snapshot_dir(self, project_id: str) -> Path:
        return self.snapshot_root / project_id
