"""Shared test helpers: build an OpenCode storage tree on disk."""

import json
from pathlib import Path

from opencode_session.utils.storage_paths import StoragePaths


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


class StoreBuilder:
    """Writes records in the same layout OpenCode uses."""

    def __init__(self, paths: StoragePaths):
        self.paths = paths

    def project(self, project_id, worktree, created=1000, updated=2000) -> Path:
        return _write_json(self.paths.project_file(project_id), {
            "id": project_id,
            "worktree": str(worktree),
            "vcs": "git",
            "time": {"created": created, "updated": updated},
        })

    def session(self, project_id, session_id, directory, created=1000, updated=2000, title=None) -> Path:
        data = {
            "id": session_id,
            "slug": f"slug-{session_id}",
            "version": "1.0.0",
            "projectID": project_id,
            "directory": str(directory),
            "time": {"created": created, "updated": updated},
        }
        if title:
            data["title"] = title
        return _write_json(self.paths.session_file(project_id, session_id), data)

    def message(self, session_id, message_id, created=1000, role="user") -> Path:
        return _write_json(self.paths.message_dir(session_id) / f"{message_id}.json", {
            "id": message_id,
            "sessionID": session_id,
            "role": role,
            "time": {"created": created},
        })

    def part(self, session_id, message_id, part_id, text="hello", start=None) -> Path:
        data = {
            "id": part_id,
            "sessionID": session_id,
            "messageID": message_id,
            "type": "text",
            "text": text,
        }
        if start is not None:
            data["time"] = {"start": start}
        return _write_json(self.paths.part_dir(message_id) / f"{part_id}.json", data)

    def diff(self, session_id, data=None) -> Path:
        return _write_json(self.paths.diff_file(session_id), data or [{"file": "a.py"}])

    def todos(self, session_id, items) -> Path:
        return _write_json(self.paths.todo_file(session_id), items)

    def snapshot(self, project_id) -> Path:
        path = self.paths.snapshot_dir(project_id) / "objects" / "blob"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * 64)
        return path

    def log(self, filename, content="log line\n") -> Path:
        path = self.paths.log_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def frecency(self, lines: list[str]) -> Path:
        path = self.paths.frecency_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n")
        return path

    def full_session(self, project_id, session_id, directory, messages=2, parts=2, updated=2000):
        """A session with messages, parts, a diff and a todo file."""
        self.session(project_id, session_id, directory, updated=updated)
        for m in range(messages):
            message_id = f"{session_id}-msg{m}"
            self.message(session_id, message_id, created=m)
            for p in range(parts):
                self.part(session_id, message_id, f"{message_id}-prt{p}")
        self.diff(session_id)
        self.todos(session_id, [{"id": "1", "content": "x", "status": "pending", "priority": "high"}])


def tree_size(path: Path) -> int:
    if not path.exists():
        return 0
    if path.is_file():
        return path.stat().st_size
    return sum(p.stat().st_size for p in path.rglob("*") if p.is_file())
