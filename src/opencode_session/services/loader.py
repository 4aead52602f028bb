"""Load the OpenCode storage tree into a LoadedData snapshot."""

import logging
import re
from datetime import datetime

from opencode_session.services.frecency import FrecencyIndex
from opencode_session.services.record_reader import (
    dir_size,
    file_size,
    list_dir,
    list_record_files,
    path_exists,
    read_record,
)
from opencode_session.types import (
    FrecencyEntry,
    LoadedData,
    LogFile,
    Message,
    Part,
    Project,
    ProjectInfo,
    ProjectStorageInfo,
    RecordTime,
    Session,
    SessionInfo,
    Todo,
)
from opencode_session.utils.storage_paths import StoragePaths

logger = logging.getLogger(__name__)

# e.g. 2026-01-17T071231.log
LOG_NAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})T(\d{2})(\d{2})(\d{2})\.log$")

UNKNOWN_WORKTREE = "/unknown"
DEFAULT_WORKTREE = "/"


def parse_log_date(filename: str, now: datetime | None = None) -> datetime:
    """Date encoded in a log filename, or now if the name doesn't match."""
    match = LOG_NAME_RE.match(filename)
    if match:
        try:
            return datetime(*(int(g) for g in match.groups()))
        except ValueError:
            pass
    return now or datetime.now()


class StorageLoader:
    """Joins project, session, message and part records across namespaces.

    Every call reads from disk; nothing is cached between loads.
    """

    def __init__(self, paths: StoragePaths, frecency: FrecencyIndex | None = None):
        self._paths = paths
        self._frecency = frecency or FrecencyIndex(paths.frecency_file)

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    # ------------------------------------------------------------------
    # Projects and sessions
    # ------------------------------------------------------------------

    def load_projects(self) -> dict[str, Project]:
        projects: dict[str, Project] = {}
        for record_path in list_record_files(self._paths.project_root):
            project = Project.from_dict(read_record(record_path))
            if project is None:
                logger.debug("Skipping unreadable project record %s", record_path)
                continue
            projects[project.id] = project
        return projects

    def message_ids(self, session_id: str) -> list[str]:
        """Ids of the readable messages stored for a session."""
        ids = []
        for record_path in list_record_files(self._paths.message_dir(session_id)):
            message = Message.from_dict(read_record(record_path))
            if message is not None:
                ids.append(message.id)
        return ids

    def session_message_count(self, session_id: str) -> int:
        return len(list_record_files(self._paths.message_dir(session_id)))

    def session_storage_size(self, session_id: str) -> int:
        """Bytes owned by a session outside its own record file."""
        total = dir_size(self._paths.message_dir(session_id))
        for message_id in self.message_ids(session_id):
            total += dir_size(self._paths.part_dir(message_id))
        total += file_size(self._paths.diff_file(session_id))
        total += file_size(self._paths.todo_file(session_id))
        return total

    def load_sessions(self, projects: dict[str, Project]) -> list[SessionInfo]:
        """Load every session record, newest first."""
        sessions: list[SessionInfo] = []
        session_root = self._paths.session_root

        for project_id in list_dir(session_root):
            project_dir = session_root / project_id
            if not project_dir.is_dir():
                continue

            project = projects.get(project_id)
            worktree = project.worktree if project else DEFAULT_WORKTREE

            for record_path in list_record_files(project_dir):
                session = Session.from_dict(read_record(record_path))
                if session is None:
                    logger.debug("Skipping unreadable session record %s", record_path)
                    continue

                message_count = self.session_message_count(session.id)
                size = file_size(record_path) + self.session_storage_size(session.id)

                sessions.append(SessionInfo.from_session(
                    session,
                    size_bytes=size,
                    message_count=message_count,
                    is_orphan=not path_exists(session.directory),
                    project_worktree=worktree,
                ))

        sessions.sort(key=lambda s: s.time.updated, reverse=True)
        return sessions

    def load_project_infos(
        self,
        sessions: list[SessionInfo],
        projects: dict[str, Project],
    ) -> list[ProjectInfo]:
        """Group sessions under their projects.

        Sessions whose projectID has no project record are grouped under a
        placeholder project flagged as orphaned.
        """
        by_project: dict[str, list[SessionInfo]] = {}
        for session in sessions:
            by_project.setdefault(session.project_id, []).append(session)

        infos: list[ProjectInfo] = []
        for project_id, project_sessions in by_project.items():
            total = sum(s.size_bytes for s in project_sessions)
            project = projects.get(project_id)
            if project is None:
                placeholder = Project(
                    id=project_id,
                    worktree=project_sessions[0].directory or UNKNOWN_WORKTREE,
                    time=RecordTime(
                        created=min(s.time.created for s in project_sessions),
                        updated=max(s.time.updated for s in project_sessions),
                    ),
                )
                infos.append(ProjectInfo.from_project(
                    placeholder,
                    session_count=len(project_sessions),
                    total_size_bytes=total,
                    is_orphan=True,
                    sessions=tuple(project_sessions),
                    has_record=False,
                ))
                continue

            infos.append(ProjectInfo.from_project(
                project,
                session_count=len(project_sessions),
                total_size_bytes=total,
                is_orphan=not path_exists(project.worktree),
                sessions=tuple(project_sessions),
            ))

        for project_id, project in projects.items():
            if project_id in by_project:
                continue
            infos.append(ProjectInfo.from_project(
                project,
                is_orphan=not path_exists(project.worktree),
            ))

        infos.sort(key=lambda p: p.time.updated, reverse=True)
        return infos

    # ------------------------------------------------------------------
    # Logs and frecency
    # ------------------------------------------------------------------

    def load_logs(self) -> list[LogFile]:
        logs: list[LogFile] = []
        log_dir = self._paths.log_dir
        for name in list_dir(log_dir):
            if not name.endswith(".log"):
                continue
            path = log_dir / name
            if not path.is_file():
                continue
            logs.append(LogFile(
                path=str(path),
                filename=name,
                date=parse_log_date(name),
                size_bytes=file_size(path),
            ))
        logs.sort(key=lambda log: log.date, reverse=True)
        return logs

    def load_frecency(self) -> list[FrecencyEntry]:
        return self._frecency.load_entries()

    # ------------------------------------------------------------------
    # Per-entity detail
    # ------------------------------------------------------------------

    def load_messages(self, session_id: str) -> list[Message]:
        messages = []
        for record_path in list_record_files(self._paths.message_dir(session_id)):
            message = Message.from_dict(read_record(record_path))
            if message is not None:
                messages.append(message)
        messages.sort(key=lambda m: m.time.created)
        return messages

    def load_parts(self, message_id: str) -> list[Part]:
        parts = []
        for record_path in list_record_files(self._paths.part_dir(message_id)):
            part = Part.from_dict(read_record(record_path))
            if part is not None:
                parts.append(part)
        parts.sort(key=lambda p: (p.time_start or 0, p.id))
        return parts

    def load_todos(self, session_id: str) -> list[Todo]:
        raw = read_record(self._paths.todo_file(session_id))
        if not isinstance(raw, list):
            return []
        todos = (Todo.from_dict(item) for item in raw)
        return [t for t in todos if t is not None]

    def get_project_storage_info(self, project_id: str) -> ProjectStorageInfo:
        """Count the files and bytes stored for one project's sessions."""
        session_files = list_record_files(self._paths.project_session_dir(project_id))
        message_files = 0
        part_files = 0
        diff_size = 0
        todo_size = 0

        for record_path in session_files:
            session = Session.from_dict(read_record(record_path))
            if session is None:
                continue

            message_records = list_record_files(self._paths.message_dir(session.id))
            message_files += len(message_records)
            for message_path in message_records:
                message = Message.from_dict(read_record(message_path))
                if message is None:
                    continue
                part_files += len(list_record_files(self._paths.part_dir(message.id)))

            diff_size += file_size(self._paths.diff_file(session.id))
            todo_size += file_size(self._paths.todo_file(session.id))

        return ProjectStorageInfo(
            session_files=len(session_files),
            message_files=message_files,
            part_files=part_files,
            diff_size=diff_size,
            todo_size=todo_size,
            total_messages=message_files,
            total_parts=part_files,
        )

    # ------------------------------------------------------------------
    # Full snapshot
    # ------------------------------------------------------------------

    def load_all_data(self) -> LoadedData:
        projects = self.load_projects()
        sessions = self.load_sessions(projects)
        project_infos = self.load_project_infos(sessions, projects)
        logs = self.load_logs()
        logger.debug(
            "Loaded %d sessions, %d projects, %d logs from %s",
            len(sessions), len(project_infos), len(logs), self._paths.data_dir,
        )
        return LoadedData(sessions=sessions, projects=project_infos, logs=logs)


def load_all_data(paths: StoragePaths | None = None) -> LoadedData:
    """Load a fresh snapshot from the given (or default) storage location."""
    return StorageLoader(paths or StoragePaths.default()).load_all_data()
