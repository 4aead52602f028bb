"""Derived records assembled by the loader into one snapshot."""

from dataclasses import dataclass, field, fields

from opencode_session.types.records import LogFile, Project, Session


@dataclass(frozen=True)
class SessionInfo(Session):
    size_bytes: int = 0
    message_count: int = 0
    is_orphan: bool = False
    project_worktree: str = "/"

    @classmethod
    def from_session(cls, session: Session, **derived) -> "SessionInfo":
        base = {f.name: getattr(session, f.name) for f in fields(Session)}
        return cls(**base, **derived)


@dataclass(frozen=True)
class ProjectInfo(Project):
    session_count: int = 0
    total_size_bytes: int = 0
    is_orphan: bool = False
    sessions: tuple[SessionInfo, ...] = ()
    has_record: bool = True  # False for placeholders built from orphaned sessions

    @classmethod
    def from_project(cls, project: Project, **derived) -> "ProjectInfo":
        base = {f.name: getattr(project, f.name) for f in fields(Project)}
        return cls(**base, **derived)


@dataclass(frozen=True)
class ProjectStorageInfo:
    session_files: int = 0
    message_files: int = 0
    part_files: int = 0
    diff_size: int = 0
    todo_size: int = 0
    total_messages: int = 0
    total_parts: int = 0


@dataclass(frozen=True)
class LoadedData:
    """One fully-loaded view of the store."""

    sessions: list[SessionInfo] = field(default_factory=list)
    projects: list[ProjectInfo] = field(default_factory=list)
    logs: list[LogFile] = field(default_factory=list)

    @property
    def orphan_sessions(self) -> list[SessionInfo]:
        return [s for s in self.sessions if s.is_orphan]

    @property
    def orphan_projects(self) -> list[ProjectInfo]:
        return [p for p in self.projects if p.is_orphan]

    @property
    def total_size_bytes(self) -> int:
        return sum(p.total_size_bytes for p in self.projects)

    @property
    def total_log_bytes(self) -> int:
        return sum(log.size_bytes for log in self.logs)
