"""Result types returned by deletion operations."""

from dataclasses import dataclass, field


@dataclass
class DeleteSessionResult:
    success: bool
    session_id: str
    files_deleted: int = 0
    bytes_freed: int = 0
    error: str | None = None


@dataclass
class DeleteProjectResult:
    success: bool
    project_id: str
    sessions_deleted: int = 0
    files_deleted: int = 0
    bytes_freed: int = 0
    frecency_entries_removed: int = 0
    error: str | None = None


@dataclass
class DeleteLogResult:
    success: bool
    filename: str
    bytes_freed: int = 0
    error: str | None = None


@dataclass
class DeleteSummary:
    """Aggregate outcome of one user-initiated delete."""

    deleted_count: int = 0
    freed_bytes: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
