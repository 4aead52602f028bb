"""Type definitions for opencode-session."""

from opencode_session.types.records import (
    RecordTime,
    SessionSummary,
    Project,
    Session,
    MessageTime,
    TokenUsage,
    Message,
    Part,
    Todo,
    FrecencyEntry,
    LogFile,
)
from opencode_session.types.snapshot import (
    SessionInfo,
    ProjectInfo,
    ProjectStorageInfo,
    LoadedData,
)
from opencode_session.types.results import (
    DeleteSessionResult,
    DeleteProjectResult,
    DeleteLogResult,
    DeleteSummary,
)

__all__ = [
    "RecordTime",
    "SessionSummary",
    "Project",
    "Session",
    "MessageTime",
    "TokenUsage",
    "Message",
    "Part",
    "Todo",
    "FrecencyEntry",
    "LogFile",
    "SessionInfo",
    "ProjectInfo",
    "ProjectStorageInfo",
    "LoadedData",
    "DeleteSessionResult",
    "DeleteProjectResult",
    "DeleteLogResult",
    "DeleteSummary",
]
