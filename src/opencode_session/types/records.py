"""Record types read from the OpenCode storage tree."""

from dataclasses import dataclass, field
from datetime import datetime


def _int(value, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    return default


def _str_or_none(value) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class RecordTime:
    created: int = 0
    updated: int = 0

    @classmethod
    def from_dict(cls, raw) -> "RecordTime":
        if not isinstance(raw, dict):
            return cls()
        return cls(created=_int(raw.get("created")), updated=_int(raw.get("updated")))


@dataclass(frozen=True)
class SessionSummary:
    additions: int = 0
    deletions: int = 0
    files: int = 0


@dataclass(frozen=True)
class Project:
    id: str
    worktree: str
    time: RecordTime = field(default_factory=RecordTime)
    vcs: str | None = None
    sandboxes: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw) -> "Project | None":
        """Build a Project from a decoded record, or None if it has no id."""
        if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
            return None
        sandboxes = raw.get("sandboxes")
        return cls(
            id=raw["id"],
            worktree=raw.get("worktree") if isinstance(raw.get("worktree"), str) else "",
            time=RecordTime.from_dict(raw.get("time")),
            vcs=_str_or_none(raw.get("vcs")),
            sandboxes=tuple(s for s in sandboxes if isinstance(s, str))
            if isinstance(sandboxes, list) else (),
        )


@dataclass(frozen=True)
class Session:
    id: str
    slug: str
    version: str
    project_id: str
    directory: str
    time: RecordTime = field(default_factory=RecordTime)
    parent_id: str | None = None
    title: str | None = None
    summary: SessionSummary | None = None

    @classmethod
    def from_dict(cls, raw) -> "Session | None":
        """Build a Session from a decoded record.

        Returns None when the id or projectID is missing, which callers
        treat the same as a malformed file.
        """
        if not isinstance(raw, dict):
            return None
        if not isinstance(raw.get("id"), str) or not isinstance(raw.get("projectID"), str):
            return None

        summary = None
        raw_summary = raw.get("summary")
        if isinstance(raw_summary, dict):
            summary = SessionSummary(
                additions=_int(raw_summary.get("additions")),
                deletions=_int(raw_summary.get("deletions")),
                files=_int(raw_summary.get("files")),
            )

        return cls(
            id=raw["id"],
            slug=raw.get("slug") if isinstance(raw.get("slug"), str) else "",
            version=raw.get("version") if isinstance(raw.get("version"), str) else "",
            project_id=raw["projectID"],
            directory=raw.get("directory") if isinstance(raw.get("directory"), str) else "",
            time=RecordTime.from_dict(raw.get("time")),
            parent_id=_str_or_none(raw.get("parentID")),
            title=_str_or_none(raw.get("title")),
            summary=summary,
        )

    @property
    def display_title(self) -> str:
        return self.title or self.slug or self.id[:12]


@dataclass(frozen=True)
class MessageTime:
    created: int = 0
    completed: int | None = None


@dataclass(frozen=True)
class TokenUsage:
    input: int = 0
    output: int = 0
    reasoning: int = 0
    cache_read: int = 0
    cache_write: int = 0


@dataclass(frozen=True)
class Message:
    id: str
    session_id: str
    role: str
    time: MessageTime = field(default_factory=MessageTime)
    parent_id: str | None = None
    model_id: str | None = None
    provider_id: str | None = None
    mode: str | None = None
    agent: str | None = None
    cost: float | None = None
    tokens: TokenUsage | None = None
    finish: str | None = None

    @classmethod
    def from_dict(cls, raw) -> "Message | None":
        if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
            return None

        raw_time = raw.get("time") if isinstance(raw.get("time"), dict) else {}
        completed = raw_time.get("completed")

        tokens = None
        raw_tokens = raw.get("tokens")
        if isinstance(raw_tokens, dict):
            cache = raw_tokens.get("cache") if isinstance(raw_tokens.get("cache"), dict) else {}
            tokens = TokenUsage(
                input=_int(raw_tokens.get("input")),
                output=_int(raw_tokens.get("output")),
                reasoning=_int(raw_tokens.get("reasoning")),
                cache_read=_int(cache.get("read")),
                cache_write=_int(cache.get("write")),
            )

        cost = raw.get("cost")
        return cls(
            id=raw["id"],
            session_id=raw.get("sessionID") if isinstance(raw.get("sessionID"), str) else "",
            role=raw.get("role") if isinstance(raw.get("role"), str) else "",
            time=MessageTime(
                created=_int(raw_time.get("created")),
                completed=_int(completed) if completed is not None else None,
            ),
            parent_id=_str_or_none(raw.get("parentID")),
            model_id=_str_or_none(raw.get("modelID")),
            provider_id=_str_or_none(raw.get("providerID")),
            mode=_str_or_none(raw.get("mode")),
            agent=_str_or_none(raw.get("agent")),
            cost=float(cost) if isinstance(cost, (int, float)) and not isinstance(cost, bool) else None,
            tokens=tokens,
            finish=_str_or_none(raw.get("finish")),
        )


@dataclass(frozen=True)
class Part:
    id: str
    session_id: str
    message_id: str
    type: str
    text: str | None = None
    call_id: str | None = None
    tool: str | None = None
    state: dict | None = None
    time_start: int | None = None

    @classmethod
    def from_dict(cls, raw) -> "Part | None":
        if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
            return None
        raw_time = raw.get("time")
        start = raw_time.get("start") if isinstance(raw_time, dict) else None
        return cls(
            id=raw["id"],
            session_id=raw.get("sessionID") if isinstance(raw.get("sessionID"), str) else "",
            message_id=raw.get("messageID") if isinstance(raw.get("messageID"), str) else "",
            type=raw.get("type") if isinstance(raw.get("type"), str) else "",
            text=_str_or_none(raw.get("text")),
            call_id=_str_or_none(raw.get("callID")),
            tool=_str_or_none(raw.get("tool")),
            state=raw.get("state") if isinstance(raw.get("state"), dict) else None,
            time_start=_int(start) if start is not None else None,
        )


@dataclass(frozen=True)
class Todo:
    id: str
    content: str
    status: str
    priority: str

    @classmethod
    def from_dict(cls, raw) -> "Todo | None":
        if not isinstance(raw, dict):
            return None
        return cls(
            id=str(raw.get("id", "")),
            content=str(raw.get("content", "")),
            status=str(raw.get("status", "")),
            priority=str(raw.get("priority", "")),
        )


@dataclass(frozen=True)
class FrecencyEntry:
    path: str
    frequency: int = 0
    last_open: int = 0

    @classmethod
    def from_dict(cls, raw) -> "FrecencyEntry | None":
        if not isinstance(raw, dict) or not isinstance(raw.get("path"), str):
            return None
        return cls(
            path=raw["path"],
            frequency=_int(raw.get("frequency")),
            last_open=_int(raw.get("lastOpen")),
        )


@dataclass(frozen=True)
class LogFile:
    path: str
    filename: str
    date: datetime
    size_bytes: int
