"""Human-readable sizes, times and paths for status lines."""

import math
import os
import time
from datetime import datetime

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(num_bytes: int) -> str:
    """Format a byte count using 1024-based units.

    1 decimal place below 10 units (except bytes), rounded otherwise.
    """
    if num_bytes <= 0:
        return "0 B"
    i = 0
    value = float(num_bytes)
    while value >= 1024 and i < len(SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    if value < 10 and i > 0:
        return f"{value:.1f} {SIZE_UNITS[i]}"
    return f"{round(value)} {SIZE_UNITS[i]}"


def format_relative_time(timestamp_ms: int, now_ms: int | None = None) -> str:
    """Describe an epoch-millisecond timestamp relative to now ("3d ago")."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    seconds = max(0, now_ms - timestamp_ms) // 1000
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days >= 365:
        return f"{days // 365}y ago"
    if days >= 30:
        return f"{days // 30}mo ago"
    if days >= 7:
        return f"{days // 7}w ago"
    if days > 0:
        return f"{days}d ago"
    if hours > 0:
        return f"{hours}h ago"
    if minutes > 0:
        return f"{minutes}m ago"
    return "just now"


def format_date(date: datetime) -> str:
    return date.strftime("%Y-%m-%d %H:%M")


def truncate_path(path: str, max_length: int, home: str | None = None) -> str:
    """Shorten a path for display: home becomes ~, then the middle is elided."""
    if len(path) <= max_length:
        return path

    if home is None:
        home = os.path.expanduser("~")
    display = path
    if home and path.startswith(home):
        display = "~" + path[len(home):]

    if len(display) <= max_length:
        return display

    ellipsis = "..."
    available = max_length - len(ellipsis)
    start = math.ceil(available / 2)
    end = available // 2
    return display[:start] + ellipsis + (display[-end:] if end > 0 else "")


def format_delete_summary(count: int, bytes_freed: int, noun: str = "session") -> str:
    word = noun if count == 1 else noun + "s"
    return f"Deleted {count} {word}, freed {format_bytes(bytes_freed)}"


def format_project_delete_summary(
    project_id: str,
    sessions_deleted: int,
    bytes_freed: int,
    frecency_removed: int,
) -> str:
    parts = [
        f"Deleted project {project_id[:8]}...",
        f"{sessions_deleted} session" + ("" if sessions_deleted == 1 else "s"),
        f"freed {format_bytes(bytes_freed)}",
    ]
    if frecency_removed > 0:
        parts.append(f"{frecency_removed} frecency entries")
    return ", ".join(parts)
