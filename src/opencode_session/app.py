"""Application entry point: load storage and print a summary."""

import logging
import sys

from PySide6.QtCore import QCoreApplication

from opencode_session.services.config_manager import ConfigManager
from opencode_session.services.data_manager import DataManager
from opencode_session.types import LoadedData
from opencode_session.utils.formatting import (
    format_bytes,
    format_date,
    format_relative_time,
    truncate_path,
)

logger = logging.getLogger(__name__)


def format_summary(data: LoadedData, now_ms: int | None = None) -> list[str]:
    """Summary lines for a snapshot."""
    lines = [
        f"Projects: {len(data.projects)} ({len(data.orphan_projects)} orphaned)",
        f"Sessions: {len(data.sessions)} ({len(data.orphan_sessions)} orphaned)",
        f"Session storage: {format_bytes(data.total_size_bytes)}",
        f"Logs: {len(data.logs)} ({format_bytes(data.total_log_bytes)})",
    ]
    for project in data.projects:
        marker = " [ORPHAN]" if project.is_orphan else ""
        lines.append(
            f"  {truncate_path(project.worktree, 50)}{marker}: "
            f"{project.session_count} sessions, {format_bytes(project.total_size_bytes)}"
        )

    if data.orphan_sessions:
        lines.append("Orphaned sessions:")
        for session in data.orphan_sessions:
            lines.append(
                f"  {session.display_title} ({format_relative_time(session.time.updated, now_ms)}): "
                f"{format_bytes(session.size_bytes)}"
            )

    if data.logs:
        lines.append("Log files:")
        for log in data.logs:
            lines.append(f"  {format_date(log.date)} {log.filename}: {format_bytes(log.size_bytes)}")
    return lines


def run() -> int:
    """Launch the application."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("opencode-session")
    app.setOrganizationName("opencode-session")

    config = ConfigManager()
    logging.basicConfig(
        level=logging.DEBUG if config.debug_logging() else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    manager = DataManager(paths=config.storage_paths())
    manager.reload()
    for line in format_summary(manager.get_data()):
        print(line)
    manager.cleanup()
    return 0
