"""Cascading deletion of sessions, projects and log files."""

import logging
import os
import shutil
from pathlib import Path

from opencode_session.services.frecency import FrecencyIndex
from opencode_session.services.loader import StorageLoader
from opencode_session.services.record_reader import list_record_files
from opencode_session.types import (
    DeleteLogResult,
    DeleteProjectResult,
    DeleteSessionResult,
    LogFile,
    ProjectInfo,
    SessionInfo,
)
from opencode_session.utils.storage_paths import StoragePaths

logger = logging.getLogger(__name__)


def safe_remove(path: str | Path, recursive: bool = False) -> bool:
    """Remove a file (or a directory tree when recursive).

    Returns True if something was removed and False if nothing was there.
    Any other OSError propagates to the caller.
    """
    path = Path(path)
    try:
        if recursive and path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            os.unlink(path)
    except FileNotFoundError:
        return False
    return True


def _describe(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class CascadeDeleter:
    """Deletes records and everything they own, deepest first.

    Session and project deletion never raise: failures are reported on the
    returned result and only stop the remaining steps for that one item.
    """

    def __init__(self, paths: StoragePaths, frecency: FrecencyIndex | None = None):
        self._paths = paths
        self._frecency = frecency or FrecencyIndex(paths.frecency_file)
        self._loader = StorageLoader(paths, self._frecency)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def delete_session(self, session: SessionInfo) -> DeleteSessionResult:
        files_deleted = 0
        # Captured up front; recomputing after a partial delete would undercount.
        bytes_freed = session.size_bytes

        try:
            message_dir = self._paths.message_dir(session.id)
            for message_id in self._loader.message_ids(session.id):
                if safe_remove(self._paths.part_dir(message_id), recursive=True):
                    files_deleted += 1

            if safe_remove(message_dir, recursive=True):
                files_deleted += 1
            if safe_remove(self._paths.diff_file(session.id)):
                files_deleted += 1
            if safe_remove(self._paths.todo_file(session.id)):
                files_deleted += 1
            if safe_remove(self._paths.session_file(session.project_id, session.id)):
                files_deleted += 1
        except OSError as e:
            logger.exception("Failed to delete session %s", session.id)
            return DeleteSessionResult(
                success=False,
                session_id=session.id,
                files_deleted=files_deleted,
                bytes_freed=0,
                error=_describe(e),
            )

        logger.info("Deleted session %s (%d items)", session.id, files_deleted)
        return DeleteSessionResult(
            success=True,
            session_id=session.id,
            files_deleted=files_deleted,
            bytes_freed=bytes_freed,
        )

    def delete_sessions(self, sessions: list[SessionInfo]) -> list[DeleteSessionResult]:
        return [self.delete_session(session) for session in sessions]

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def delete_project(self, project: ProjectInfo) -> DeleteProjectResult:
        """Delete a project, all of its sessions and its frecency entries."""
        result = DeleteProjectResult(success=False, project_id=project.id)

        try:
            for session in project.sessions:
                session_result = self.delete_session(session)
                if session_result.success:
                    result.sessions_deleted += 1
                    result.files_deleted += session_result.files_deleted
                    result.bytes_freed += session_result.bytes_freed

            if safe_remove(self._paths.project_file(project.id)):
                result.files_deleted += 1
            safe_remove(self._paths.project_session_dir(project.id), recursive=True)
            if safe_remove(self._paths.snapshot_dir(project.id), recursive=True):
                result.files_deleted += 1

            result.frecency_entries_removed = self.clean_frecency_for_directory(project.worktree)
        except OSError as e:
            logger.exception("Failed to delete project %s", project.id)
            result.error = _describe(e)
            return result

        result.success = True
        logger.info(
            "Deleted project %s: %d sessions, %d bytes",
            project.id, result.sessions_deleted, result.bytes_freed,
        )
        return result

    def get_project_session_count(self, project_id: str) -> int:
        """Number of session record files still on disk for a project."""
        return len(list_record_files(self._paths.project_session_dir(project_id)))

    def cleanup_empty_project(self, project_id: str, worktree: str) -> bool:
        """Remove a project's metadata once no session files remain.

        Re-counts sessions on disk rather than trusting the caller's view.
        """
        remaining = self.get_project_session_count(project_id)
        if remaining > 0:
            logger.debug("Project %s still has %d sessions", project_id, remaining)
            return False

        try:
            safe_remove(self._paths.project_file(project_id))
            safe_remove(self._paths.project_session_dir(project_id), recursive=True)
            safe_remove(self._paths.snapshot_dir(project_id), recursive=True)
        except OSError:
            logger.exception("Failed to clean up empty project %s", project_id)
            return False

        self.clean_frecency_for_directory(worktree)
        logger.info("Cleaned up empty project %s", project_id)
        return True

    def clean_frecency_for_directory(self, directory: str) -> int:
        try:
            return self._frecency.remove_by_path_prefix(directory)
        except OSError:
            logger.warning("Could not rewrite frecency log %s", self._frecency.path, exc_info=True)
            return 0

    # ------------------------------------------------------------------
    # Logs
    # ------------------------------------------------------------------

    def delete_log(self, log: LogFile) -> DeleteLogResult:
        try:
            safe_remove(log.path)
        except OSError as e:
            logger.exception("Failed to delete log %s", log.filename)
            return DeleteLogResult(
                success=False,
                filename=log.filename,
                bytes_freed=0,
                error=_describe(e),
            )
        return DeleteLogResult(success=True, filename=log.filename, bytes_freed=log.size_bytes)

    def delete_logs(self, logs: list[LogFile]) -> list[DeleteLogResult]:
        return [self.delete_log(log) for log in logs]
