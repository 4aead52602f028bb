"""Central orchestrator: loads snapshots and runs deletions for the UI."""

import logging

from PySide6.QtCore import QObject, Signal, Slot, Property, QThread

from opencode_session.services.deleter import CascadeDeleter
from opencode_session.services.frecency import FrecencyIndex
from opencode_session.services.loader import StorageLoader
from opencode_session.types import (
    DeleteSummary,
    LoadedData,
    LogFile,
    Message,
    Part,
    ProjectInfo,
    ProjectStorageInfo,
    SessionInfo,
    Todo,
)
from opencode_session.utils.formatting import format_delete_summary, format_project_delete_summary
from opencode_session.utils.storage_paths import StoragePaths

logger = logging.getLogger(__name__)


class _LoadWorker(QThread):
    """Background thread for a full storage scan."""

    finished = Signal(int, object)  # generation, LoadedData

    def __init__(self, generation: int, loader: StorageLoader, parent=None):
        super().__init__(parent)
        self._generation = generation
        self._loader = loader

    def run(self):
        try:
            data = self._loader.load_all_data()
        except Exception:
            logger.exception("Worker failed to load storage")
            data = LoadedData()
        self.finished.emit(self._generation, data)


class DataManager(QObject):
    """Owns the current snapshot and the delete operations on it.

    The snapshot is never patched in place: every delete is followed by a
    full reload from disk.
    """

    data_loaded = Signal()
    loading_changed = Signal()
    status_changed = Signal(str)

    def __init__(self, parent=None, paths: StoragePaths | None = None):
        super().__init__(parent)
        self._paths = paths or StoragePaths.default()
        frecency = FrecencyIndex(self._paths.frecency_file)
        self._loader = StorageLoader(self._paths, frecency)
        self._deleter = CascadeDeleter(self._paths, frecency)
        self._data = LoadedData()
        self._loading = False
        self._status_message = ""
        self._generation = 0
        self._worker: _LoadWorker | None = None

    def _get_loading(self) -> bool:
        return self._loading

    def _set_loading(self, value: bool):
        if self._loading != value:
            self._loading = value
            self.loading_changed.emit()

    loading = Property(bool, _get_loading, notify=loading_changed)

    def _get_status_message(self) -> str:
        return self._status_message

    def _set_status(self, message: str):
        self._status_message = message
        self.status_changed.emit(message)

    statusMessage = Property(str, _get_status_message, notify=status_changed)

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    @property
    def loader(self) -> StorageLoader:
        return self._loader

    @property
    def deleter(self) -> CascadeDeleter:
        return self._deleter

    def get_data(self) -> LoadedData:
        return self._data

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @Slot()
    def reload(self):
        """Rescan storage synchronously and publish the new snapshot."""
        self._cancel_worker()
        self._generation += 1
        self._set_loading(True)
        try:
            self._data = self._loader.load_all_data()
        except Exception:
            logger.exception("Failed to load storage from %s", self._paths.data_dir)
            self._data = LoadedData()
        finally:
            self._set_loading(False)
        self.data_loaded.emit()

    @Slot()
    def reload_async(self):
        """Rescan storage on a background thread."""
        self._cancel_worker()
        self._generation += 1
        self._set_loading(True)

        worker = _LoadWorker(self._generation, self._loader, self)
        worker.finished.connect(self._on_loaded)
        worker.finished.connect(worker.deleteLater)
        self._worker = worker
        worker.start()

    def _on_loaded(self, generation: int, data: LoadedData):
        # Stale result from a superseded reload
        if generation != self._generation:
            return
        self._worker = None
        self._data = data
        self._set_loading(False)
        self.data_loaded.emit()

    def _cancel_worker(self):
        if self._worker is not None and self._worker.isRunning():
            self._worker.finished.disconnect(self._on_loaded)
            self._worker.wait(5000)
        self._worker = None

    # ------------------------------------------------------------------
    # Detail loaders
    # ------------------------------------------------------------------

    def load_messages(self, session_id: str) -> list[Message]:
        return self._loader.load_messages(session_id)

    def load_parts(self, message_id: str) -> list[Part]:
        return self._loader.load_parts(message_id)

    def load_todos(self, session_id: str) -> list[Todo]:
        return self._loader.load_todos(session_id)

    def get_project_storage_info(self, project_id: str) -> ProjectStorageInfo:
        return self._loader.get_project_storage_info(project_id)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_selection(
        self,
        projects: list[ProjectInfo],
        sessions: list[SessionInfo],
    ) -> DeleteSummary:
        """Delete whole projects first, then loose sessions.

        Sessions belonging to a project in the same selection are left to
        the project delete. Projects left without sessions are cleaned up.
        """
        summary = DeleteSummary()
        deleted_project_ids = {p.id for p in projects}
        project_results = []

        for project in projects:
            result = self._deleter.delete_project(project)
            if result.success:
                summary.deleted_count += 1
                summary.freed_bytes += result.bytes_freed
                project_results.append(result)
            elif result.error:
                summary.errors.append(f"{project.worktree}: {result.error}")

        sessions_deleted = 0
        to_delete = [s for s in sessions if s.project_id not in deleted_project_ids]
        if to_delete:
            for result in self._deleter.delete_sessions(to_delete):
                if result.success:
                    summary.deleted_count += 1
                    summary.freed_bytes += result.bytes_freed
                    sessions_deleted += 1
                elif result.error:
                    summary.errors.append(f"{result.session_id}: {result.error}")

            # Sessions of unrecorded projects carry "/" as their worktree;
            # the owning project's worktree is what its frecency entries use.
            owners = {p.id: p for p in self._data.projects}
            checked: set[str] = set()
            for session in to_delete:
                if session.project_id in checked:
                    continue
                checked.add(session.project_id)
                owner = owners.get(session.project_id)
                worktree = owner.worktree if owner is not None else session.directory
                self._deleter.cleanup_empty_project(session.project_id, worktree)

        if len(project_results) == 1 and not to_delete:
            result = project_results[0]
            message = format_project_delete_summary(
                result.project_id,
                result.sessions_deleted,
                result.bytes_freed,
                result.frecency_entries_removed,
            )
        elif not projects:
            message = format_delete_summary(sessions_deleted, summary.freed_bytes)
        else:
            message = format_delete_summary(summary.deleted_count, summary.freed_bytes, noun="item")

        self._finish_delete(summary, message)
        return summary

    def delete_logs(self, logs: list[LogFile]) -> DeleteSummary:
        summary = DeleteSummary()
        for result in self._deleter.delete_logs(logs):
            if result.success:
                summary.deleted_count += 1
                summary.freed_bytes += result.bytes_freed
            elif result.error:
                summary.errors.append(f"{result.filename}: {result.error}")

        message = format_delete_summary(summary.deleted_count, summary.freed_bytes, noun="log file")
        self._finish_delete(summary, message)
        return summary

    def _finish_delete(self, summary: DeleteSummary, message: str):
        if summary.errors:
            message += f" ({len(summary.errors)} errors)"
            for error in summary.errors:
                logger.warning("Delete failed: %s", error)
        self.reload()
        self._set_status(message)

    def cleanup(self):
        """Clean up resources."""
        self._cancel_worker()
