"""Application configuration manager wrapping QSettings."""

import logging

from PySide6.QtCore import QObject, Signal, Slot, QSettings

from opencode_session.utils.storage_paths import StoragePaths

logger = logging.getLogger(__name__)

# Default values
DEFAULTS = {
    "storage/dataDir": "~/.local/share/opencode",
    "storage/stateDir": "~/.local/state/opencode",
    "advanced/debugLogging": False,
}


class ConfigManager(QObject):
    """Centralized settings, including where the OpenCode store lives."""

    settings_changed = Signal(str)  # key

    def __init__(self, parent=None, settings: QSettings | None = None):
        super().__init__(parent)
        self._settings = settings if settings is not None else QSettings()

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._settings.value(key, DEFAULTS.get(key, "")))

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        val = self._settings.value(key, DEFAULTS.get(key, False))
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._settings.setValue(key, value)
        self.settings_changed.emit(key)

    @Slot(str)
    def reset(self, key: str):
        """Drop a stored value so the default applies again."""
        self._settings.remove(key)
        self.settings_changed.emit(key)

    def storage_paths(self) -> StoragePaths:
        """Build the storage locations from the current settings."""
        paths = StoragePaths.from_dirs(
            self.get_string("storage/dataDir"),
            self.get_string("storage/stateDir"),
        )
        logger.debug("Storage paths: data=%s state=%s", paths.data_dir, paths.state_dir)
        return paths

    def debug_logging(self) -> bool:
        return self.get_bool("advanced/debugLogging")
