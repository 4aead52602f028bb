"""Services for opencode-session."""

from opencode_session.services.loader import StorageLoader, load_all_data
from opencode_session.services.deleter import CascadeDeleter, safe_remove
from opencode_session.services.frecency import FrecencyIndex
from opencode_session.services.data_manager import DataManager
from opencode_session.services.config_manager import ConfigManager

__all__ = [
    "StorageLoader",
    "load_all_data",
    "CascadeDeleter",
    "safe_remove",
    "FrecencyIndex",
    "DataManager",
    "ConfigManager",
]
