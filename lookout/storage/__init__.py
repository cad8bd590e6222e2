from lookout.storage.base import MonitoringStorage
from lookout.storage.memory import MemoryStorage
from lookout.storage.sqlite import SQLiteStorage

__all__ = ["MemoryStorage", "MonitoringStorage", "SQLiteStorage"]
