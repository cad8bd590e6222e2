"""Read-only monitoring views over a background job store.

Processes embedding Lookout call `configure_logging()` once at start-up to
apply the `LOOKOUT_LOG_LEVEL` environment variable.
"""

from lookout.exception import CorruptStateDataError, LookoutError, ProviderNotFoundError
from lookout.monitoring import MonitoringApi
from lookout.queues import QueueProvider, QueueProviderCollection, StorageQueueProvider
from lookout.scope import LocalScope
from lookout.storage import MemoryStorage, MonitoringStorage, SQLiteStorage
from lookout.utils.logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "CorruptStateDataError",
    "LocalScope",
    "LookoutError",
    "MemoryStorage",
    "MonitoringApi",
    "MonitoringStorage",
    "ProviderNotFoundError",
    "QueueProvider",
    "QueueProviderCollection",
    "SQLiteStorage",
    "StorageQueueProvider",
    "configure_logging",
]
