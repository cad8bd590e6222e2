"""Queue backends and their registry.

Several backends may serve one deployment; `QueueProviderCollection` decides
which of them answers for a given queue.
"""

from lookout.queues.base import EnqueuedAndFetchedCount, QueueMonitoringApi, QueueProvider
from lookout.queues.collection import QueueProviderCollection
from lookout.queues.storage import StorageQueueMonitoringApi, StorageQueueProvider

__all__ = [
    "EnqueuedAndFetchedCount",
    "QueueMonitoringApi",
    "QueueProvider",
    "QueueProviderCollection",
    "StorageQueueMonitoringApi",
    "StorageQueueProvider",
]
