"""Queues kept as queue-entry rows in the job store itself."""

from collections.abc import Iterable

from lookout.queues.base import EnqueuedAndFetchedCount, QueueMonitoringApi, QueueProvider
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


class StorageQueueMonitoringApi(QueueMonitoringApi):
    def __init__(self, storage: MonitoringStorage, queues: frozenset[str] | None = None) -> None:
        self.storage = storage
        self._queues = queues

    def queues(self) -> list[str]:
        names = self.storage.queue_names()
        if self._queues is None:
            return names
        return [name for name in names if name in self._queues]

    def enqueued_job_ids(self, queue: str, offset: int, limit: int) -> list[int]:
        log.debug(f"Getting enqueued job IDs for queue {queue} from {offset} (limit {limit})")
        return self.storage.queue_job_ids(queue, fetched=False, offset=offset, limit=limit)

    def fetched_job_ids(self, queue: str, offset: int, limit: int) -> list[int]:
        log.debug(f"Getting fetched job IDs for queue {queue} from {offset} (limit {limit})")
        return self.storage.queue_job_ids(queue, fetched=True, offset=offset, limit=limit)

    def enqueued_and_fetched_count(self, queue: str) -> EnqueuedAndFetchedCount:
        return EnqueuedAndFetchedCount(
            enqueued_count=self.storage.count_queue_entries(queue, fetched=False),
            fetched_count=self.storage.count_queue_entries(queue, fetched=True),
        )


class StorageQueueProvider(QueueProvider):
    """Reads queues from the store's queue entries.

    @param queues: Restrict the provider to these queue names; by default it
        lists every queue found in the store.
    """

    def __init__(self, queues: Iterable[str] | None = None) -> None:
        self.queues = frozenset(queues) if queues is not None else None

    def get_monitoring_api(self, storage: MonitoringStorage) -> StorageQueueMonitoringApi:
        return StorageQueueMonitoringApi(storage, self.queues)
