"""Queue backends, as seen by the monitoring views."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lookout.storage.base import MonitoringStorage


@dataclass
class EnqueuedAndFetchedCount:
    """Queue sizes; a backend that cannot tell leaves a count as None."""

    enqueued_count: int | None = None
    fetched_count: int | None = None


class QueueMonitoringApi(ABC):
    """Monitoring reads for the queues one backend holds."""

    @abstractmethod
    def queues(self) -> list[str]:
        """Names of the queues this backend holds."""

        raise NotImplementedError

    @abstractmethod
    def enqueued_job_ids(self, queue: str, offset: int, limit: int) -> list[int]:
        """IDs of jobs waiting in a queue, in queue order.

        @param queue: The queue name
        @param offset: How many waiting jobs to skip
        @param limit: The maximum number of IDs to return
        """

        raise NotImplementedError

    @abstractmethod
    def fetched_job_ids(self, queue: str, offset: int, limit: int) -> list[int]:
        """IDs of jobs claimed from a queue by a worker, in queue order."""

        raise NotImplementedError

    @abstractmethod
    def enqueued_and_fetched_count(self, queue: str) -> EnqueuedAndFetchedCount:
        raise NotImplementedError


class QueueProvider(ABC):
    """A queue backend that can be registered with a QueueProviderCollection."""

    @abstractmethod
    def get_monitoring_api(self, storage: MonitoringStorage) -> QueueMonitoringApi:
        """Bind the backend's monitoring reads to a storage handle."""

        raise NotImplementedError
