"""The read interface Lookout needs from a job store."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from lookout.records import JobRecord, QueueEntryRecord, ServerRecord, StateRecord


class MonitoringStorage(ABC):
    """Read-only access to the collections written by the job pipeline.

    Implementations never need to be consistent across calls; each method is
    expected to be consistent only with itself.
    """

    @abstractmethod
    def server_time(self) -> datetime:
        """The store's current time, in UTC.

        Timelines are bucketed against this clock rather than the caller's.
        """

        raise NotImplementedError

    # ++++++++++++++++++++++ Jobs ++++++++++++++++++++++

    @abstractmethod
    def get_job(self, job_id: int) -> JobRecord | None:
        """Get a job by ID, or None if there is no such job."""

        raise NotImplementedError

    @abstractmethod
    def get_jobs(self, job_ids: Iterable[int]) -> list[JobRecord]:
        """Get every job whose ID is in job_ids, in ascending ID order.

        @param job_ids: The IDs to look up; unknown IDs are ignored
        """

        raise NotImplementedError

    @abstractmethod
    def jobs_in_state(self, state_name: str, offset: int, limit: int) -> list[JobRecord]:
        """Get a page of jobs currently in a state, most recent (highest ID) first.

        @param state_name: The current state name to filter on
        @param offset: How many matching jobs to skip
        @param limit: The maximum number of jobs to return
        """

        raise NotImplementedError

    @abstractmethod
    def count_jobs_in_state(self, state_name: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_jobs_by_state(self) -> dict[str, int]:
        """Count jobs per current state name, skipping jobs with no state."""

        raise NotImplementedError

    # ++++++++++++++++++++++ States ++++++++++++++++++++++

    @abstractmethod
    def get_state(self, state_id: int) -> StateRecord | None:
        raise NotImplementedError

    @abstractmethod
    def state_history(self, job_id: int) -> list[StateRecord]:
        """Get every state a job has been in, most recent first."""

        raise NotImplementedError

    @abstractmethod
    def job_parameters(self, job_id: int) -> dict[str, str | None]:
        raise NotImplementedError

    # ++++++++++++++++++++++ Queues ++++++++++++++++++++++

    @abstractmethod
    def queue_entry(self, job_id: int, queue: str, fetched: bool) -> QueueEntryRecord | None:
        """Get a job's latest entry in a queue that is in the given condition.

        @param job_id: The job's ID
        @param queue: The queue name; entries in other queues are ignored
        @param fetched: True for an entry claimed by a worker, False for a waiting entry
        @return: The matching entry with the highest ID, or None if there is none
        """

        raise NotImplementedError

    @abstractmethod
    def queue_names(self) -> list[str]:
        """Distinct names of the queues holding at least one entry."""

        raise NotImplementedError

    @abstractmethod
    def queue_job_ids(self, queue: str, fetched: bool, offset: int, limit: int) -> list[int]:
        """Get a page of job IDs from a queue, in the order they were queued.

        @param queue: The queue name
        @param fetched: True for entries claimed by a worker, False for waiting entries
        @param offset: How many entries to skip
        @param limit: The maximum number of IDs to return
        """

        raise NotImplementedError

    @abstractmethod
    def count_queue_entries(self, queue: str, fetched: bool) -> int:
        raise NotImplementedError

    # ++++++++++++++++++++++ Counters, servers, sets ++++++++++++++++++++++

    @abstractmethod
    def count_counters(self, keys: Iterable[str]) -> dict[str, int]:
        """Count counter rows per key.

        Keys with no rows are left out of the result; callers zero-fill.
        """

        raise NotImplementedError

    @abstractmethod
    def servers(self) -> list[ServerRecord]:
        raise NotImplementedError

    @abstractmethod
    def count_servers(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def count_set(self, key: str) -> int:
        """Count the members of a named set."""

        raise NotImplementedError
