"""In-process job store, for embedding and for tests."""

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime
from threading import Lock

from lookout.records import (
    CounterRecord,
    JobParameterRecord,
    JobRecord,
    QueueEntryRecord,
    ServerRecord,
    SetRecord,
    StateRecord,
)
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


class MemoryStorage(MonitoringStorage):
    """Thread-safe store holding each collection as a list of records.

    The job pipeline (or a test) appends to the lists while holding `lock`;
    every read here takes the same lock.
    """

    def __init__(self) -> None:
        self.jobs: list[JobRecord] = []
        self.states: list[StateRecord] = []
        self.parameters: list[JobParameterRecord] = []
        self.queue_entries: list[QueueEntryRecord] = []
        self.counters: list[CounterRecord] = []
        self.server_records: list[ServerRecord] = []
        self.sets: list[SetRecord] = []
        self.lock = Lock()

    def server_time(self) -> datetime:
        return datetime.now(tz=UTC)

    def get_job(self, job_id: int) -> JobRecord | None:
        with self.lock:
            for job in self.jobs:
                if job.id == job_id:
                    return job
        return None

    def get_jobs(self, job_ids: Iterable[int]) -> list[JobRecord]:
        wanted = set(job_ids)
        with self.lock:
            matches = [job for job in self.jobs if job.id in wanted]
        return sorted(matches, key=lambda job: job.id)

    def jobs_in_state(self, state_name: str, offset: int, limit: int) -> list[JobRecord]:
        log.debug(f"Listing jobs in state {state_name} from {offset} (limit {limit})")

        with self.lock:
            matches = [job for job in self.jobs if job.state_name == state_name]

        matches.sort(key=lambda job: job.id, reverse=True)
        return matches[offset : offset + limit]

    def count_jobs_in_state(self, state_name: str) -> int:
        with self.lock:
            return sum(1 for job in self.jobs if job.state_name == state_name)

    def count_jobs_by_state(self) -> dict[str, int]:
        with self.lock:
            return dict(Counter(job.state_name for job in self.jobs if job.state_name is not None))

    def get_state(self, state_id: int) -> StateRecord | None:
        with self.lock:
            for state in self.states:
                if state.id == state_id:
                    return state
        return None

    def state_history(self, job_id: int) -> list[StateRecord]:
        with self.lock:
            history = [state for state in self.states if state.job_id == job_id]
        return sorted(history, key=lambda state: state.id, reverse=True)

    def job_parameters(self, job_id: int) -> dict[str, str | None]:
        with self.lock:
            return {param.name: param.value for param in self.parameters if param.job_id == job_id}

    def queue_entry(self, job_id: int, queue: str, fetched: bool) -> QueueEntryRecord | None:
        entries = [entry for entry in self._entries(queue, fetched) if entry.job_id == job_id]
        return entries[-1] if entries else None

    def queue_names(self) -> list[str]:
        with self.lock:
            return sorted({entry.queue for entry in self.queue_entries})

    def _entries(self, queue: str, fetched: bool) -> list[QueueEntryRecord]:
        with self.lock:
            entries = [
                entry
                for entry in self.queue_entries
                if entry.queue == queue and (entry.fetched_at is not None) == fetched
            ]
        return sorted(entries, key=lambda entry: entry.id)

    def queue_job_ids(self, queue: str, fetched: bool, offset: int, limit: int) -> list[int]:
        entries = self._entries(queue, fetched)
        return [entry.job_id for entry in entries[offset : offset + limit]]

    def count_queue_entries(self, queue: str, fetched: bool) -> int:
        return len(self._entries(queue, fetched))

    def count_counters(self, keys: Iterable[str]) -> dict[str, int]:
        wanted = set(keys)
        with self.lock:
            return dict(Counter(counter.key for counter in self.counters if counter.key in wanted))

    def servers(self) -> list[ServerRecord]:
        with self.lock:
            return list(self.server_records)

    def count_servers(self) -> int:
        with self.lock:
            return len(self.server_records)

    def count_set(self, key: str) -> int:
        with self.lock:
            return sum(1 for member in self.sets if member.key == key)
