"""Rows of the job store, as written by the job pipeline.

Lookout only ever reads these; they are plain dataclasses so that both the
memory and the SQLite storage can hand out the same shapes.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class JobRecord:
    """A job, with a denormalised copy of its current state name."""

    # Monotonically increasing, so it doubles as a recency order
    id: int
    # JSON object describing the job type and method to invoke
    invocation_data: str
    # JSON list of the invocation arguments
    arguments: str
    created_at: datetime
    expire_at: datetime | None = None
    # Points at the most recent StateRecord for this job
    state_id: int | None = None
    state_name: str | None = None


@dataclass
class StateRecord:
    """One entry of a job's append-only state history."""

    id: int
    job_id: int
    name: str
    created_at: datetime
    reason: str | None = None
    # JSON object mapping string keys to string values
    data: str | None = None


@dataclass
class JobParameterRecord:
    job_id: int
    name: str
    value: str | None


@dataclass
class QueueEntryRecord:
    """A job waiting in, or claimed from, a queue."""

    id: int
    job_id: int
    queue: str
    # Unset while enqueued, set once a worker fetches the job
    fetched_at: datetime | None = None


@dataclass
class CounterRecord:
    """One increment of a counter; a key's count is its number of rows."""

    id: int
    key: str
    value: int = 1


@dataclass
class ServerRecord:
    id: str
    last_heartbeat: datetime | None
    # JSON object with queues, started_at and worker_count
    data: str


@dataclass
class SetRecord:
    key: str
    value: str
