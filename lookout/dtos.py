"""Result records handed to whatever renders the monitoring views."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

from lookout.invocation import JobReference


T = TypeVar("T")


class JobList(dict[str, T], Generic[T]):
    """Job ID (as text) to result record, in query order."""

    pass


@dataclass
class JobDetailed:
    """A job joined with the state row it currently points at."""

    id: int
    invocation_data: str
    arguments: str
    created_at: datetime
    expire_at: datetime | None
    fetched_at: datetime | None
    state_id: int | None
    state_name: str | None
    # None when the state row could not be found
    state_reason: str | None
    state_data: str | None


# ++++++++++++++++++++++ Per-state job records ++++++++++++++++++++++
# `job` is None when the job's invocation could not be loaded.


@dataclass
class EnqueuedJob:
    job: JobReference | None
    state: str | None
    # Only set while the job is still in the Enqueued state
    enqueued_at: datetime | None


@dataclass
class FetchedJob:
    job: JobReference | None
    state: str | None
    fetched_at: datetime | None


@dataclass
class ProcessingJob:
    job: JobReference | None
    server_id: str
    started_at: datetime


@dataclass
class ScheduledJob:
    job: JobReference | None
    enqueue_at: datetime
    scheduled_at: datetime


@dataclass
class SucceededJob:
    job: JobReference | None
    result: str | None
    # Performance duration plus latency; None unless both were recorded
    total_duration: int | None
    succeeded_at: datetime | None


@dataclass
class FailedJob:
    job: JobReference | None
    reason: str | None
    exception_details: str
    exception_message: str
    exception_type: str
    failed_at: datetime | None


@dataclass
class DeletedJob:
    job: JobReference | None
    deleted_at: datetime | None


# ++++++++++++++++++++++ Details, servers, queues ++++++++++++++++++++++


@dataclass
class StateHistory:
    state_name: str
    created_at: datetime
    reason: str | None
    data: dict[str, str]


@dataclass
class JobDetails:
    created_at: datetime
    expire_at: datetime | None
    job: JobReference | None
    # Most recent state first
    history: list[StateHistory] = field(default_factory=list)
    properties: dict[str, str | None] = field(default_factory=dict)


@dataclass
class ServerSummary:
    name: str
    heartbeat: datetime | None
    queues: list[str]
    started_at: datetime
    workers_count: int


@dataclass
class QueueWithTopEnqueuedJobs:
    name: str
    length: int
    fetched: int | None
    first_jobs: JobList[EnqueuedJob]


@dataclass
class Statistics:
    enqueued: int = 0
    failed: int = 0
    processing: int = 0
    scheduled: int = 0
    servers: int = 0
    succeeded: int = 0
    deleted: int = 0
    recurring: int = 0
    queues: int = 0
