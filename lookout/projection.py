"""Projection of stored jobs into per-state result records.

A job row is joined with the state row it points at, its invocation is
resolved against the scope, and a projector picks the state-data keys its
record needs. Jobs whose invocation can no longer be loaded are still
projected, with `job=None`.
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import TypeAlias, TypeVar

from lookout.constants import ENQUEUED_STATE
from lookout.dtos import (
    DeletedJob,
    EnqueuedJob,
    FailedJob,
    FetchedJob,
    JobDetailed,
    JobList,
    ProcessingJob,
    ScheduledJob,
    SucceededJob,
)
from lookout.exception import JobLoadError
from lookout.invocation import InvocationData, JobReference
from lookout.records import JobRecord, StateRecord
from lookout.scope import LocalScope
from lookout.state_data import StateData, decode_state_data
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)

T = TypeVar("T")

Projector: TypeAlias = Callable[[JobDetailed, JobReference | None, StateData], T]


def detailed_job(
    storage: MonitoringStorage,
    job: JobRecord,
    state: StateRecord | None = None,
    fetched_at: datetime | None = None,
) -> JobDetailed:
    """Join a job with its state row.

    @param storage: The store to read the state row from
    @param job: The job row
    @param state: The state row to use instead of the one the job points at
    @param fetched_at: When the job was fetched from its queue, if it was
    """

    if state is None and job.state_id is not None:
        state = storage.get_state(job.state_id)

    return JobDetailed(
        id=job.id,
        invocation_data=job.invocation_data,
        arguments=job.arguments,
        created_at=job.created_at,
        expire_at=job.expire_at,
        fetched_at=fetched_at,
        state_id=job.state_id,
        state_name=job.state_name,
        state_reason=state.reason if state is not None else None,
        state_data=state.data if state is not None else None,
    )


def deserialise_job(scope: LocalScope, invocation_data: str, arguments: str | None) -> JobReference | None:
    """Load a job's invocation, or None if it can no longer be loaded."""

    try:
        return InvocationData.load(invocation_data, arguments).deserialise(scope)
    except JobLoadError as err:
        log.warning(f"Could not load job invocation, listing it without one: {err}")
        return None


def deserialise_jobs(
    scope: LocalScope,
    jobs: Iterable[JobDetailed],
    projector: Projector[T],
) -> JobList[T]:
    """Project each detailed job, keeping the order they were given in."""

    result: JobList[T] = JobList()

    for job in jobs:
        state_data = decode_state_data(job.state_data, job_id=job.id, state_name=job.state_name)
        reference = deserialise_job(scope, job.invocation_data, job.arguments)
        result[str(job.id)] = projector(job, reference, state_data)

    return result


# ++++++++++++++++++++++ Projectors ++++++++++++++++++++++


def project_enqueued(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> EnqueuedJob:
    # The job may have moved on since it was queued; only trust EnqueuedAt while it has not
    enqueued_at = state_data.nullable_datetime("EnqueuedAt") if job.state_name == ENQUEUED_STATE else None

    return EnqueuedJob(job=reference, state=job.state_name, enqueued_at=enqueued_at)


def project_fetched(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> FetchedJob:
    return FetchedJob(job=reference, state=job.state_name, fetched_at=job.fetched_at)


def project_processing(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> ProcessingJob:
    return ProcessingJob(
        job=reference,
        # older servers recorded ServerName
        server_id=state_data.first_of("ServerId", "ServerName"),
        started_at=state_data.required_datetime("StartedAt"),
    )


def project_scheduled(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> ScheduledJob:
    return ScheduledJob(
        job=reference,
        enqueue_at=state_data.required_datetime("EnqueueAt"),
        scheduled_at=state_data.required_datetime("ScheduledAt"),
    )


def project_succeeded(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> SucceededJob:
    performance_duration = state_data.optional_int("PerformanceDuration")
    latency = state_data.optional_int("Latency")

    total_duration = (
        performance_duration + latency if performance_duration is not None and latency is not None else None
    )

    return SucceededJob(
        job=reference,
        result=state_data.optional("Result"),
        total_duration=total_duration,
        succeeded_at=state_data.nullable_datetime("SucceededAt"),
    )


def project_failed(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> FailedJob:
    return FailedJob(
        job=reference,
        reason=job.state_reason,
        exception_details=state_data.required("ExceptionDetails"),
        exception_message=state_data.required("ExceptionMessage"),
        exception_type=state_data.required("ExceptionType"),
        failed_at=state_data.nullable_datetime("FailedAt"),
    )


def project_deleted(job: JobDetailed, reference: JobReference | None, state_data: StateData) -> DeletedJob:
    return DeletedJob(job=reference, deleted_at=state_data.optional_datetime("DeletedAt"))
