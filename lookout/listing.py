"""Paginated job listings, by state and by queue."""

from collections.abc import Iterable
from typing import TypeVar

from lookout.constants import QUEUE_SUMMARY_TOP_JOBS
from lookout.dtos import EnqueuedJob, FetchedJob, JobDetailed, JobList, QueueWithTopEnqueuedJobs
from lookout.projection import Projector, deserialise_jobs, detailed_job, project_enqueued, project_fetched
from lookout.queues.base import QueueMonitoringApi
from lookout.queues.collection import QueueProviderCollection
from lookout.scope import LocalScope
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def list_jobs(
    storage: MonitoringStorage,
    scope: LocalScope,
    offset: int,
    limit: int,
    state_name: str,
    projector: Projector[T],
) -> JobList[T]:
    """List a page of jobs currently in a state, most recent first.

    Job IDs increase monotonically, so ordering by ID descending gives the
    most recently created jobs first. An offset past the last job gives an
    empty list.

    @param storage: The store to read from
    @param scope: Job classes to resolve invocations against
    @param offset: How many jobs to skip
    @param limit: The maximum number of jobs to return
    @param state_name: The current state to filter on
    @param projector: Builds the result record for each job
    @return: Job ID to record, in listing order
    """

    log.debug(f"Listing {state_name} jobs from {offset} (limit {limit})")

    jobs = [detailed_job(storage, job) for job in storage.jobs_in_state(state_name, offset, limit)]
    return deserialise_jobs(scope, jobs, projector)


def _queued_jobs(
    storage: MonitoringStorage, queue: str, job_ids: Iterable[int], fetched: bool
) -> list[JobDetailed]:
    """Load the jobs still in the given condition in a queue, in the order of job_ids."""

    ids = list(job_ids)
    jobs_by_id = {job.id: job for job in storage.get_jobs(ids)}

    detailed: list[JobDetailed] = []
    for job_id in ids:
        job = jobs_by_id.get(job_id)
        if job is None:
            continue

        # The queue entry may have changed since the IDs were listed
        entry = storage.queue_entry(job_id, queue, fetched)
        if entry is None:
            continue

        detailed.append(detailed_job(storage, job, fetched_at=entry.fetched_at))

    return detailed


def enqueued_jobs(
    storage: MonitoringStorage, scope: LocalScope, queue: str, job_ids: Iterable[int]
) -> JobList[EnqueuedJob]:
    """Project the jobs that are waiting in a queue, unclaimed."""

    return deserialise_jobs(scope, _queued_jobs(storage, queue, job_ids, fetched=False), project_enqueued)


def fetched_jobs(
    storage: MonitoringStorage, scope: LocalScope, queue: str, job_ids: Iterable[int]
) -> JobList[FetchedJob]:
    """Project the jobs that a worker has claimed from a queue."""

    return deserialise_jobs(scope, _queued_jobs(storage, queue, job_ids, fetched=True), project_fetched)


def queue_summaries(
    storage: MonitoringStorage,
    scope: LocalScope,
    queue_providers: QueueProviderCollection,
) -> list[QueueWithTopEnqueuedJobs]:
    """Summarise every queue of every provider, ordered by queue name.

    A queue listed by more than one provider is summarised once, by the
    provider it resolves to.
    """

    pairs: list[tuple[QueueMonitoringApi, str]] = []
    for provider in queue_providers:
        monitoring = provider.get_monitoring_api(storage)
        pairs.extend(
            (monitoring, queue) for queue in monitoring.queues() if queue_providers.owns(provider, queue)
        )
    pairs.sort(key=lambda pair: pair[1])

    log.debug(f"Summarising {len(pairs)} queues")

    result: list[QueueWithTopEnqueuedJobs] = []
    for monitoring, queue in pairs:
        first_ids = monitoring.enqueued_job_ids(queue, 0, QUEUE_SUMMARY_TOP_JOBS)
        counts = monitoring.enqueued_and_fetched_count(queue)

        result.append(
            QueueWithTopEnqueuedJobs(
                name=queue,
                length=counts.enqueued_count or 0,
                fetched=counts.fetched_count,
                first_jobs=enqueued_jobs(storage, scope, queue, first_ids),
            )
        )

    return result
