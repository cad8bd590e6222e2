"""The monitoring API: every view a dashboard needs over the job store."""

from datetime import UTC, datetime

from lookout.constants import (
    DELETED_STATE,
    FAILED_COUNTER,
    FAILED_STATE,
    PROCESSING_STATE,
    SCHEDULED_STATE,
    SUCCEEDED_COUNTER,
    SUCCEEDED_STATE,
)
from lookout.dtos import (
    DeletedJob,
    EnqueuedJob,
    FailedJob,
    FetchedJob,
    JobDetails,
    JobList,
    ProcessingJob,
    QueueWithTopEnqueuedJobs,
    ScheduledJob,
    ServerSummary,
    StateHistory,
    Statistics,
    SucceededJob,
)
from lookout.listing import enqueued_jobs, fetched_jobs, list_jobs, queue_summaries
from lookout.projection import (
    deserialise_job,
    project_deleted,
    project_failed,
    project_processing,
    project_scheduled,
    project_succeeded,
)
from lookout.queues.base import QueueMonitoringApi
from lookout.queues.collection import QueueProviderCollection
from lookout.scope import LocalScope
from lookout.serialise import deserialise_nullable_datetime, from_json
from lookout.state_data import decode_state_data
from lookout.statistics import get_statistics
from lookout.storage.base import MonitoringStorage
from lookout.timeline import daily_timeline, hourly_timeline
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


class MonitoringApi:
    """Read-only views over a job store.

    Holds no state of its own beyond its collaborators, so one instance can
    serve concurrent callers. Every call reads the store afresh; results from
    separate reads within one call may reflect slightly different moments.

    @param storage: The job store to read from
    @param queue_providers: The queue backends of the deployment
    @param scope: Job classes to resolve job invocations against
    """

    def __init__(
        self,
        storage: MonitoringStorage,
        queue_providers: QueueProviderCollection,
        scope: LocalScope | None = None,
    ) -> None:
        self.storage = storage
        self.queue_providers = queue_providers
        self.scope = scope if scope is not None else LocalScope()

    def _queue_api(self, queue: str) -> QueueMonitoringApi:
        return self.queue_providers.get_provider(queue).get_monitoring_api(self.storage)

    # ++++++++++++++++++++++ Queues and servers ++++++++++++++++++++++

    def queues(self) -> list[QueueWithTopEnqueuedJobs]:
        return queue_summaries(self.storage, self.scope, self.queue_providers)

    def servers(self) -> list[ServerSummary]:
        result: list[ServerSummary] = []

        for server in self.storage.servers():
            data = from_json(server.data) or {}
            started_at = deserialise_nullable_datetime(data.get("started_at"))

            result.append(
                ServerSummary(
                    name=server.id,
                    heartbeat=server.last_heartbeat,
                    queues=list(data.get("queues") or []),
                    started_at=started_at if started_at is not None else datetime.min.replace(tzinfo=UTC),
                    workers_count=int(data.get("worker_count") or 0),
                )
            )

        return result

    # ++++++++++++++++++++++ Single jobs ++++++++++++++++++++++

    def job_details(self, job_id: str) -> JobDetails | None:
        """Get a job with its parameters and full state history.

        @param job_id: The job's ID, as text
        @return: The job's details, or None if there is no such job
        """

        try:
            numeric_id = int(job_id)
        except ValueError:
            log.debug(f"Job ID {job_id!r} is not numeric; no such job")
            return None

        job = self.storage.get_job(numeric_id)
        if job is None:
            return None

        history = [
            StateHistory(
                state_name=state.name,
                created_at=state.created_at,
                reason=state.reason,
                data=dict(decode_state_data(state.data, job_id=numeric_id, state_name=state.name)),
            )
            for state in self.storage.state_history(numeric_id)
        ]

        return JobDetails(
            created_at=job.created_at,
            expire_at=job.expire_at,
            job=deserialise_job(self.scope, job.invocation_data, job.arguments),
            history=history,
            properties=self.storage.job_parameters(numeric_id),
        )

    # ++++++++++++++++++++++ Statistics ++++++++++++++++++++++

    def get_statistics(self) -> Statistics:
        return get_statistics(self.storage, self.queue_providers)

    # ++++++++++++++++++++++ Listings ++++++++++++++++++++++

    def enqueued_jobs(self, queue: str, offset: int, per_page: int) -> JobList[EnqueuedJob]:
        job_ids = self._queue_api(queue).enqueued_job_ids(queue, offset, per_page)
        return enqueued_jobs(self.storage, self.scope, queue, job_ids)

    def fetched_jobs(self, queue: str, offset: int, per_page: int) -> JobList[FetchedJob]:
        job_ids = self._queue_api(queue).fetched_job_ids(queue, offset, per_page)
        return fetched_jobs(self.storage, self.scope, queue, job_ids)

    def processing_jobs(self, offset: int, count: int) -> JobList[ProcessingJob]:
        return list_jobs(self.storage, self.scope, offset, count, PROCESSING_STATE, project_processing)

    def scheduled_jobs(self, offset: int, count: int) -> JobList[ScheduledJob]:
        return list_jobs(self.storage, self.scope, offset, count, SCHEDULED_STATE, project_scheduled)

    def succeeded_jobs(self, offset: int, count: int) -> JobList[SucceededJob]:
        return list_jobs(self.storage, self.scope, offset, count, SUCCEEDED_STATE, project_succeeded)

    def failed_jobs(self, offset: int, count: int) -> JobList[FailedJob]:
        return list_jobs(self.storage, self.scope, offset, count, FAILED_STATE, project_failed)

    def deleted_jobs(self, offset: int, count: int) -> JobList[DeletedJob]:
        return list_jobs(self.storage, self.scope, offset, count, DELETED_STATE, project_deleted)

    # ++++++++++++++++++++++ Counts ++++++++++++++++++++++

    def scheduled_count(self) -> int:
        return self.storage.count_jobs_in_state(SCHEDULED_STATE)

    def failed_count(self) -> int:
        return self.storage.count_jobs_in_state(FAILED_STATE)

    def processing_count(self) -> int:
        return self.storage.count_jobs_in_state(PROCESSING_STATE)

    def succeeded_list_count(self) -> int:
        return self.storage.count_jobs_in_state(SUCCEEDED_STATE)

    def deleted_list_count(self) -> int:
        return self.storage.count_jobs_in_state(DELETED_STATE)

    def enqueued_count(self, queue: str) -> int:
        return self._queue_api(queue).enqueued_and_fetched_count(queue).enqueued_count or 0

    def fetched_count(self, queue: str) -> int:
        return self._queue_api(queue).enqueued_and_fetched_count(queue).fetched_count or 0

    # ++++++++++++++++++++++ Timelines ++++++++++++++++++++++

    def succeeded_by_dates_count(self) -> dict[datetime, int]:
        return daily_timeline(self.storage, SUCCEEDED_COUNTER)

    def failed_by_dates_count(self) -> dict[datetime, int]:
        return daily_timeline(self.storage, FAILED_COUNTER)

    def hourly_succeeded_jobs(self) -> dict[datetime, int]:
        return hourly_timeline(self.storage, SUCCEEDED_COUNTER)

    def hourly_failed_jobs(self) -> dict[datetime, int]:
        return hourly_timeline(self.storage, FAILED_COUNTER)
