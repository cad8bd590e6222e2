"""Headline numbers for the whole job store."""

from lookout.constants import (
    DELETED_TOTAL_KEY,
    ENQUEUED_STATE,
    FAILED_STATE,
    PROCESSING_STATE,
    RECURRING_JOBS_SET,
    SCHEDULED_STATE,
    SUCCEEDED_TOTAL_KEY,
)
from lookout.dtos import Statistics
from lookout.queues.collection import QueueProviderCollection
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


def count_queues(storage: MonitoringStorage, queue_providers: QueueProviderCollection) -> int:
    """Count the distinct queue names across every provider."""

    names: set[str] = set()
    for provider in queue_providers:
        names.update(provider.get_monitoring_api(storage).queues())
    return len(names)


def get_statistics(storage: MonitoringStorage, queue_providers: QueueProviderCollection) -> Statistics:
    """Gather job counts per state, plus server, queue and recurring job totals.

    Succeeded and deleted totals come from lifetime counters rather than the
    jobs table, since finished jobs expire from it.
    """

    log.debug("Gathering statistics")

    # TODO: this groups every job in the store; keep running per-state totals once the pipeline writes them
    count_by_state = storage.count_jobs_by_state()
    counts = storage.count_counters([SUCCEEDED_TOTAL_KEY, DELETED_TOTAL_KEY])

    return Statistics(
        enqueued=count_by_state.get(ENQUEUED_STATE, 0),
        failed=count_by_state.get(FAILED_STATE, 0),
        processing=count_by_state.get(PROCESSING_STATE, 0),
        scheduled=count_by_state.get(SCHEDULED_STATE, 0),
        servers=storage.count_servers(),
        succeeded=counts.get(SUCCEEDED_TOTAL_KEY, 0),
        deleted=counts.get(DELETED_TOTAL_KEY, 0),
        recurring=storage.count_set(RECURRING_JOBS_SET),
        queues=count_queues(storage, queue_providers),
    )
