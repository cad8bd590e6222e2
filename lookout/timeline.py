"""Daily and hourly activity timelines from the counter log.

Counters are append-only: every increment is its own row, and a bucket's count
is the number of rows with that bucket's key. Buckets nobody incremented have
no rows at all, so they are filled in with zero here.
"""

from datetime import datetime, timedelta

from lookout.constants import (
    COUNTER_KEY_PREFIX,
    DAILY_BUCKET_FORMAT,
    DAILY_TIMELINE_DAYS,
    HOURLY_BUCKET_FORMAT,
    HOURLY_TIMELINE_HOURS,
)
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)


def counter_key(counter_type: str, bucket: datetime, bucket_format: str) -> str:
    """The counter key for one bucket, e.g. `stats:succeeded:2024-01-02`."""

    return f"{COUNTER_KEY_PREFIX}:{counter_type}:{bucket.strftime(bucket_format)}"


def _timeline(
    storage: MonitoringStorage,
    counter_type: str,
    buckets: list[datetime],
    bucket_format: str,
) -> dict[datetime, int]:
    keys = [counter_key(counter_type, bucket, bucket_format) for bucket in buckets]
    counts = storage.count_counters(keys)

    return {bucket: counts.get(key, 0) for bucket, key in zip(buckets, keys, strict=True)}


def daily_buckets(now: datetime, days: int = DAILY_TIMELINE_DAYS) -> list[datetime]:
    """Midnight of today and each of the preceding days, most recent first."""

    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return [today - timedelta(days=offset) for offset in range(days)]


def hourly_buckets(now: datetime, hours: int = HOURLY_TIMELINE_HOURS) -> list[datetime]:
    """The start of this hour and each of the preceding hours, most recent first."""

    this_hour = now.replace(minute=0, second=0, microsecond=0)
    return [this_hour - timedelta(hours=offset) for offset in range(hours)]


def daily_timeline(storage: MonitoringStorage, counter_type: str) -> dict[datetime, int]:
    """Count a counter per day, for today and the seven days before.

    @param storage: The store to read from; its clock decides what "today" is
    @param counter_type: The counter name, e.g. "succeeded"
    @return: Day to count, most recent first, with a zero for quiet days
    """

    now = storage.server_time()
    log.debug(f"Building daily {counter_type} timeline up to {now}")

    return _timeline(storage, counter_type, daily_buckets(now), DAILY_BUCKET_FORMAT)


def hourly_timeline(storage: MonitoringStorage, counter_type: str) -> dict[datetime, int]:
    """Count a counter per hour, for the current hour and the 23 before."""

    now = storage.server_time()
    log.debug(f"Building hourly {counter_type} timeline up to {now}")

    return _timeline(storage, counter_type, hourly_buckets(now), HOURLY_BUCKET_FORMAT)
