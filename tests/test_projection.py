"""Tests for job projection and the per-state projectors"""

from datetime import UTC, datetime
import json

import pytest

from lookout.dtos import JobDetailed
from lookout.exception import CorruptStateDataError
from lookout.projection import (
    deserialise_job,
    deserialise_jobs,
    detailed_job,
    project_deleted,
    project_enqueued,
    project_failed,
    project_processing,
    project_scheduled,
    project_succeeded,
)
from lookout.records import JobRecord, StateRecord
from lookout.state_data import StateData
from lookout.storage import MemoryStorage

CREATED_AT = datetime(2024, 1, 2, 9, 0, 0, tzinfo=UTC)
EMAIL_INVOCATION = json.dumps({"type": "EmailJob", "method": "send"})


def make_detailed(state_name: str | None = "Enqueued", data: dict | None = None, reason: str | None = None) -> JobDetailed:
    return JobDetailed(
        id=1,
        invocation_data=EMAIL_INVOCATION,
        arguments='["someone@example.com"]',
        created_at=CREATED_AT,
        expire_at=None,
        fetched_at=None,
        state_id=1,
        state_name=state_name,
        state_reason=reason,
        state_data=json.dumps(data or {}),
    )


def state_data(data: dict, state_name: str) -> StateData:
    return StateData(data, job_id=1, state_name=state_name)


def test_detailed_job_joins_referenced_state():
    storage = MemoryStorage()
    storage.states.append(
        StateRecord(id=4, job_id=1, name="Failed", created_at=CREATED_AT, reason="boom", data='{"a": "1"}')
    )
    job = JobRecord(
        id=1, invocation_data=EMAIL_INVOCATION, arguments="[]", created_at=CREATED_AT, state_id=4, state_name="Failed"
    )

    detailed = detailed_job(storage, job)

    assert detailed.state_reason == "boom"
    assert detailed.state_data == '{"a": "1"}'
    assert detailed.state_name == "Failed"
    assert detailed.fetched_at is None


def test_detailed_job_missing_state_row_gives_none():
    """Test that a job pointing at a missing state row is still projected."""
    storage = MemoryStorage()
    job = JobRecord(
        id=1, invocation_data=EMAIL_INVOCATION, arguments="[]", created_at=CREATED_AT, state_id=99, state_name="Failed"
    )

    detailed = detailed_job(storage, job)

    assert detailed.state_reason is None
    assert detailed.state_data is None


def test_detailed_job_uses_supplied_state():
    storage = MemoryStorage()
    job = JobRecord(id=1, invocation_data=EMAIL_INVOCATION, arguments="[]", created_at=CREATED_AT, state_id=99)
    state = StateRecord(id=5, job_id=1, name="Scheduled", created_at=CREATED_AT, reason="later")

    assert detailed_job(storage, job, state=state).state_reason == "later"


def test_deserialise_job_unloadable_returns_none(scope):
    """Test that a job whose class has gone away loads as None rather than failing."""
    stale = json.dumps({"type": "RemovedJob", "method": "run"})
    assert deserialise_job(scope, stale, "[]") is None


def test_deserialise_job_malformed_returns_none(scope):
    assert deserialise_job(scope, "not json", "[]") is None


def test_deserialise_jobs_keeps_unloadable_jobs(scope):
    """Test that a listing keeps jobs it cannot load, with job=None."""
    stale = make_detailed()
    stale.id = 2
    stale.invocation_data = json.dumps({"type": "RemovedJob", "method": "run"})

    result = deserialise_jobs(scope, [make_detailed(), stale], project_deleted)

    assert list(result) == ["1", "2"]
    assert result["1"].job is not None
    assert result["2"].job is None


def test_project_enqueued_only_reads_enqueued_at_while_enqueued():
    enqueued = project_enqueued(
        make_detailed("Enqueued"), None, state_data({"EnqueuedAt": "2024-01-02T10:00:00Z"}, "Enqueued")
    )
    assert enqueued.enqueued_at == datetime(2024, 1, 2, 10, 0, 0, tzinfo=UTC)
    assert enqueued.state == "Enqueued"

    moved_on = project_enqueued(
        make_detailed("Processing"), None, state_data({"EnqueuedAt": "2024-01-02T10:00:00Z"}, "Processing")
    )
    assert moved_on.enqueued_at is None
    assert moved_on.state == "Processing"


def test_project_processing_falls_back_to_server_name():
    processing = project_processing(
        make_detailed("Processing"),
        None,
        state_data({"ServerName": "old-server", "StartedAt": "2024-01-02T10:00:00Z"}, "Processing"),
    )

    assert processing.server_id == "old-server"
    assert processing.started_at == datetime(2024, 1, 2, 10, 0, 0, tzinfo=UTC)


def test_project_processing_requires_server():
    with pytest.raises(CorruptStateDataError):
        project_processing(
            make_detailed("Processing"), None, state_data({"StartedAt": "2024-01-02T10:00:00Z"}, "Processing")
        )


def test_project_scheduled():
    scheduled = project_scheduled(
        make_detailed("Scheduled"),
        None,
        state_data({"EnqueueAt": "2024-01-03T00:00:00Z", "ScheduledAt": "2024-01-02T00:00:00Z"}, "Scheduled"),
    )

    assert scheduled.enqueue_at == datetime(2024, 1, 3, tzinfo=UTC)
    assert scheduled.scheduled_at == datetime(2024, 1, 2, tzinfo=UTC)


def test_project_scheduled_requires_both_keys():
    with pytest.raises(CorruptStateDataError):
        project_scheduled(make_detailed("Scheduled"), None, state_data({"EnqueueAt": "0"}, "Scheduled"))


def test_project_succeeded_total_duration_needs_both_parts():
    """A succeeded job with only a performance duration has no total duration."""
    partial = project_succeeded(
        make_detailed("Succeeded"),
        None,
        state_data({"SucceededAt": "2024-01-02T10:00:00Z", "PerformanceDuration": "120"}, "Succeeded"),
    )
    assert partial.total_duration is None
    assert partial.result is None

    complete = project_succeeded(
        make_detailed("Succeeded"),
        None,
        state_data(
            {"SucceededAt": "2024-01-02T10:00:00Z", "PerformanceDuration": "120", "Latency": "30", "Result": "42"},
            "Succeeded",
        ),
    )
    assert complete.total_duration == 150
    assert complete.result == "42"


def test_project_failed_takes_reason_from_state_row():
    failed = project_failed(
        make_detailed("Failed", reason="An exception occurred"),
        None,
        state_data(
            {
                "ExceptionDetails": "Traceback ...",
                "ExceptionMessage": "boom",
                "ExceptionType": "ValueError",
                "FailedAt": "2024-01-02T10:00:00Z",
            },
            "Failed",
        ),
    )

    assert failed.reason == "An exception occurred"
    assert failed.exception_type == "ValueError"
    assert failed.failed_at == datetime(2024, 1, 2, 10, 0, 0, tzinfo=UTC)


def test_project_failed_missing_exception_type():
    with pytest.raises(CorruptStateDataError) as excinfo:
        project_failed(
            make_detailed("Failed"),
            None,
            state_data(
                {"ExceptionDetails": "...", "ExceptionMessage": "boom", "FailedAt": "2024-01-02T10:00:00Z"}, "Failed"
            ),
        )

    assert excinfo.value.key == "ExceptionType"


def test_project_deleted_timestamp_is_optional():
    assert project_deleted(make_detailed("Deleted"), None, state_data({}, "Deleted")).deleted_at is None

    deleted = project_deleted(make_detailed("Deleted"), None, state_data({"DeletedAt": "0"}, "Deleted"))
    assert deleted.deleted_at == datetime(1970, 1, 1, tzinfo=UTC)


def test_deserialise_jobs_unreadable_payload_names_the_job(scope):
    corrupt = make_detailed("Deleted")
    corrupt.state_data = "[1, 2]"

    with pytest.raises(CorruptStateDataError) as excinfo:
        deserialise_jobs(scope, [corrupt], project_deleted)

    assert excinfo.value.job_id == 1
    assert excinfo.value.state_name == "Deleted"
