"""Pytest configuration and fixtures

Lookout never writes to the job store, so the fixtures here play the part of
the job pipeline: they write jobs, states, queue entries and counters into
either a MemoryStorage or a SQLite database, the same way for both.
"""

from datetime import UTC, datetime
import json
import pathlib
import sqlite3
import tempfile

import pytest

from lookout.queues import QueueProviderCollection, StorageQueueProvider
from lookout.records import (
    CounterRecord,
    JobParameterRecord,
    JobRecord,
    QueueEntryRecord,
    ServerRecord,
    SetRecord,
    StateRecord,
)
from lookout.scope import LocalScope
from lookout.storage import MemoryStorage, SQLiteStorage
from lookout.storage.sqlite.tables import ALL_SCHEMAS

CREATED_AT = datetime(2024, 1, 2, 9, 0, 0, tzinfo=UTC)


class EmailJob:
    """Sample job with a static method."""

    @staticmethod
    def send(address: str) -> None:
        pass


class ReportJob:
    """Sample job with an instance method."""

    def build(self, report_id: int, fmt: str = "pdf") -> None:
        pass


def invocation(job_type: str = "EmailJob", method: str = "send") -> str:
    return json.dumps({"type": job_type, "method": method, "parameter_types": []})


class MemoryPipeline:
    """Writes into a MemoryStorage."""

    def __init__(self, storage: MemoryStorage) -> None:
        self.storage = storage
        self._ids: dict[str, int] = {}

    def _next_id(self, table: str) -> int:
        self._ids[table] = self._ids.get(table, 0) + 1
        return self._ids[table]

    def add_job(
        self,
        state_name: str | None = None,
        state_data: dict[str, str] | None = None,
        reason: str | None = None,
        invocation_data: str | None = None,
        arguments: list | None = None,
    ) -> int:
        job_id = self._next_id("jobs")
        with self.storage.lock:
            self.storage.jobs.append(
                JobRecord(
                    id=job_id,
                    invocation_data=invocation_data or invocation(),
                    arguments=json.dumps(arguments if arguments is not None else ["someone@example.com"]),
                    created_at=CREATED_AT,
                )
            )
        if state_name is not None:
            self.add_state(job_id, state_name, state_data, reason)
        return job_id

    def add_state(self, job_id: int, name: str, data: dict[str, str] | None = None, reason: str | None = None) -> int:
        state_id = self._next_id("states")
        with self.storage.lock:
            self.storage.states.append(
                StateRecord(
                    id=state_id,
                    job_id=job_id,
                    name=name,
                    created_at=CREATED_AT,
                    reason=reason,
                    data=json.dumps(data or {}),
                )
            )
            for job in self.storage.jobs:
                if job.id == job_id:
                    job.state_id = state_id
                    job.state_name = name
        return state_id

    def set_state_name(self, job_id: int, name: str) -> None:
        """Update only the denormalised state name, as a racing writer would."""

        with self.storage.lock:
            for job in self.storage.jobs:
                if job.id == job_id:
                    job.state_name = name

    def set_parameter(self, job_id: int, name: str, value: str) -> None:
        with self.storage.lock:
            self.storage.parameters.append(JobParameterRecord(job_id=job_id, name=name, value=value))

    def enqueue(self, job_id: int, queue: str = "default") -> None:
        with self.storage.lock:
            self.storage.queue_entries.append(
                QueueEntryRecord(id=self._next_id("job_queue"), job_id=job_id, queue=queue)
            )

    def fetch(self, job_id: int, queue: str | None = None, fetched_at: datetime = CREATED_AT) -> None:
        with self.storage.lock:
            for entry in self.storage.queue_entries:
                if entry.job_id == job_id and queue in (None, entry.queue):
                    entry.fetched_at = fetched_at

    def increment(self, key: str, times: int = 1) -> None:
        with self.storage.lock:
            for _ in range(times):
                self.storage.counters.append(CounterRecord(id=self._next_id("counters"), key=key))

    def add_server(self, server_id: str, data: dict, heartbeat: datetime | None = CREATED_AT) -> None:
        with self.storage.lock:
            self.storage.server_records.append(
                ServerRecord(id=server_id, last_heartbeat=heartbeat, data=json.dumps(data))
            )

    def add_to_set(self, key: str, value: str) -> None:
        with self.storage.lock:
            self.storage.sets.append(SetRecord(key=key, value=value))


class SQLitePipeline:
    """Creates and writes into the SQLite database a SQLiteStorage reads."""

    def __init__(self, db_path: str) -> None:
        self.conn = sqlite3.connect(db_path, isolation_level=None)

        for schema in ALL_SCHEMAS:
            self.conn.execute(schema)

    def add_job(
        self,
        state_name: str | None = None,
        state_data: dict[str, str] | None = None,
        reason: str | None = None,
        invocation_data: str | None = None,
        arguments: list | None = None,
    ) -> int:
        cursor = self.conn.execute(
            "insert into jobs (invocation_data, arguments, created_at) values (?, ?, ?)",
            (
                invocation_data or invocation(),
                json.dumps(arguments if arguments is not None else ["someone@example.com"]),
                CREATED_AT.isoformat(),
            ),
        )
        job_id = cursor.lastrowid
        assert job_id is not None

        if state_name is not None:
            self.add_state(job_id, state_name, state_data, reason)
        return job_id

    def add_state(self, job_id: int, name: str, data: dict[str, str] | None = None, reason: str | None = None) -> int:
        cursor = self.conn.execute(
            "insert into states (job_id, name, reason, created_at, data) values (?, ?, ?, ?, ?)",
            (job_id, name, reason, CREATED_AT.isoformat(), json.dumps(data or {})),
        )
        state_id = cursor.lastrowid
        assert state_id is not None

        self.conn.execute("update jobs set state_id = ?, state_name = ? where id = ?", (state_id, name, job_id))
        return state_id

    def set_state_name(self, job_id: int, name: str) -> None:
        self.conn.execute("update jobs set state_name = ? where id = ?", (name, job_id))

    def set_parameter(self, job_id: int, name: str, value: str) -> None:
        self.conn.execute(
            "insert into job_parameters (job_id, name, value) values (?, ?, ?)",
            (job_id, name, value),
        )

    def enqueue(self, job_id: int, queue: str = "default") -> None:
        self.conn.execute("insert into job_queue (job_id, queue) values (?, ?)", (job_id, queue))

    def fetch(self, job_id: int, queue: str | None = None, fetched_at: datetime = CREATED_AT) -> None:
        self.conn.execute(
            "update job_queue set fetched_at = ? where job_id = ? and (? is null or queue = ?)",
            (fetched_at.isoformat(), job_id, queue, queue),
        )

    def increment(self, key: str, times: int = 1) -> None:
        for _ in range(times):
            self.conn.execute("insert into counters (key, value) values (?, 1)", (key,))

    def add_server(self, server_id: str, data: dict, heartbeat: datetime | None = CREATED_AT) -> None:
        self.conn.execute(
            "insert into servers (id, last_heartbeat, data) values (?, ?, ?)",
            (server_id, heartbeat.isoformat() if heartbeat is not None else None, json.dumps(data)),
        )

    def add_to_set(self, key: str, value: str) -> None:
        self.conn.execute("insert into sets (key, value) values (?, ?)", (key, value))

    def close(self) -> None:
        self.conn.close()


@pytest.fixture
def db_path():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as tmp:
        tmp_file = tmp.name

    yield tmp_file

    for suffix in ("", "-wal", "-shm"):
        pathlib.Path(tmp_file + suffix).unlink(missing_ok=True)


@pytest.fixture
def sqlite_storage(db_path):
    pipeline = SQLitePipeline(db_path)
    storage = SQLiteStorage(db_path)
    storage.init()

    yield storage

    storage.close()
    pipeline.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, db_path):
    """A (storage, pipeline) pair, once for each storage implementation."""

    if request.param == "memory":
        storage = MemoryStorage()
        yield storage, MemoryPipeline(storage)
        return

    pipeline = SQLitePipeline(db_path)
    storage = SQLiteStorage(db_path)
    storage.init()

    yield storage, pipeline

    pipeline.close()
    storage.close()


@pytest.fixture
def memory_store():
    storage = MemoryStorage()
    return storage, MemoryPipeline(storage)


@pytest.fixture
def scope():
    return LocalScope(jobs=[EmailJob, ReportJob])


@pytest.fixture
def queue_providers():
    return QueueProviderCollection(default_provider=StorageQueueProvider())
