from collections.abc import Iterable
from datetime import UTC, datetime
import pathlib
import sqlite3

from lookout.records import JobRecord, QueueEntryRecord, ServerRecord, StateRecord
from lookout.serialise import deserialise_nullable_datetime
from lookout.storage.base import MonitoringStorage
from lookout.utils.logging_config import get_logger

log = get_logger(__name__)

JOB_COLUMNS = "id, invocation_data, arguments, created_at, expire_at, state_id, state_name"
STATE_COLUMNS = "id, job_id, name, reason, created_at, data"


def _job_from_row(row: tuple) -> JobRecord:
    job_id, invocation_data, arguments, created_at, expire_at, state_id, state_name = row
    return JobRecord(
        id=job_id,
        invocation_data=invocation_data,
        arguments=arguments,
        created_at=deserialise_nullable_datetime(created_at),
        expire_at=deserialise_nullable_datetime(expire_at),
        state_id=state_id,
        state_name=state_name,
    )


def _state_from_row(row: tuple) -> StateRecord:
    state_id, job_id, name, reason, created_at, data = row
    return StateRecord(
        id=state_id,
        job_id=job_id,
        name=name,
        reason=reason,
        created_at=deserialise_nullable_datetime(created_at),
        data=data,
    )


class SQLiteStorage(MonitoringStorage):
    """Reads the job store from a SQLite database shared with the job pipeline."""

    conn: sqlite3.Connection

    def __init__(self, db_path: str):
        self._db_path = db_path

    def _create_connection(self) -> sqlite3.Connection:
        """Create and configure a new read-only database connection.

        The journal mode and schema belong to the job pipeline, so this
        connection changes neither.
        """

        log.debug(f"Creating new read-only database connection to {self._db_path}")
        uri = f"{pathlib.Path(self._db_path).resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, uri=True, timeout=5, isolation_level=None, check_same_thread=False)

        conn.execute("PRAGMA query_only=ON;")
        conn.execute("PRAGMA busy_timeout=5000;")

        return conn

    def init(self) -> None:
        """Establish a database connection to an existing job store.

        @raises sqlite3.OperationalError: If the database file does not exist
        """

        self.conn = self._create_connection()
        log.debug(f"Database connection established to {self._db_path}")

    def server_time(self) -> datetime:
        (now,) = self.conn.execute("select strftime('%Y-%m-%d %H:%M:%f', 'now')").fetchone()
        return datetime.fromisoformat(now).replace(tzinfo=UTC)

    def get_job(self, job_id: int) -> JobRecord | None:
        log.debug(f"Getting job {job_id}")

        row = self.conn.execute(f"select {JOB_COLUMNS} from jobs where id = ?", (job_id,)).fetchone()  # noqa: S608
        return _job_from_row(row) if row is not None else None

    def get_jobs(self, job_ids: Iterable[int]) -> list[JobRecord]:
        ids = list(job_ids)
        if not ids:
            return []

        q_marks = ",".join("?" for _ in ids)
        rows = self.conn.execute(
            f"select {JOB_COLUMNS} from jobs where id in ({q_marks}) order by id asc",  # noqa: S608
            ids,
        ).fetchall()
        return [_job_from_row(row) for row in rows]

    def jobs_in_state(self, state_name: str, offset: int, limit: int) -> list[JobRecord]:
        log.debug(f"Listing jobs in state {state_name} from {offset} (limit {limit})")

        rows = self.conn.execute(
            f"""
            select {JOB_COLUMNS}
            from jobs
            where state_name = ?
            order by id desc
            limit ? offset ?
            """,  # noqa: S608
            (state_name, limit, offset),
        ).fetchall()
        return [_job_from_row(row) for row in rows]

    def count_jobs_in_state(self, state_name: str) -> int:
        (count,) = self.conn.execute("select count(*) from jobs where state_name = ?", (state_name,)).fetchone()
        return count

    def count_jobs_by_state(self) -> dict[str, int]:
        rows = self.conn.execute(
            "select state_name, count(*) from jobs where state_name is not null group by state_name"
        ).fetchall()
        return {state_name: count for state_name, count in rows}

    def get_state(self, state_id: int) -> StateRecord | None:
        row = self.conn.execute(f"select {STATE_COLUMNS} from states where id = ?", (state_id,)).fetchone()  # noqa: S608
        return _state_from_row(row) if row is not None else None

    def state_history(self, job_id: int) -> list[StateRecord]:
        rows = self.conn.execute(
            f"select {STATE_COLUMNS} from states where job_id = ? order by id desc",  # noqa: S608
            (job_id,),
        ).fetchall()
        return [_state_from_row(row) for row in rows]

    def job_parameters(self, job_id: int) -> dict[str, str | None]:
        rows = self.conn.execute("select name, value from job_parameters where job_id = ?", (job_id,)).fetchall()
        return {name: value for name, value in rows}

    def queue_entry(self, job_id: int, queue: str, fetched: bool) -> QueueEntryRecord | None:
        fetched_clause = "fetched_at is not null" if fetched else "fetched_at is null"
        row = self.conn.execute(
            f"""
            select id, job_id, queue, fetched_at
            from job_queue
            where job_id = ? and queue = ? and {fetched_clause}
            order by id desc
            limit 1
            """,  # noqa: S608
            (job_id, queue),
        ).fetchone()

        if row is None:
            return None

        entry_id, entry_job_id, queue, fetched_at = row
        return QueueEntryRecord(
            id=entry_id,
            job_id=entry_job_id,
            queue=queue,
            fetched_at=deserialise_nullable_datetime(fetched_at),
        )

    def queue_names(self) -> list[str]:
        rows = self.conn.execute("select distinct queue from job_queue order by queue").fetchall()
        return [queue for (queue,) in rows]

    def queue_job_ids(self, queue: str, fetched: bool, offset: int, limit: int) -> list[int]:
        fetched_clause = "fetched_at is not null" if fetched else "fetched_at is null"
        rows = self.conn.execute(
            f"""
            select job_id
            from job_queue
            where queue = ? and {fetched_clause}
            order by id asc
            limit ? offset ?
            """,  # noqa: S608
            (queue, limit, offset),
        ).fetchall()
        return [job_id for (job_id,) in rows]

    def count_queue_entries(self, queue: str, fetched: bool) -> int:
        fetched_clause = "fetched_at is not null" if fetched else "fetched_at is null"
        (count,) = self.conn.execute(
            f"select count(*) from job_queue where queue = ? and {fetched_clause}",  # noqa: S608
            (queue,),
        ).fetchone()
        return count

    def count_counters(self, keys: Iterable[str]) -> dict[str, int]:
        key_list = list(keys)
        if not key_list:
            return {}

        q_marks = ",".join("?" for _ in key_list)
        rows = self.conn.execute(
            f"select key, count(*) from counters where key in ({q_marks}) group by key",  # noqa: S608
            key_list,
        ).fetchall()
        return {key: count for key, count in rows}

    def servers(self) -> list[ServerRecord]:
        rows = self.conn.execute("select id, last_heartbeat, data from servers order by id").fetchall()
        return [
            ServerRecord(id=server_id, last_heartbeat=deserialise_nullable_datetime(heartbeat), data=data)
            for server_id, heartbeat, data in rows
        ]

    def count_servers(self) -> int:
        (count,) = self.conn.execute("select count(*) from servers").fetchone()
        return count

    def count_set(self, key: str) -> int:
        (count,) = self.conn.execute("select count(*) from sets where key = ?", (key,)).fetchone()
        return count

    def close(self) -> None:
        """Close the database connection."""

        log.debug(f"Closing database connection to {self._db_path}")
        if hasattr(self, "conn") and self.conn is not None:
            self.conn.close()
