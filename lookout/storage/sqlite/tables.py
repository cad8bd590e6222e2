"""Schema of the job store, as the job pipeline creates it.

Lookout only reads these tables; `SQLiteStorage` never runs these statements.
"""

JOBS_TABLE_SCHEMA = """
create table if not exists jobs (
    id                        integer primary key,
    invocation_data           text not null,
    arguments                 text not null,
    created_at                text not null,
    expire_at                 text,
    state_id                  integer,
    state_name                text
);
"""

STATES_TABLE_SCHEMA = """
create table if not exists states (
    id                        integer primary key autoincrement,
    job_id                    integer not null,
    name                      text not null,
    reason                    text,
    created_at                text not null,
    data                      text,
    foreign key (job_id)      references jobs(id)
);
"""

JOB_PARAMETERS_TABLE_SCHEMA = """
create table if not exists job_parameters (
    job_id                    integer not null,
    name                      text not null,
    value                     text,
    primary key (job_id, name),
    foreign key (job_id)      references jobs(id)
);
"""

JOB_QUEUE_TABLE_SCHEMA = """
create table if not exists job_queue (
    id                        integer primary key autoincrement,
    job_id                    integer not null,
    queue                     text not null,
    fetched_at                text,
    foreign key (job_id)      references jobs(id)
);
"""

COUNTERS_TABLE_SCHEMA = """
create table if not exists counters (
    id                        integer primary key autoincrement,
    key                       text not null,
    value                     integer not null default 1
);
"""

SERVERS_TABLE_SCHEMA = """
create table if not exists servers (
    id                        text primary key,
    last_heartbeat            text,
    data                      text not null
);
"""

SETS_TABLE_SCHEMA = """
create table if not exists sets (
    key                       text not null,
    value                     text not null,
    primary key (key, value)
);
"""

JOBS_STATE_NAME_INDEX = """
create index if not exists idx_jobs_state_name on jobs(state_name, id desc);
"""

STATES_JOB_INDEX = """
create index if not exists idx_states_job_id on states(job_id);
"""

JOB_QUEUE_INDEX = """
create index if not exists idx_job_queue_queue on job_queue(queue, fetched_at);
"""

JOB_QUEUE_JOB_INDEX = """
create index if not exists idx_job_queue_job_id on job_queue(job_id);
"""

COUNTERS_KEY_INDEX = """
create index if not exists idx_counters_key on counters(key);
"""

ALL_SCHEMAS = [
    JOBS_TABLE_SCHEMA,
    STATES_TABLE_SCHEMA,
    JOB_PARAMETERS_TABLE_SCHEMA,
    JOB_QUEUE_TABLE_SCHEMA,
    COUNTERS_TABLE_SCHEMA,
    SERVERS_TABLE_SCHEMA,
    SETS_TABLE_SCHEMA,
    JOBS_STATE_NAME_INDEX,
    STATES_JOB_INDEX,
    JOB_QUEUE_INDEX,
    JOB_QUEUE_JOB_INDEX,
    COUNTERS_KEY_INDEX,
]
