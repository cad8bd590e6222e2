"""Constants used throughout the Lookout codebase."""

# State names, as written by the job pipeline
ENQUEUED_STATE = "Enqueued"
PROCESSING_STATE = "Processing"
SCHEDULED_STATE = "Scheduled"
SUCCEEDED_STATE = "Succeeded"
FAILED_STATE = "Failed"
DELETED_STATE = "Deleted"

# Counter log keys
COUNTER_KEY_PREFIX = "stats"
SUCCEEDED_COUNTER = "succeeded"
FAILED_COUNTER = "failed"
DELETED_COUNTER = "deleted"
SUCCEEDED_TOTAL_KEY = f"{COUNTER_KEY_PREFIX}:{SUCCEEDED_COUNTER}"
DELETED_TOTAL_KEY = f"{COUNTER_KEY_PREFIX}:{DELETED_COUNTER}"

DAILY_BUCKET_FORMAT = "%Y-%m-%d"
HOURLY_BUCKET_FORMAT = "%Y-%m-%d-%H"

# today and the seven days before it
DAILY_TIMELINE_DAYS = 8
HOURLY_TIMELINE_HOURS = 24

# Named sets
RECURRING_JOBS_SET = "recurring-jobs"

# Number of enqueued jobs shown per queue summary
QUEUE_SUMMARY_TOP_JOBS = 5

LOG_LEVEL_ENV_VAR = "LOOKOUT_LOG_LEVEL"
