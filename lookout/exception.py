"""Exceptions used throughout Lookout."""


class LookoutError(Exception):
    """Base exception for Lookout-related errors."""


class ProviderNotFoundError(LookoutError):
    """No queue provider is registered for a queue."""

    def __init__(self, queue: str) -> None:
        super().__init__(f"No queue provider is registered for queue '{queue}'.")
        self.queue = queue


class CorruptStateDataError(LookoutError):
    """A state's data payload cannot be read, or lacks a key its state requires.

    @param key: The offending key, or None when the whole payload is unreadable
    @param job_id: The job the state belongs to
    @param state_name: The state's name
    @param detail: What was wrong with the payload or value; None for a missing key
    """

    def __init__(
        self,
        key: str | None,
        job_id: int | None = None,
        state_name: str | None = None,
        detail: str | None = None,
    ) -> None:
        location = f"State data for job {job_id} in state '{state_name}'"

        if key is None:
            message = f"{location} is unreadable: {detail}"
        elif detail is not None:
            message = f"{location} has an invalid value for key '{key}': {detail}"
        else:
            message = f"{location} is missing mandatory key '{key}'."

        super().__init__(message)
        self.key = key
        self.job_id = job_id
        self.state_name = state_name
        self.detail = detail


class JobLoadError(LookoutError):
    """An invocation descriptor could not be resolved to a job."""


class NotInScopeError(LookoutError):
    """A class was not found in the current scope."""


class JobNotInScopeError(NotInScopeError, JobLoadError):
    """A job class was not found in the current scope."""
