from typing import Any, Self

from lookout.exception import JobNotInScopeError


class LocalScope:
    """A local translation layer between job type names and
    their underlying Python classes."""

    def __init__(self, jobs: list[type[Any]] = []) -> None:
        self.jobs: dict[str, type[Any]] = {}

        self.add_job_classes(jobs)

    def add_job_class(self, job_class: type[Any], name: str | None = None) -> Self:
        """Add a job class to the scope.

        @param job_class: The job class to add.
        @param name: The type name invocation descriptors use; defaults to the class name.
        """

        self.jobs[name or job_class.__name__] = job_class
        return self

    def add_job_classes(self, job_classes: list[type[Any]]) -> Self:
        """Add multiple job classes to the scope.

        @param job_classes: The job classes to add.
        """

        for job_class in job_classes:
            self.jobs[job_class.__name__] = job_class
        return self

    def get_job_class(self, type_name: str) -> type[Any]:
        """Get a job class from the scope by name.

        @param type_name: The name of the job class to get.
        """

        if type_name not in self.jobs:
            raise JobNotInScopeError(f"Job class '{type_name}' not found in scope. Did you register it?")

        return self.jobs[type_name]
