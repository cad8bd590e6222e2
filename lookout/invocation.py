"""Invocation descriptors: which job method to call, and with what.

The job pipeline stores the descriptor and the arguments as two JSON columns.
Loading them back can fail long after they were written, when the job class was
renamed or its method signature changed in a later deployment.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import inspect
import json
from typing import Any

from lookout.exception import JobLoadError
from lookout.scope import LocalScope


@dataclass
class JobReference:
    """A resolved, callable job."""

    job_class: type[Any]
    method_name: str
    # For instance methods this is the unbound function
    method: Callable[..., Any]
    args: list[Any] = field(default_factory=list)

    @property
    def type_name(self) -> str:
        return self.job_class.__name__


@dataclass
class InvocationData:
    """The stored description of a job invocation."""

    type: str
    method: str
    arguments: list[Any] = field(default_factory=list)
    parameter_types: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, invocation_data: str, arguments: str | None) -> InvocationData:
        """Decode the invocation descriptor and argument columns of a job.

        @param invocation_data: JSON object with `type`, `method` and optionally `parameter_types`
        @param arguments: JSON list of arguments
        @raises JobLoadError: If either column cannot be decoded
        """

        try:
            data = json.loads(invocation_data)
            args = json.loads(arguments) if arguments else []
        except (TypeError, ValueError) as err:
            raise JobLoadError(f"Invocation data could not be decoded: {err}") from err

        if not isinstance(data, Mapping) or "type" not in data or "method" not in data:
            raise JobLoadError(f"Invocation data is missing a type or method: {invocation_data!r}")

        if not isinstance(args, list):
            raise JobLoadError(f"Invocation arguments are not a list: {arguments!r}")

        return cls(
            type=data["type"],
            method=data["method"],
            arguments=args,
            parameter_types=list(data.get("parameter_types", [])),
        )

    def deserialise(self, scope: LocalScope) -> JobReference:
        """Resolve the descriptor against the job classes in scope.

        @raises JobLoadError: If the type or method no longer exists, or no longer accepts the arguments
        """

        job_class = scope.get_job_class(self.type)

        try:
            attribute = inspect.getattr_static(job_class, self.method)
        except AttributeError as err:
            raise JobLoadError(f"Job class '{self.type}' has no method '{self.method}'") from err

        # instance methods are checked against a placeholder for self
        if isinstance(attribute, (staticmethod, classmethod)):
            method = getattr(job_class, self.method)
            call_args = list(self.arguments)
        elif inspect.isfunction(attribute):
            method = attribute
            call_args = [None, *self.arguments]
        else:
            raise JobLoadError(f"'{self.type}.{self.method}' is not a method")

        try:
            inspect.signature(method).bind(*call_args)
        except TypeError as err:
            raise JobLoadError(f"'{self.type}.{self.method}' no longer accepts its stored arguments: {err}") from err

        return JobReference(job_class=job_class, method_name=self.method, method=method, args=list(self.arguments))
