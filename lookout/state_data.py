"""Typed access to the free-form data attached to a job state.

State data is stored as a string to string mapping whose meaningful keys depend
on the state. Each projection in `lookout.projection` names the keys it needs
through these accessors, so required and optional keys stay explicit.
"""

from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from typing import TypeVar

from lookout.exception import CorruptStateDataError
from lookout.serialise import deserialise_datetime, deserialise_nullable_datetime, state_data_from_json


T = TypeVar("T")


class StateData(Mapping[str, str]):
    """A read-only view over a state's data, aware of which job it belongs to."""

    def __init__(
        self,
        data: Mapping[str, str] | None,
        job_id: int | None = None,
        state_name: str | None = None,
    ) -> None:
        self._data: dict[str, str] = dict(data or {})
        self.job_id = job_id
        self.state_name = state_name

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"StateData({self._data!r}, job_id={self.job_id!r}, state_name={self.state_name!r})"

    def required(self, key: str) -> str:
        """Get a key the state cannot be valid without.

        @raises CorruptStateDataError: If the key is absent
        """

        if key not in self._data:
            raise CorruptStateDataError(key, job_id=self.job_id, state_name=self.state_name)
        return self._data[key]

    def optional(self, key: str) -> str | None:
        return self._data.get(key)

    def first_of(self, *keys: str) -> str:
        """Get the first present key, for values that moved between key names.

        @raises CorruptStateDataError: If none of the keys are present
        """

        for key in keys:
            if key in self._data:
                return self._data[key]
        raise CorruptStateDataError(" or ".join(keys), job_id=self.job_id, state_name=self.state_name)

    def _parse(self, key: str, value: str, parse: Callable[[str], T]) -> T:
        try:
            return parse(value)
        except ValueError as err:
            raise CorruptStateDataError(
                key, job_id=self.job_id, state_name=self.state_name, detail=str(err)
            ) from err

    def required_datetime(self, key: str) -> datetime:
        return self._parse(key, self.required(key), deserialise_datetime)

    def nullable_datetime(self, key: str) -> datetime | None:
        """Parse a key that must be present but may hold an empty value."""

        return self._parse(key, self.required(key), deserialise_nullable_datetime)

    def optional_datetime(self, key: str) -> datetime | None:
        value = self.optional(key)
        return self._parse(key, value, deserialise_nullable_datetime) if value is not None else None

    def optional_int(self, key: str) -> int | None:
        value = self.optional(key)
        return self._parse(key, value, int) if value is not None else None


def decode_state_data(text: str | None, job_id: int | None = None, state_name: str | None = None) -> StateData:
    """Decode a state row's JSON payload.

    @param text: The payload as stored; None or empty gives empty state data
    @param job_id: The job the state belongs to
    @param state_name: The state's name
    @raises CorruptStateDataError: If the payload is not a JSON object
    """

    try:
        data = state_data_from_json(text)
    except (TypeError, ValueError) as err:
        raise CorruptStateDataError(None, job_id=job_id, state_name=state_name, detail=str(err)) from err

    return StateData(data, job_id=job_id, state_name=state_name)
