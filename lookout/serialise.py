"""Decoding helpers for the text payloads stored alongside jobs."""

from collections.abc import Mapping
from datetime import UTC, datetime
import json
from typing import Any


def from_json(text: str | None) -> Any:
    """Decode a JSON payload, treating a missing payload as None."""

    if text is None or text == "":
        return None

    return json.loads(text)


def state_data_from_json(text: str | None) -> dict[str, str]:
    """Decode a state-data payload into a string to string mapping.

    @param text: The JSON text stored on a state row
    @return: The decoded mapping; empty if there was no payload
    """

    data = from_json(text)
    if data is None:
        return {}

    if not isinstance(data, Mapping):
        raise TypeError(f"State data is not a JSON object: {type(data)!r}")

    return {str(key): value if value is None else str(value) for key, value in data.items()}


def deserialise_datetime(value: str) -> datetime:
    """Parse a datetime written by the job pipeline.

    All-digit strings are unix timestamps in seconds; anything else is ISO-8601.
    Naive values are taken to be UTC.
    """

    stripped = value.strip()
    if stripped.lstrip("-").isdigit():
        return datetime.fromtimestamp(int(stripped), tz=UTC)

    parsed = datetime.fromisoformat(stripped)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def deserialise_nullable_datetime(value: str | None) -> datetime | None:
    if value is None or value == "":
        return None
    return deserialise_datetime(value)
