"""Serialization boundary between read models and cache values.

Read models are frozen dataclasses (or lists/ints of them for aggregates).
pydantic TypeAdapters turn them into JSON-compatible data and back; the
round trip is exact for datetimes, dates, enums and nested JSON fields.
"""

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=None)
def _adapter(value_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(value_type)


def encode_value(value: Any, value_type: Any) -> Any:
    """Return JSON-compatible data for value (datetimes as ISO strings, enums as values)."""
    return _adapter(value_type).dump_python(value, mode="json")


def decode_value(data: Any, value_type: Any) -> Any:
    """Validate cached data (or a plain mapping) back into value_type.

    Raises:
        pydantic.ValidationError: If data does not match value_type.
    """
    return _adapter(value_type).validate_python(data)
