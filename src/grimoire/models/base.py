"""Shared pydantic base and helpers for the data model.

Case content and save files are authored with camelCase keys. Models accept
either spelling and dump camelCase with ``by_alias=True``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value to the specified range."""
    return max(min_val, min(max_val, value))


def clamp_int(value: float, min_val: int, max_val: int) -> int:
    """Clamp a value to an integer range.

    Raises:
        ValueError: value is not a number. Inside a field validator pydantic
            reports this as a ValidationError.
    """
    if isinstance(value, bool):
        raise ValueError("expected a number, got bool")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"expected a number, got {value!r}") from e
    return int(clamp(number, min_val, max_val))


class CamelModel(BaseModel):
    """Base model mapping snake_case fields to camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
