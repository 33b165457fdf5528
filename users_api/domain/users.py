"""Domain helpers for user ids (parsing, matching, allocation)."""
from __future__ import annotations

from typing import Any, Iterable, Mapping


def parse_user_id(value: Any) -> int | None:
    """
    Coerce a path parameter or stored value into an integer id.

    Accepts ints and integral strings ("5", " 05 "); bools, floats with a
    fractional part and anything else return None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def record_id(record: Any) -> int | None:
    """Return the integer id stored in a record, if it has a usable one."""
    if not isinstance(record, Mapping):
        return None
    return parse_user_id(record.get("id"))


def matches(record: Any, user_id: int) -> bool:
    return record_id(record) == user_id


def next_user_id(users: Iterable[Any]) -> int:
    """max(existing ids) + 1; records without an integer id are ignored, empty -> 1."""
    ids = [rid for rid in (record_id(user) for user in users) if rid is not None]
    return max(ids) + 1 if ids else 1
