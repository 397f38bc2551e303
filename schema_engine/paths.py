"""
Path Resolver - dot-path get/set over nested untyped data.

Used by the Binding Processor to write form values into the derived process
schema (e.g. 'instanceData.fieldValues.maxVotesPerMember').
"""

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, Optional


def _is_indexable(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def get_value_by_path(obj: Any, path: str) -> Optional[Any]:
    """
    Read a value using dot-notation.

    Mappings are traversed by key; lists and tuples by digit segments
    ('items.0.id'). Returns None as soon as an intermediate value cannot be
    traversed or a segment is missing. Never raises.
    """
    if not isinstance(obj, Mapping):
        return None

    current = obj
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part)
        elif _is_indexable(current) and part.isdecimal() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None

    return current


def set_value_by_path(obj: MutableMapping, path: str, value: Any) -> None:
    """
    Write a value using dot-notation, mutating obj in place.

    Missing intermediate segments are created as empty dicts.

    Raises:
        TypeError: if an existing intermediate segment is not a mapping
    """
    parts = path.split(".")
    current = obj

    for part in parts[:-1]:
        if part not in current:
            current[part] = {}
        current = current[part]
        if not isinstance(current, MutableMapping):
            raise TypeError(
                f"Cannot set '{path}': segment '{part}' holds {type(current).__name__}, not a mapping"
            )

    current[parts[-1]] = value
