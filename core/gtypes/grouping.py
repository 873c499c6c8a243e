# -*- coding: utf-8 -*-
"""Partition a category's records into named groups."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from core.gtypes.errors import InferenceError

# (member key, record); the key is what the group's key union enumerates.
Entry = Tuple[Union[str, int], Dict[str, Any]]
Grouped = Dict[str, List[Entry]]


def normalize_entries(raw: Any, *, category: str, id_key: str = "id") -> List[Entry]:
    """Normalize a raw category into ordered `(key, record)` entries.

    A mapping is read as `{key: record}`. A sequence is read as records whose
    identifier lives at `id_key`.
    """
    out: List[Entry] = []
    if isinstance(raw, Mapping):
        for key, record in raw.items():
            if not isinstance(record, dict):
                raise InferenceError("record is not an object", category=category, field=str(key))
            out.append((str(key), record))
        return out

    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        for idx, record in enumerate(raw):
            if not isinstance(record, dict):
                raise InferenceError(f"record #{idx} is not an object", category=category)
            key = record.get(id_key)
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise InferenceError(
                    f"record #{idx} has no usable identifier",
                    category=category,
                    field=id_key,
                )
            out.append((key, record))
        return out

    raise InferenceError(f"unsupported category value ({type(raw).__name__})", category=category)


def group_name_of(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def group_records(entries: Sequence[Entry], group_key: Optional[str], *, category: str) -> Grouped:
    """Split entries by the value at `group_key`.

    Without a group key the whole category is one group named after it. A
    record lacking the group field (or holding null/an object there) aborts:
    dropping it would silently shrink the key unions.
    """
    if not group_key:
        return {category: list(entries)}

    grouped: Grouped = {}
    for key, record in entries:
        if group_key not in record or record[group_key] is None:
            raise InferenceError(
                f"record '{key}' has no value for the grouping field",
                category=category,
                field=group_key,
            )
        value = record[group_key]
        if isinstance(value, (dict, list)):
            raise InferenceError(
                f"record '{key}' has a non-scalar grouping value",
                category=category,
                field=group_key,
            )
        grouped.setdefault(group_name_of(value), []).append((key, record))
    return grouped
