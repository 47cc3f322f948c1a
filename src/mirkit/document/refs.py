"""Symbolic value references.

A reference is a single-key mapping: ``{"$state": "user.name"}``,
``{"$param": "title"}``, ``{"$data": "rows[0]"}``, ``{"$item": "label"}`` or
``{"$index": true}``. Anything else is a literal.
"""

import re
from dataclasses import dataclass, field
from typing import Any

REF_KEYS = ("$state", "$param", "$data", "$item", "$index")
MAX_RESOLVE_DEPTH = 12

_PATH_SEGMENT = re.compile(r"[^.\[\]]+|\[(\d+)\]")


def _single_key(value: Any, key: str) -> bool:
    return isinstance(value, dict) and len(value) == 1 and key in value


def is_state_ref(value: Any) -> bool:
    return _single_key(value, "$state") and isinstance(value["$state"], str)


def is_param_ref(value: Any) -> bool:
    return _single_key(value, "$param") and isinstance(value["$param"], str)


def is_data_ref(value: Any) -> bool:
    return _single_key(value, "$data") and isinstance(value["$data"], str)


def is_item_ref(value: Any) -> bool:
    return _single_key(value, "$item") and isinstance(value["$item"], str)


def is_index_ref(value: Any) -> bool:
    return _single_key(value, "$index") and value["$index"] is True


def is_value_ref(value: Any) -> bool:
    """True for any of the five reference shapes."""
    return (
        is_state_ref(value)
        or is_param_ref(value)
        or is_data_ref(value)
        or is_item_ref(value)
        or is_index_ref(value)
    )


def ref_kind(value: Any) -> str | None:
    """Reference kind without the ``$`` (``"state"``, ``"param"``, ...)."""
    if not is_value_ref(value):
        return None
    return next(iter(value))[1:]


def path_head(path: str) -> str:
    """First segment of a path: ``"user.name"`` -> ``"user"``."""
    match = _PATH_SEGMENT.search(path.strip())
    if match is None:
        return ""
    return match.group(1) or match.group(0)


def read_value_by_path(source: Any, path: str) -> Any:
    """
    Read ``a.b[0].c`` style paths from nested mappings/lists.

    Returns None when any segment is missing.
    """
    trimmed = path.strip()
    if not trimmed:
        return source
    cursor = source
    for match in _PATH_SEGMENT.finditer(trimmed):
        token = match.group(1) or match.group(0)
        if cursor is None:
            return None
        if isinstance(cursor, list):
            if not token.isdigit():
                return None
            index = int(token)
            cursor = cursor[index] if index < len(cursor) else None
            continue
        if not isinstance(cursor, dict):
            return None
        cursor = cursor.get(token)
    return cursor


@dataclass
class RefContext:
    """Values references resolve against during live rendering."""

    params: dict[str, Any] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    data: Any = None
    item: Any = None
    index: int | None = None


def resolve_value(value: Any, context: RefContext) -> Any:
    """Resolve one level of reference; literals pass through."""
    if is_param_ref(value):
        return read_value_by_path(context.params, value["$param"])
    if is_state_ref(value):
        return read_value_by_path(context.state, value["$state"])
    if is_data_ref(value):
        return read_value_by_path(context.data, value["$data"])
    if is_item_ref(value):
        return read_value_by_path(context.item, value["$item"])
    if is_index_ref(value):
        return context.index
    return value


def deep_resolve_value(value: Any, context: RefContext, depth: int = 0) -> Any:
    """Resolve references inside nested literals, up to MAX_RESOLVE_DEPTH."""
    if depth > MAX_RESOLVE_DEPTH:
        return value
    resolved = resolve_value(value, context)
    if isinstance(resolved, list):
        return [deep_resolve_value(entry, context, depth + 1) for entry in resolved]
    if isinstance(resolved, dict) and not is_value_ref(resolved):
        return {key: deep_resolve_value(entry, context, depth + 1) for key, entry in resolved.items()}
    return resolved
