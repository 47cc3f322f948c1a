"""Export scanning: which paths of a loaded library namespace are components."""

from typing import Any, Iterable

from ..registry import get_value_by_path, is_component_like
from ..registry.discovery import namespace_items


def _is_pascal(name: str) -> bool:
    return bool(name) and name[0].isupper()


def _own_members(value: Any) -> dict[str, Any]:
    """Static members attached to a component (``Layout.Header``)."""
    try:
        members = vars(value)
    except TypeError:
        return {}
    return {k: v for k, v in members.items() if isinstance(k, str)}


def scan_module_paths(
    namespace: Any,
    include_paths: Iterable[str] = (),
    exclude_exports: Iterable[str] = (),
    discover: bool = True,
) -> list[str]:
    """
    Collect component paths from a loaded namespace.

    Args:
        namespace: Loaded library exports
        include_paths: Paths always considered (``"Form.Item"`` style)
        exclude_exports: Export names never treated as components
        discover: Also scan every PascalCase export and its static members

    Returns:
        Paths whose value is component-like, include paths first
    """
    excluded = set(exclude_exports)
    discovered: dict[str, None] = {}
    for path in include_paths:
        path = path.strip()
        if path:
            discovered[path] = None

    if discover:
        for name, value in namespace_items(namespace).items():
            if name in excluded or not _is_pascal(name) or not is_component_like(value):
                continue
            discovered[name] = None
            for sub_name, sub_value in _own_members(value).items():
                if not _is_pascal(sub_name) or sub_name in excluded:
                    continue
                if is_component_like(sub_value):
                    discovered[f"{name}.{sub_name}"] = None

    return [path for path in discovered if is_component_like(get_value_by_path(namespace, path))]
