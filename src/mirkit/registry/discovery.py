"""
Component Discovery
Capability predicate and namespace scanning for component-shaped exports.
"""

from types import ModuleType
from typing import Any, Callable, Iterable, Mapping

from .element import Element

ELEMENT_TYPE_MARKER = "__element_type__"
"""Attribute (or mapping key) tagging an opaque handle as a renderable type."""

FORWARD_REF_TYPE = "forward_ref"


class ForwardRef:
    """
    Wrapped implementation that is not itself callable.

    Carries the element-type marker so discovery accepts it; the renderer
    calls ``render`` instead of the object.
    """

    __element_type__ = FORWARD_REF_TYPE

    def __init__(self, render: Callable[[dict[str, Any], list[Any]], Element], display_name: str) -> None:
        self.render = render
        self.display_name = display_name

    def __repr__(self) -> str:
        return f"ForwardRef({self.display_name})"


def forward_ref(display_name: str):
    """Decorator turning a render function into a marker-bearing handle."""

    def wrap(render: Callable[[dict[str, Any], list[Any]], Element]) -> ForwardRef:
        return ForwardRef(render, display_name)

    return wrap


def has_element_marker(value: Any) -> bool:
    if isinstance(value, Mapping):
        return value.get(ELEMENT_TYPE_MARKER) is not None
    return getattr(value, ELEMENT_TYPE_MARKER, None) is not None


def is_component_like(value: Any) -> bool:
    """
    True if value can be registered as an implementation.

    Callables qualify; so do opaque objects carrying the element-type marker.
    Plain data (token tables, constants) never qualifies.
    """
    if value is None or isinstance(value, (str, bytes, int, float, bool, ModuleType)):
        return False
    return callable(value) or has_element_marker(value)


def namespace_items(namespace: Any) -> dict[str, Any]:
    """Public exports of a module or mapping, in definition order."""
    if isinstance(namespace, ModuleType):
        exported = getattr(namespace, "__all__", None)
        source = vars(namespace)
        if exported is not None:
            return {name: source[name] for name in exported if name in source}
        return {name: value for name, value in source.items() if not name.startswith("_")}
    if isinstance(namespace, Mapping):
        return {name: value for name, value in namespace.items() if isinstance(name, str)}
    return {name: getattr(namespace, name) for name in dir(namespace) if not name.startswith("_")}


def get_value_by_path(namespace: Any, path: str) -> Any:
    """Resolve ``Parent.Child`` against a namespace (mapping keys or attributes)."""
    cursor = namespace
    for segment in path.split("."):
        if not segment:
            return None
        if isinstance(cursor, Mapping):
            cursor = cursor.get(segment)
        elif isinstance(cursor, ModuleType):
            cursor = vars(cursor).get(segment)
        else:
            cursor = getattr(cursor, segment, None)
        if cursor is None:
            return None
    return cursor


def scan_namespace(
    namespace: Any,
    prefix: str = "",
    exclude: Iterable[str] = (),
) -> dict[str, Any]:
    """
    Collect component-like exports.

    Args:
        namespace: Module, mapping or object
        prefix: Only names starting with this prefix are considered
        exclude: Export names to skip

    Returns:
        Export name -> implementation, in namespace order
    """
    excluded = set(exclude)
    return {
        name: value
        for name, value in namespace_items(namespace).items()
        if name.startswith(prefix) and name not in excluded and is_component_like(value)
    }
