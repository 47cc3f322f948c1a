"""Resolution registry: node type -> implementation + adapter."""

from .types import (
    AdapterContext,
    AdapterResult,
    ComponentAdapter,
    RegistryEntry,
    ResolvedComponent,
)
from .adapters import (
    ADAPTERS_BY_NAME,
    CUSTOM_ADAPTER,
    HTML_ADAPTER,
    MDR_ADAPTER,
    resolve_icon_props,
)
from .discovery import (
    ELEMENT_TYPE_MARKER,
    ForwardRef,
    forward_ref,
    get_value_by_path,
    is_component_like,
    scan_namespace,
)
from .element import Element
from .registry import ComponentRegistry

__all__ = [
    "AdapterContext",
    "AdapterResult",
    "ComponentAdapter",
    "RegistryEntry",
    "ResolvedComponent",
    "ADAPTERS_BY_NAME",
    "CUSTOM_ADAPTER",
    "HTML_ADAPTER",
    "MDR_ADAPTER",
    "resolve_icon_props",
    "ELEMENT_TYPE_MARKER",
    "ForwardRef",
    "forward_ref",
    "get_value_by_path",
    "is_component_like",
    "scan_namespace",
    "Element",
    "ComponentRegistry",
]
