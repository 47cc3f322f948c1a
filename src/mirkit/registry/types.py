"""
Registry Type Definitions
Entries, adapters and resolution results.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Literal, Mapping

ComponentKind = Literal["html", "mdr", "custom"]


@dataclass(frozen=True)
class AdapterContext:
    """Resolved node fields handed to an adapter."""

    node_id: str
    props: dict[str, Any]
    style: dict[str, Any]
    text: Any = None


@dataclass
class AdapterResult:
    """
    Native interface produced by an adapter.

    ``children`` holds text content to render as the only child; ``None``
    means the implementation receives no text child.
    """

    props: dict[str, Any]
    children: Any = None


PropMapper = Callable[[AdapterContext], AdapterResult]


def _text_as_child(context: AdapterContext) -> AdapterResult:
    return AdapterResult(props=dict(context.props), children=context.text)


@dataclass(frozen=True)
class ComponentAdapter:
    """
    How generic node fields map onto an implementation.

    Attributes:
        name: Adapter identifier (shows up in logs and generated hints)
        kind: Implementation family
        supports_children: Whether child nodes are passed through
        is_void: Element takes neither children nor text
        map_props: Custom mapping; defaults to "text becomes the child"
        overrides: Props forced onto every instance
    """

    name: str
    kind: ComponentKind = "html"
    supports_children: bool = True
    is_void: bool = False
    map_props: PropMapper | None = None
    overrides: Mapping[str, Any] = field(default_factory=dict)

    def apply(self, context: AdapterContext) -> AdapterResult:
        """Run the mapping and force overrides."""
        result = (self.map_props or _text_as_child)(context)
        if self.is_void:
            result.children = None
        if self.overrides:
            result.props.update(self.overrides)
        return result

    def with_overrides(self, **overrides: Any) -> "ComponentAdapter":
        """Copy of this adapter with extra forced props."""
        return replace(self, overrides={**self.overrides, **overrides})


@dataclass(frozen=True)
class RegistryEntry:
    """Type key bound to an implementation handle and its adapter."""

    type: str
    implementation: Any
    adapter: ComponentAdapter
    external: bool = False


@dataclass(frozen=True)
class ResolvedComponent:
    """Result of resolving a node type; ``missing`` marks the sentinel."""

    type: str
    implementation: Any
    adapter: ComponentAdapter
    missing: bool = False
    external: bool = False
    native: bool = False
