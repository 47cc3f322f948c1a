"""
Live Renderer
Walks a document through the registry and builds a preview element tree.
"""

from typing import Any

from ..core import get_logger
from ..document import ComponentNode, MIRDocument, RefContext, deep_resolve_value
from ..registry import AdapterContext, ComponentRegistry, Element, ResolvedComponent
from ..registry.discovery import has_element_marker

logger = get_logger(__name__)

MISSING_MARKER = "data-mir-missing"
FALLBACK_MARKER = "data-mir-fallback"


class RenderError(Exception):
    """An implementation returned something that is not an element."""

    pass


def _as_children(value: Any) -> list[Element | str]:
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    return [item if isinstance(item, Element) else str(item) for item in items if item is not None]


def invoke(implementation: Any, props: dict[str, Any], children: list[Any]) -> Element:
    """
    Call an implementation handle.

    Strings are host tags, marker-bearing handles render through ``render``,
    other callables are called directly.
    """
    if isinstance(implementation, str):
        return Element(tag=implementation, props=props, children=children)
    if has_element_marker(implementation) and callable(getattr(implementation, "render", None)):
        result = implementation.render(props, children)
    elif callable(implementation):
        result = implementation(props, children)
    else:
        raise RenderError(f"{implementation!r} is not renderable")
    if not isinstance(result, Element):
        raise RenderError(f"{implementation!r} returned {type(result).__name__}, expected Element")
    return result


class LiveRenderer:
    """
    Preview renderer sharing the registry with the code generator.

    Unknown types render a marked placeholder; failures of externally
    loaded implementations render a marked fallback instead of propagating.
    """

    def __init__(self, registry: ComponentRegistry) -> None:
        self.registry = registry

    def render(
        self,
        document: MIRDocument,
        state: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        data: Any = None,
    ) -> Element:
        """
        Render the document root.

        Args:
            document: Normalized document
            state: State values overriding declared initial values
            params: Parameter values overriding declared defaults
            data: Data-scope value for ``$data`` references
        """
        logic = document.logic
        context = RefContext(
            params={
                **({name: prop.default for name, prop in logic.props.items()} if logic else {}),
                **(params or {}),
            },
            state={
                **({name: definition.initial for name, definition in logic.state.items()} if logic else {}),
                **(state or {}),
            },
            data=data,
        )
        return self._render_node(document.ui.root, context)

    def _render_node(self, node: ComponentNode, context: RefContext) -> Element:
        resolved = self.registry.resolve(node.type)
        rendered_children = [self._render_node(child, context) for child in node.children or []]

        if resolved.missing:
            return Element(
                tag="div",
                props={MISSING_MARKER: node.type},
                children=rendered_children,
                node_id=node.id,
            )

        props = {key: deep_resolve_value(value, context) for key, value in node.props.items()}
        style = {key: deep_resolve_value(value, context) for key, value in node.style.items()}
        text = deep_resolve_value(node.text, context) if node.text is not None else None
        if text is not None and not isinstance(text, (str, Element)):
            text = str(text)

        result = resolved.adapter.apply(AdapterContext(node_id=node.id, props=props, style=style, text=text))
        element_props = dict(result.props)
        if style:
            element_props["style"] = style

        children = _as_children(result.children)
        if resolved.adapter.supports_children and not resolved.adapter.is_void:
            children.extend(rendered_children)
        elif rendered_children:
            logger.debug("children_dropped", node_id=node.id, type=node.type, count=len(rendered_children))

        element = self._invoke(resolved, node, element_props, children)
        if element.node_id is None:
            element.node_id = node.id
        return element

    def _invoke(
        self,
        resolved: ResolvedComponent,
        node: ComponentNode,
        props: dict[str, Any],
        children: list[Any],
    ) -> Element:
        if not resolved.external:
            return invoke(resolved.implementation, props, children)
        try:
            return invoke(resolved.implementation, props, children)
        except Exception as e:
            logger.warning("external_render_failed", node_id=node.id, type=node.type, error=str(e))
            return Element(
                tag="div",
                props={FALLBACK_MARKER: node.type, "data-error": str(e)},
                node_id=node.id,
            )
