"""Host element tree produced by component implementations."""

from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class Element:
    """One rendered element: a host tag with props and children."""

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list["Element | str"] = field(default_factory=list)
    node_id: str | None = None

    def walk(self) -> Iterator["Element"]:
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.walk()

    def find(self, node_id: str) -> "Element | None":
        """First element rendered for the given document node."""
        for element in self.walk():
            if element.node_id == node_id:
                return element
        return None

    def text_content(self) -> str:
        """Concatenated text of this subtree."""
        parts = []
        for child in self.children:
            parts.append(child.text_content() if isinstance(child, Element) else str(child))
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "props": self.props,
            "children": [c.to_dict() if isinstance(c, Element) else c for c in self.children],
            "nodeId": self.node_id,
        }
