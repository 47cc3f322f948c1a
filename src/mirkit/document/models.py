"""Document Data Models."""

from typing import Any, Literal
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ROOT_ID = "root"
DEFAULT_ROOT_TYPE = "container"

ValueType = Literal["string", "number", "boolean", "object", "array"]
ResourceKind = Literal["file", "url", "inline"]
StateKind = Literal["local", "global", "derived"]


class DocumentModel(BaseModel):
    """Base model: wire names are aliases, python names are used in code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict[str, Any]:
        """Export in interchange form."""
        return self.model_dump(by_alias=True, exclude_none=True)


class EventBinding(DocumentModel):
    """Event name -> binding target."""

    target: str = Field(..., min_length=1)
    payload: dict[str, Any] | None = None
    debounce: int | None = Field(default=None, ge=0)
    prevent_default: bool | None = Field(default=None, alias="preventDefault")


class DataBinding(DocumentModel):
    """Links a node to external state."""

    path: str
    value_type: ValueType = Field(..., alias="type")


class Resource(DocumentModel):
    """Named asset attached to a node."""

    kind: ResourceKind = Field(..., alias="type")
    value: str
    mime_type: str | None = Field(default=None, alias="mimeType")


class ComponentNode(DocumentModel):
    """One element of the document tree."""

    id: str
    type: str
    text: str | dict[str, Any] | None = None
    props: dict[str, Any] = Field(default_factory=dict)
    style: dict[str, Any] = Field(default_factory=dict)
    children: list["ComponentNode"] | None = None
    events: dict[str, EventBinding] = Field(default_factory=dict)
    binding: DataBinding | None = None
    resources: dict[str, Resource] = Field(default_factory=dict)
    comment: str | None = Field(default=None, alias="_comment")

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children or []:
            yield from child.walk()


class StateDef(DocumentModel):
    """Named state definition."""

    kind: StateKind = Field(default="local", alias="type")
    initial: Any = None
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")


class PropDef(DocumentModel):
    """Declared external parameter of the document component."""

    type: str = "any"
    default: Any = None


class Logic(DocumentModel):
    """Optional logic metadata; graphs are carried as authored."""

    state: dict[str, StateDef] = Field(default_factory=dict)
    props: dict[str, PropDef] = Field(default_factory=dict)
    graphs: dict[str, Any] = Field(default_factory=dict)


class Metadata(DocumentModel):
    """Descriptive document metadata."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)


class UI(DocumentModel):
    """UI section holding the single tree root."""

    root: ComponentNode


class MIRDocument(DocumentModel):
    """Complete declarative UI document."""

    version: str
    metadata: Metadata | None = None
    ui: UI
    logic: Logic | None = None

    def node_ids(self) -> list[str]:
        """All node ids in tree order."""
        return [node.id for node in self.ui.root.walk()]

    def find(self, node_id: str) -> ComponentNode | None:
        """Find node by id."""
        for node in self.ui.root.walk():
            if node.id == node_id:
                return node
        return None


ComponentNode.model_rebuild()
