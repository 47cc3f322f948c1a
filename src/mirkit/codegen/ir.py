"""
Intermediate Representation
Framework-neutral lowered component tree handed to backends.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

NodeKind = Literal["container", "component", "native", "missing"]
ExpressionKind = Literal["literal", "state", "param"]
ImportKind = Literal["named", "default", "namespace"]
HandlerKind = Literal["param", "builtin"]

STATE_ACCESSOR = "state"
PARAMS_ACCESSOR = "props"


@dataclass(frozen=True)
class BoundExpression:
    """
    Source expression for one value.

    ``literal`` code is a quoted/serialized literal and ``value`` the raw
    value; ``state`` and ``param`` code is a read access against the state
    or props accessor.
    """

    code: str
    kind: ExpressionKind = "literal"
    path: str | None = None
    value: Any = None


@dataclass(frozen=True)
class IRHandler:
    """Event handler reference."""

    trigger: str
    action: str
    kind: HandlerKind
    params: dict[str, Any] = field(default_factory=dict)
    code: str | None = None


@dataclass(frozen=True)
class IRImport:
    source: str
    imported: str
    kind: ImportKind = "named"
    local: str | None = None
    version: str | None = None

    @property
    def binding(self) -> str:
        return self.local or self.imported


@dataclass
class IRNode:
    id: str
    type: str
    kind: NodeKind
    element: str | None
    props: dict[str, BoundExpression] = field(default_factory=dict)
    style: dict[str, Any] = field(default_factory=dict)
    events: dict[str, IRHandler] = field(default_factory=dict)
    text: BoundExpression | None = None
    children: list["IRNode"] = field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class IRStateVar:
    name: str
    initial: str


@dataclass(frozen=True)
class IRParam:
    name: str
    type: str = "any"
    default: str | None = None
    is_function: bool = False


@dataclass
class IRDocument:
    """Lowered document: root tree plus document-level metadata."""

    name: str
    root: IRNode
    state: list[IRStateVar] = field(default_factory=list)
    params: list[IRParam] = field(default_factory=list)
    imports: list[IRImport] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
