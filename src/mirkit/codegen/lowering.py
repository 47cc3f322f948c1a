"""
Document Lowering
ComponentNode tree -> framework-neutral IR.

Literal values become quoted literals so content is never read as an
identifier; ``$state`` and ``$param`` references become read accesses
against the state and props accessors. Anything that cannot be expressed
raises LoweringError naming the node.
"""

import re
from typing import Any

from ..core import get_logger, safe_json_dumps, quote_literal
from ..core.config import DependencyStrategy
from ..document import ComponentNode, MIRDocument
from ..document.refs import is_data_ref, is_index_ref, is_item_ref, is_param_ref, is_state_ref, path_head
from ..external.profiles import GroupedLibraryProfile, ProfileRegistry
from ..registry import ComponentRegistry
from ..registry.builtins import HEADLESS_COMPONENTS
from .errors import LoweringError
from .ir import (
    PARAMS_ACCESSOR,
    STATE_ACCESSOR,
    BoundExpression,
    IRDocument,
    IRHandler,
    IRImport,
    IRNode,
    IRParam,
    IRStateVar,
)
from .packages import DEFAULT_CDN_BASE_URL, resolve_import

logger = get_logger(__name__)

DEFAULT_COMPONENT_NAME = "MdrComponent"
CONTAINER_TYPE = "container"
CONTAINER_ELEMENT = "div"
KIT_PACKAGE = "@mdr/ui"
BUILTIN_ACTIONS = frozenset({"navigate", "executeGraph"})

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_ACCESS_SEGMENT = re.compile(r"\.([A-Za-z_$][\w$]*)|\[(\d+)\]")


def to_identifier(value: str) -> str:
    """Coerce a name into a JS identifier."""
    normalized = re.sub(r"[^A-Za-z0-9_$]", "_", value)
    return normalized if re.match(r"^[A-Za-z_$]", normalized) else f"_{normalized}"


def to_component_name(value: str | None) -> str:
    if not value:
        return DEFAULT_COMPONENT_NAME
    words = [w for w in re.split(r"[^A-Za-z0-9]+", value) if w]
    name = "".join(w[:1].upper() + w[1:] for w in words)
    if not name or not _IDENTIFIER.match(name):
        return DEFAULT_COMPONENT_NAME
    return name


def literal_code(value: Any) -> str:
    """Serialized literal; strings are always quoted."""
    if isinstance(value, str):
        return quote_literal(value)
    return safe_json_dumps(value)


def is_function_type(type_name: str) -> bool:
    return "=>" in type_name or "function" in type_name.lower()


class ComponentImports:
    """
    Element names and imports for library component types.

    Library types come from grouped profiles (``AntdFormItem`` -> ``Form.Item``
    imported as ``Form`` from ``antd``); ``Mdr*`` types come from the UI kit
    package; ``RadixLabel`` from its headless package.
    """

    def __init__(self, profiles: ProfileRegistry | None = None) -> None:
        self._profiles: list[GroupedLibraryProfile] = []
        self._by_type: dict[str, tuple[str, IRImport]] = {}
        for library_id in profiles.library_ids() if profiles is not None else []:
            profile = profiles.get(library_id)
            if not isinstance(profile, GroupedLibraryProfile):
                continue
            self._profiles.append(profile)
            for path in profile.include_paths:
                self._by_type[profile.runtime_type(path)] = self._binding(profile, path)

    @staticmethod
    def _binding(profile: GroupedLibraryProfile, path: str) -> tuple[str, IRImport]:
        head = path.split(".")[0]
        if profile.import_style == "default":
            spec = IRImport(f"{profile.package_name}/{head}", head, "default", version=profile.version)
        else:
            spec = IRImport(profile.package_name, head, "named", version=profile.version)
        return path, spec

    def lookup(self, type_name: str) -> tuple[str, IRImport] | None:
        hit = self._by_type.get(type_name)
        if hit is not None:
            return hit
        for profile in self._profiles:
            prefix = profile.runtime_prefix
            if prefix and type_name.startswith(prefix) and len(type_name) > len(prefix):
                return self._binding(profile, type_name[len(prefix):])
        if type_name.startswith("Mdr"):
            return type_name, IRImport(KIT_PACKAGE, type_name, "named")
        if type_name == "RadixLabel":
            return "Label.Root", IRImport("@radix-ui/react-label", "Label", "namespace")
        return None


class DocumentLowering:
    """
    Lowers one document.

    Instances are single use: create one per generation request.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        imports: ComponentImports | None = None,
        strategy: DependencyStrategy = "workspace",
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
    ) -> None:
        self.registry = registry
        self.imports = imports or ComponentImports()
        self.strategy = strategy
        self.cdn_base_url = cdn_base_url
        self._state_names: set[str] = set()
        self._param_names: set[str] = set()
        self._function_params: set[str] = set()
        self._collected: dict[tuple, IRImport] = {}

    def lower(self, document: MIRDocument, component_name: str | None = None) -> IRDocument:
        logic = document.logic
        state = [
            IRStateVar(name=to_identifier(name), initial=self._literal(definition.initial, "root", f"state '{name}'"))
            for name, definition in (logic.state.items() if logic else [])
        ]
        params = []
        for name, definition in logic.props.items() if logic else []:
            default = None
            if definition.default is not None:
                default = self._literal(definition.default, "root", f"param '{name}'")
            params.append(
                IRParam(
                    name=to_identifier(name),
                    type=definition.type or "any",
                    default=default,
                    is_function=is_function_type(definition.type or ""),
                )
            )
            if is_function_type(definition.type or ""):
                self._function_params.add(name)

        self._state_names = set(logic.state) if logic else set()
        self._param_names = set(logic.props) if logic else set()

        root = self._lower_node(document.ui.root)
        imports, dependencies = self._resolve_imports()
        name = component_name or (document.metadata.name if document.metadata else None)
        return IRDocument(
            name=to_component_name(name),
            root=root,
            state=state,
            params=params,
            imports=imports,
            dependencies=dependencies,
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _lower_node(self, node: ComponentNode) -> IRNode:
        kind, element = self._element_for(node)
        lowered = IRNode(
            id=node.id,
            type=node.type,
            kind=kind,
            element=element,
            props={
                key: self._lower_value(value, node.id, f"prop '{key}'")
                for key, value in node.props.items()
                if value is not None
            },
            style=dict(node.style),
            events={name: self._lower_event(node.id, name, binding.target, binding.payload) for name, binding in node.events.items()},
            text=self._lower_value(node.text, node.id, "text") if node.text is not None else None,
        )
        lowered.children = [self._lower_node(child) for child in node.children or []]
        return lowered

    def _element_for(self, node: ComponentNode) -> tuple[str, str | None]:
        if node.type == CONTAINER_TYPE:
            return "container", CONTAINER_ELEMENT

        resolved = self.registry.resolve(node.type)
        if resolved.missing:
            logger.warning("lowering_missing_type", node_id=node.id, type=node.type)
            return "missing", None
        if resolved.native:
            return "native", node.type

        mapped = self.imports.lookup(node.type)
        if mapped is not None:
            element, spec = mapped
            self._collected.setdefault((spec.kind, spec.source, spec.imported, spec.local), spec)
            return "component", element

        if isinstance(resolved.implementation, str):
            return "native", resolved.implementation
        if node.type in HEADLESS_COMPONENTS:
            return "native", HEADLESS_COMPONENTS[node.type][0]

        raise LoweringError(node.id, f"type '{node.type}' has no importable implementation")

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def _lower_value(self, value: Any, node_id: str, where: str) -> BoundExpression:
        if is_state_ref(value):
            return self._access(STATE_ACCESSOR, value["$state"], self._state_names, node_id, where, "state")
        if is_param_ref(value):
            return self._access(PARAMS_ACCESSOR, value["$param"], self._param_names, node_id, where, "param")
        if is_data_ref(value) or is_item_ref(value) or is_index_ref(value):
            raise LoweringError(node_id, f"{where} uses a data-scope reference, which has no generated equivalent")
        return BoundExpression(code=self._literal(value, node_id, where), value=value)

    def _access(
        self,
        accessor: str,
        path: str,
        declared: set[str],
        node_id: str,
        where: str,
        kind: str,
    ) -> BoundExpression:
        path = path.strip()
        head = path_head(path)
        if not head or head not in declared:
            raise LoweringError(node_id, f"{where} references undeclared {kind} '{head or path}'")
        if not path.startswith(head):
            raise LoweringError(node_id, f"{where} has an invalid {kind} path '{path}'")
        code = f"{accessor}.{to_identifier(head)}"
        position = len(head)
        while position < len(path):
            segment = _ACCESS_SEGMENT.match(path, position)
            if segment is None:
                raise LoweringError(node_id, f"{where} has an invalid {kind} path '{path}'")
            member, index = segment.groups()
            code += f".{member}" if member else f"[{index}]"
            position = segment.end()
        return BoundExpression(code=code, kind=kind, path=path)

    def _literal(self, value: Any, node_id: str, where: str) -> str:
        try:
            return literal_code(value)
        except (TypeError, ValueError) as e:
            raise LoweringError(node_id, f"{where} is not serializable: {e}") from e

    def _lower_event(self, node_id: str, trigger: str, action: str, payload: dict[str, Any] | None) -> IRHandler:
        if action in self._function_params:
            return IRHandler(
                trigger=trigger,
                action=action,
                kind="param",
                code=f"{PARAMS_ACCESSOR}.{to_identifier(action)}",
            )
        if action in BUILTIN_ACTIONS:
            return IRHandler(trigger=trigger, action=action, kind="builtin", params=dict(payload or {}))
        raise LoweringError(node_id, f"event '{trigger}' targets unknown action '{action}'")

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    def _resolve_imports(self) -> tuple[list[IRImport], dict[str, str]]:
        imports = []
        dependencies: dict[str, str] = {}
        for spec in self._collected.values():
            resolution = resolve_import(spec.source, self.strategy, spec.version, self.cdn_base_url)
            imports.append(
                IRImport(
                    source=resolution.import_source,
                    imported=spec.imported,
                    kind=spec.kind,
                    local=spec.local,
                    version=resolution.version,
                )
            )
            if resolution.declare_dependency and resolution.package_name:
                dependencies[resolution.package_name] = resolution.version or "latest"
        return imports, dependencies


def lower_document(
    document: MIRDocument,
    registry: ComponentRegistry,
    imports: ComponentImports | None = None,
    strategy: DependencyStrategy = "workspace",
    cdn_base_url: str = DEFAULT_CDN_BASE_URL,
    component_name: str | None = None,
) -> IRDocument:
    """Lower a document; raises LoweringError naming the first offending node."""
    return DocumentLowering(registry, imports, strategy, cdn_base_url).lower(document, component_name)
