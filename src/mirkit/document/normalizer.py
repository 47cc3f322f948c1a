"""Document Normalizer - arbitrary input to a valid MIRDocument, never raising."""

from typing import Any

from pydantic import ValidationError as ModelValidationError

from ..core import get_logger, extract_json, JSONParseError, ValidationError
from ..core.validate import validate_json_size
from .models import (
    DEFAULT_ROOT_ID,
    DEFAULT_ROOT_TYPE,
    ComponentNode,
    DataBinding,
    EventBinding,
    Logic,
    Metadata,
    MIRDocument,
    PropDef,
    Resource,
    StateDef,
    UI,
)
from .refs import is_value_ref

logger = get_logger(__name__)

CURRENT_SCHEMA_VERSION = "1.0"
MAX_TREE_DEPTH = 256

PAGE_DOCUMENT_TYPE = "mir-page"
ROOT_PAGE_PATHS = ("/", "")

_VALUE_TYPES = {"string", "number", "boolean", "object", "array"}
_RESOURCE_KINDS = {"file", "url", "inline"}
_STATE_KINDS = {"local", "global", "derived"}


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _string_keyed(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(k, str)}


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


class DocumentNormalizer:
    """
    Normalizes documents to the current schema.

    Normalization doubles as migration: the output version is always the
    normalizer's schema version, whatever the input declared.
    """

    def __init__(self, schema_version: str = CURRENT_SCHEMA_VERSION) -> None:
        self.schema_version = schema_version

    def default_document(self) -> MIRDocument:
        """Minimal valid document: a single empty container."""
        return MIRDocument(
            version=self.schema_version,
            ui=UI(root=ComponentNode(id=DEFAULT_ROOT_ID, type=DEFAULT_ROOT_TYPE)),
        )

    def has_direct_shape(self, source: Any) -> bool:
        """True if source is an object whose ui.root is an object."""
        if isinstance(source, MIRDocument):
            return True
        return _is_object(source) and _is_object(source.get("ui")) and _is_object(source["ui"].get("root"))

    def normalize(self, source: Any) -> MIRDocument:
        """
        Normalize a single document.

        Args:
            source: Any structured value

        Returns:
            A document satisfying the tree invariants
        """
        if isinstance(source, MIRDocument):
            source = source.to_dict()

        if not self.has_direct_shape(source):
            logger.debug("normalize_default", reason="missing_ui_root")
            return self.default_document()

        try:
            root = self._normalize_node(source["ui"]["root"], depth=0, is_root=True)
            if root is None:
                return self.default_document()
            return MIRDocument(
                version=self.schema_version,
                metadata=self._normalize_metadata(source.get("metadata")),
                ui=UI(root=root),
                logic=self._normalize_logic(source.get("logic")),
            )
        except (ModelValidationError, RecursionError, TypeError, ValueError) as e:
            logger.warning("normalize_default", reason="invalid_document", error=str(e))
            return self.default_document()

    def resolve_from_container(self, source: Any) -> MIRDocument:
        """
        Pick the canonical document out of a workspace bundle and normalize it.

        Preference: root page (path "/" or empty), then first page, then first
        document. Anything unusable yields the default document.
        """
        documents = self._container_documents(source)
        if not documents:
            return self.default_document()
        chosen = self.pick_canonical(documents)
        return self.normalize(chosen.get("content"))

    def resolve(self, source: Any) -> MIRDocument:
        """Direct shape first, then container shape, then the default."""
        if self.has_direct_shape(source):
            return self.normalize(source)
        if self._container_documents(source):
            return self.resolve_from_container(source)
        return self.default_document()

    @staticmethod
    def pick_canonical(documents: list[dict[str, Any]]) -> dict[str, Any]:
        """Deterministic canonical pick among workspace documents."""
        pages = [doc for doc in documents if doc.get("type") == PAGE_DOCUMENT_TYPE]
        for page in pages:
            path = page.get("path")
            path = path.strip() if isinstance(path, str) else ""
            if path in ROOT_PAGE_PATHS:
                return page
        if pages:
            return pages[0]
        return documents[0]

    @staticmethod
    def _container_documents(source: Any) -> list[dict[str, Any]]:
        if not _is_object(source) or not isinstance(source.get("documents"), list):
            return []
        return [doc for doc in source["documents"] if _is_object(doc)]

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _normalize_node(self, raw: Any, depth: int, is_root: bool = False) -> ComponentNode | None:
        """Normalize one node; None means the node is dropped."""
        if not _is_object(raw) or depth > MAX_TREE_DEPTH:
            return None

        node_id = _non_empty_str(raw.get("id"))
        node_type = _non_empty_str(raw.get("type"))
        if is_root:
            node_id = node_id or DEFAULT_ROOT_ID
            node_type = node_type or DEFAULT_ROOT_TYPE
        if node_id is None or node_type is None:
            logger.debug("node_dropped", id=raw.get("id"), depth=depth)
            return None

        children = None
        if isinstance(raw.get("children"), list):
            children = []
            for child in raw["children"]:
                normalized = self._normalize_node(child, depth + 1)
                if normalized is not None:
                    children.append(normalized)

        comment = raw.get("_comment")
        return ComponentNode(
            id=node_id,
            type=node_type,
            text=self._normalize_text(raw.get("text")),
            props=_string_keyed(raw.get("props")),
            style=_string_keyed(raw.get("style")),
            children=children,
            events=self._normalize_events(raw.get("events")),
            binding=self._normalize_binding(raw.get("binding")),
            resources=self._normalize_resources(raw.get("resources")),
            comment=comment if isinstance(comment, str) else None,
        )

    @staticmethod
    def _normalize_text(value: Any) -> str | dict[str, Any] | None:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if is_value_ref(value):
            return dict(value)
        return None

    @staticmethod
    def _normalize_events(value: Any) -> dict[str, EventBinding]:
        """
        Normalize the events map.

        Supports:
        - Shorthand: {click: "submitForm"}
        - Full binding: {click: {target, payload?, debounce?, preventDefault?}}
        - Action form: {click: {trigger, action, params}} -> target=action
        """
        result: dict[str, EventBinding] = {}
        for name, binding in _string_keyed(value).items():
            if isinstance(binding, str):
                target = _non_empty_str(binding)
                if target:
                    result[name] = EventBinding(target=target)
                continue
            if not _is_object(binding):
                continue

            target = _non_empty_str(binding.get("target")) or _non_empty_str(binding.get("action"))
            if target is None:
                continue
            payload = binding.get("payload", binding.get("params"))
            debounce = binding.get("debounce")
            prevent = binding.get("preventDefault")
            result[name] = EventBinding(
                target=target,
                payload=_string_keyed(payload) if _is_object(payload) else None,
                debounce=debounce if isinstance(debounce, int) and not isinstance(debounce, bool) and debounce >= 0 else None,
                prevent_default=prevent if isinstance(prevent, bool) else None,
            )
        return result

    @staticmethod
    def _normalize_binding(value: Any) -> DataBinding | None:
        if not _is_object(value):
            return None
        path = value.get("path")
        value_type = value.get("type")
        if not isinstance(path, str) or value_type not in _VALUE_TYPES:
            return None
        return DataBinding(path=path, value_type=value_type)

    @staticmethod
    def _normalize_resources(value: Any) -> dict[str, Resource]:
        result: dict[str, Resource] = {}
        for name, resource in _string_keyed(value).items():
            if not _is_object(resource):
                continue
            kind = resource.get("type", resource.get("kind"))
            content = resource.get("value")
            mime = resource.get("mimeType")
            if kind not in _RESOURCE_KINDS or not isinstance(content, str):
                continue
            result[name] = Resource(kind=kind, value=content, mime_type=mime if isinstance(mime, str) else None)
        return result

    # ------------------------------------------------------------------
    # Document sections
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_metadata(value: Any) -> Metadata | None:
        if not _is_object(value):
            return None
        data = _string_keyed(value)
        name = data.pop("name", None)
        description = data.pop("description", None)
        tags = data.pop("tags", None)
        return Metadata(
            name=name if isinstance(name, str) else None,
            description=description if isinstance(description, str) else None,
            tags=[tag for tag in tags if isinstance(tag, str)] if isinstance(tags, list) else [],
            **{key: item for key, item in data.items() if item is not None},
        )

    @staticmethod
    def _normalize_logic(value: Any) -> Logic | None:
        if not _is_object(value):
            return None

        state: dict[str, StateDef] = {}
        for name, definition in _string_keyed(value.get("state")).items():
            if not _is_object(definition):
                continue
            kind = definition.get("type", definition.get("kind"))
            schema = definition.get("schema")
            state[name] = StateDef(
                kind=kind if kind in _STATE_KINDS else "local",
                initial=definition.get("initial"),
                schema_=_string_keyed(schema) if _is_object(schema) else None,
            )

        props: dict[str, PropDef] = {}
        for name, definition in _string_keyed(value.get("props")).items():
            if not _is_object(definition):
                continue
            prop_type = definition.get("type")
            props[name] = PropDef(
                type=prop_type if isinstance(prop_type, str) and prop_type.strip() else "any",
                default=definition.get("default"),
            )

        graphs = {name: graph for name, graph in _string_keyed(value.get("graphs")).items() if _is_object(graph)}
        return Logic(state=state, props=props, graphs=graphs)


_default_normalizer = DocumentNormalizer()


def create_default_document() -> MIRDocument:
    """Minimal valid document at the current schema version."""
    return _default_normalizer.default_document()


def normalize(source: Any) -> MIRDocument:
    """Normalize a single document (never raises)."""
    return _default_normalizer.normalize(source)


def resolve_from_container(source: Any) -> MIRDocument:
    """Resolve the canonical document of a workspace bundle (never raises)."""
    return _default_normalizer.resolve_from_container(source)


def resolve_document(source: Any) -> MIRDocument:
    """Direct shape, then container shape, then the default document."""
    return _default_normalizer.resolve(source)


def load_document(text: str) -> MIRDocument:
    """
    Parse document text tolerantly and resolve it.

    Args:
        text: JSON text, possibly fenced or slightly malformed

    Returns:
        Resolved document; the default document when the text is unusable
    """
    try:
        validate_json_size(text)
        source = extract_json(text, repair=True)
    except (JSONParseError, ValidationError) as e:
        logger.warning("load_document_failed", error=str(e))
        return create_default_document()
    return resolve_document(source)
