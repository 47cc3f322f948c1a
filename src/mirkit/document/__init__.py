"""Document model: tree types, value references, normalization and validation."""

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
from .normalizer import (
    CURRENT_SCHEMA_VERSION,
    DocumentNormalizer,
    create_default_document,
    load_document,
    normalize,
    resolve_document,
    resolve_from_container,
)
from .refs import (
    RefContext,
    deep_resolve_value,
    is_param_ref,
    is_state_ref,
    is_value_ref,
    read_value_by_path,
    ref_kind,
    resolve_value,
)
from .validator import validate_document

__all__ = [
    "DEFAULT_ROOT_ID",
    "DEFAULT_ROOT_TYPE",
    "ComponentNode",
    "DataBinding",
    "EventBinding",
    "Logic",
    "Metadata",
    "MIRDocument",
    "PropDef",
    "Resource",
    "StateDef",
    "UI",
    "CURRENT_SCHEMA_VERSION",
    "DocumentNormalizer",
    "create_default_document",
    "load_document",
    "normalize",
    "resolve_document",
    "resolve_from_container",
    "RefContext",
    "deep_resolve_value",
    "is_param_ref",
    "is_state_ref",
    "is_value_ref",
    "read_value_by_path",
    "ref_kind",
    "resolve_value",
    "validate_document",
]
