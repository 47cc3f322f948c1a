"""
Backend Contract
Target emitters consume an IRDocument and return source text.
"""

from abc import ABC, abstractmethod

from ...core import get_logger, safe_json_dumps, quote_literal
from ..errors import UnknownTargetError
from ..ir import IRDocument, IRHandler, IRImport

logger = get_logger(__name__)

MISSING_MARKER = "data-mir-missing"

_BACKENDS: dict[str, type["Backend"]] = {}


class Backend(ABC):
    """Target-framework emitter."""

    target: str = ""

    @abstractmethod
    def emit(self, document: IRDocument) -> str:
        """Render the complete source file."""
        pass


def register_backend(backend: type[Backend]) -> type[Backend]:
    """Register a backend class under its ``target`` (usable as a decorator)."""
    if not backend.target:
        raise ValueError(f"{backend.__name__} declares no target")
    if backend.target in _BACKENDS:
        logger.warning("backend_replaced", target=backend.target)
    _BACKENDS[backend.target] = backend
    return backend


def get_backend(target: str) -> Backend:
    backend = _BACKENDS.get(target)
    if backend is None:
        raise UnknownTargetError(target)
    return backend()


def available_targets() -> list[str]:
    return sorted(_BACKENDS)


def render_import(spec: IRImport) -> str:
    source = quote_literal(spec.source)
    if spec.kind == "namespace":
        return f"import * as {spec.binding} from {source};"
    if spec.kind == "default":
        return f"import {spec.binding} from {source};"
    imported = f"{spec.imported} as {spec.local}" if spec.local else spec.imported
    return f"import {{ {imported} }} from {source};"


def builtin_handler(handler: IRHandler) -> str:
    """Arrow function for a built-in action."""
    params = handler.params
    if handler.action == "navigate":
        to = quote_literal(str(params.get("to", "")).strip())
        if params.get("target") != "_self":
            return f"() => {{ window.open({to}, '_blank', 'noopener,noreferrer'); }}"
        if params.get("replace"):
            return f"() => {{ window.location.replace({to}); }}"
        return f"() => {{ window.location.assign({to}); }}"
    detail = safe_json_dumps(params)
    return f"() => {{ window.dispatchEvent(new CustomEvent('mdr:execute-graph', {{ detail: {detail} }})); }}"


def handler_code(handler: IRHandler) -> str:
    if handler.kind == "param" and handler.code:
        return handler.code
    return builtin_handler(handler)


def event_prop_name(trigger: str) -> str:
    """``click`` -> ``onClick``; already-prefixed names are kept."""
    if trigger[:2] == "on" and trigger[2:3].isupper():
        return trigger
    return f"on{trigger[:1].upper()}{trigger[1:]}"
