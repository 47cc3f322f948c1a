"""Vue backend: single-file component with ``<script setup>``."""

import html
import re

from ...core import get_logger, safe_json_dumps
from ..ir import IRDocument, IRNode
from ..lowering import to_identifier
from .base import MISSING_MARKER, Backend, builtin_handler, register_backend, render_import

logger = get_logger(__name__)

INDENT = "  "
_ATTRIBUTE = re.compile(r"^[A-Za-z_$][\w$:-]*$")


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _text(value: object) -> str:
    """Static template text; braces are entity-encoded so they never open an interpolation."""
    escaped = html.escape(value if isinstance(value, str) else safe_json_dumps(value), quote=False)
    return escaped.replace("{", "&#123;").replace("}", "&#125;")


def _event_name(trigger: str) -> str:
    """``onClick`` -> ``click``; plain names pass through."""
    if trigger[:2] == "on" and trigger[2:3].isupper():
        return trigger[2:3].lower() + trigger[3:]
    return trigger


@register_backend
class VueBackend(Backend):
    target = "vue"

    def emit(self, document: IRDocument) -> str:
        handlers: list[str] = []
        template = self._node(document.root, INDENT, handlers)
        script = self._script(document, handlers)
        return f"<template>\n{template}\n</template>\n\n<script setup lang=\"ts\">\n{script}\n</script>\n"

    def _script(self, document: IRDocument, handlers: list[str]) -> str:
        lines = []
        if document.state:
            lines.append("import { reactive } from 'vue';")
        lines.extend(render_import(spec) for spec in document.imports)
        if lines:
            lines.append("")

        if document.params:
            fields = "; ".join(f"{p.name}?: {p.type}" for p in document.params)
            defaults = ", ".join(f"{p.name}: {p.default}" for p in document.params if p.default is not None)
            lines.append(f"const props = withDefaults(defineProps<{{ {fields} }}>(), {{ {defaults} }});")
        if document.state:
            values = ", ".join(f"{var.name}: {var.initial}" for var in document.state)
            lines.append(f"const state = reactive({{ {values} }});")
        lines.extend(handlers)
        return "\n".join(lines)

    def _node(self, node: IRNode, indent: str, handlers: list[str]) -> str:
        tag = node.element or "div"
        attributes = []
        if node.kind == "missing":
            attributes.append(f'{MISSING_MARKER}="{_attr(node.type)}"')
        else:
            if node.style:
                attributes.append(f':style="{_attr(safe_json_dumps(node.style))}"')
            for key, expression in node.props.items():
                if not _ATTRIBUTE.match(key):
                    logger.warning("prop_skipped", node_id=node.id, prop=key)
                    continue
                attributes.append(f':{key}="{_attr(expression.code)}"')
            for handler in node.events.values():
                if handler.kind == "param" and handler.code:
                    reference = handler.code
                else:
                    reference = to_identifier(f"on_{node.id}_{handler.trigger}")
                    handlers.append(f"const {reference} = {builtin_handler(handler)};")
                attributes.append(f'@{_event_name(handler.trigger)}="{_attr(reference)}"')

        opening = f"{tag} {' '.join(attributes)}" if attributes else tag
        inner = []
        if node.text is not None and node.text.kind == "literal":
            inner.append(f"{indent}{INDENT}{_text(node.text.value)}")
        elif node.text is not None:
            inner.append(f"{indent}{INDENT}{{{{ {node.text.code} }}}}")
        inner.extend(self._node(child, indent + INDENT, handlers) for child in node.children)

        if not inner:
            return f"{indent}<{opening} />"
        return "\n".join([f"{indent}<{opening}>", *inner, f"{indent}</{tag}>"])
