"""React backend: one function component per document."""

import re

from ...core import get_logger, safe_json_dumps, quote_literal
from ..ir import IRDocument, IRNode
from .base import MISSING_MARKER, Backend, event_prop_name, handler_code, register_backend, render_import

logger = get_logger(__name__)

INDENT = "  "
_ATTRIBUTE = re.compile(r"^[A-Za-z_$][\w$:-]*$")


@register_backend
class ReactBackend(Backend):
    """Function component with ``useState`` for declared state."""

    target = "react"

    def emit(self, document: IRDocument) -> str:
        react_import = (
            "import React, { useState } from 'react';" if document.state else "import React from 'react';"
        )
        blocks = [react_import]
        if document.imports:
            blocks.append("\n".join(render_import(spec) for spec in document.imports))
        if document.params:
            blocks.append(self._interface(document))
        blocks.append(self._component(document))
        return "\n\n".join(blocks) + "\n"

    def _interface(self, document: IRDocument) -> str:
        fields = "\n".join(
            f"{INDENT}{param.name}?: {'(...args: any[]) => void' if param.type.lower() == 'function' else param.type};"
            for param in document.params
        )
        return f"interface {document.name}Props {{\n{fields}\n}}"

    def _component(self, document: IRDocument) -> str:
        lines = []
        if document.params:
            lines.append(f"export default function {document.name}(inputProps: {document.name}Props) {{")
            defaults = ", ".join(f"{p.name}: {p.default}" for p in document.params if p.default is not None)
            spread = f"{defaults}, ...inputProps" if defaults else "...inputProps"
            lines.append(f"{INDENT}const props = {{ {spread} }};")
        else:
            lines.append(f"export default function {document.name}() {{")

        for var in document.state:
            setter = f"set{var.name[:1].upper()}{var.name[1:]}"
            lines.append(f"{INDENT}const [{var.name}, {setter}] = useState({var.initial});")
        if document.state:
            lines.append(f"{INDENT}const state = {{ {', '.join(var.name for var in document.state)} }};")

        lines.append(f"{INDENT}return (")
        lines.append(self._node(document.root, INDENT * 2))
        lines.append(f"{INDENT});")
        lines.append("}")
        return "\n".join(lines)

    def _attributes(self, node: IRNode) -> list[str]:
        if node.kind == "missing":
            return [f"{MISSING_MARKER}={{{quote_literal(node.type)}}}"]

        attributes = []
        if node.style:
            attributes.append(f"style={{{safe_json_dumps(node.style)}}}")
        for key, expression in node.props.items():
            if not _ATTRIBUTE.match(key):
                logger.warning("prop_skipped", node_id=node.id, prop=key)
                continue
            attributes.append(f"{key}={{{expression.code}}}")
        for handler in node.events.values():
            attributes.append(f"{event_prop_name(handler.trigger)}={{{handler_code(handler)}}}")
        return attributes

    def _node(self, node: IRNode, indent: str) -> str:
        tag = node.element or "div"
        attributes = self._attributes(node)
        opening = f"{tag} {' '.join(attributes)}" if attributes else tag

        inner = []
        if node.text is not None:
            inner.append(f"{indent}{INDENT}{{{node.text.code}}}")
        inner.extend(self._node(child, indent + INDENT) for child in node.children)

        if not inner:
            return f"{indent}<{opening} />"
        return "\n".join([f"{indent}<{opening}>", *inner, f"{indent}</{tag}>"])
