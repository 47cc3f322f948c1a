"""
Document Validator
Advisory structural checks on a normalized document.
"""

import re
from typing import Any

from returns.result import Result, Success, Failure

from ..core import ValidationError, ValidationIssue, validate_json_depth
from .models import ComponentNode, MIRDocument
from .refs import is_state_ref, path_head

BINDING_PATH_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*|\[\d+\])*$")


class DocumentValidator:
    """
    Collects every issue instead of stopping at the first one.

    Normalization already guarantees a renderable tree; these checks report
    what an author most likely got wrong.
    """

    def __init__(self, document: MIRDocument) -> None:
        self.document = document
        self.issues: list[ValidationIssue] = []
        self._seen_ids: dict[str, str] = {}
        self._declared_state = set(document.logic.state) if document.logic else set()

    def run(self) -> list[ValidationIssue]:
        try:
            validate_json_depth(self.document.to_dict())
        except ValidationError as e:
            self._add("document_too_deep", "ui.root", str(e))
            return self.issues

        self._visit(self.document.ui.root, "ui.root")
        return self.issues

    def _add(self, code: str, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(code=code, path=path, message=message))

    def _visit(self, node: ComponentNode, path: str) -> None:
        if node.id in self._seen_ids:
            self._add(
                "duplicate_id",
                path,
                f"Node id '{node.id}' already used at {self._seen_ids[node.id]}",
            )
        else:
            self._seen_ids[node.id] = path

        if not node.type.strip():
            self._add("empty_type", path, f"Node '{node.id}' has an empty type")

        if node.binding and not BINDING_PATH_PATTERN.match(node.binding.path):
            self._add("invalid_binding_path", f"{path}.binding", f"Invalid binding path '{node.binding.path}'")

        for name, event in node.events.items():
            if not event.target.strip():
                self._add("empty_event_target", f"{path}.events.{name}", "Event target is empty")

        self._check_state_refs(node.text, f"{path}.text")
        for key, value in node.props.items():
            self._check_state_refs(value, f"{path}.props.{key}")

        for index, child in enumerate(node.children or []):
            self._visit(child, f"{path}.children[{index}]")

    def _check_state_refs(self, value: Any, path: str) -> None:
        if is_state_ref(value):
            head = path_head(value["$state"])
            if head not in self._declared_state:
                self._add("unknown_state", path, f"State '{head}' is not declared in logic.state")
        elif isinstance(value, dict):
            for key, entry in value.items():
                self._check_state_refs(entry, f"{path}.{key}")
        elif isinstance(value, list):
            for index, entry in enumerate(value):
                self._check_state_refs(entry, f"{path}[{index}]")


def validate_document(document: MIRDocument) -> Result[MIRDocument, list[ValidationIssue]]:
    """
    Validate a document (Result pattern).

    Args:
        document: Normalized document

    Returns:
        Success with the document, or Failure with every issue found
    """
    issues = DocumentValidator(document).run()
    if issues:
        return Failure(issues)
    return Success(document)
