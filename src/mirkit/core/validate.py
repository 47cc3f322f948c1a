"""Input limits for document text and validation result types."""

from dataclasses import dataclass
from typing import Any


# Validation limits
MAX_DOCUMENT_SIZE = 2 * 1024 * 1024  # 2MB
MAX_JSON_DEPTH = 64


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationIssue:
    """One structural problem found in a document (for Result pattern)."""

    code: str
    path: str
    message: str


def validate_json_size(data: str, max_size: int = MAX_DOCUMENT_SIZE, name: str = "Document") -> None:
    """
    Validate text size before parsing.

    Raises:
        ValidationError: If size exceeds limit
    """
    size = len(data.encode("utf-8"))
    if size > max_size:
        raise ValidationError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = MAX_JSON_DEPTH, current_depth: int = 0) -> None:
    """
    Validate nesting depth so recursive walks stay within the stack.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
