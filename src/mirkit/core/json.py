"""Tolerant parsing of document text and JSON encoding for generated code."""

import json
import re
from typing import Any

import msgspec
import orjson
from json_repair import repair_json

# ```json, ```mir or a bare fence
_FENCE = re.compile(r"```[A-Za-z]*\s*\n?(.*?)```", re.DOTALL)


class JSONParseError(Exception):
    """Document text held no parseable JSON object."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def extract_json_boundaries(text: str) -> tuple[str, int, int] | None:
    """
    Locate the outermost JSON object in text.

    Documents are often pasted inside a markdown fence; the first fenced
    block wins over surrounding prose.

    Returns:
        (working_text, start, end) with ``working_text[start:end]`` the
        object, or None when there are no braces
    """
    fenced = _FENCE.search(text)
    working_text = fenced.group(1).strip() if fenced else text

    start = working_text.find("{")
    end = working_text.rfind("}")
    if start == -1 or end < start:
        return None
    return working_text, start, end + 1


def _as_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise JSONParseError(f"Expected object, got {type(value).__name__}")
    return value


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Parse the JSON object embedded in text.

    Strict decoding is tried first; with ``repair`` a failed decode is
    retried after json_repair fixes trailing commas, single quotes and
    unbalanced brackets.

    Raises:
        JSONParseError: If no object can be recovered
    """
    boundaries = extract_json_boundaries(text.strip())
    if boundaries is None:
        raise JSONParseError("No JSON object found in text")
    working_text, start, end = boundaries
    candidate = working_text[start:end]

    try:
        return _as_object(msgspec.json.decode(candidate.encode("utf-8")))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e) from e

    try:
        repaired = repair_json(candidate, return_objects=True)
    except Exception as e:
        raise JSONParseError(f"JSON repair failed: {e}", e) from e
    return _as_object(repaired)


def safe_json_dumps(obj: Any, indent: int | None = None) -> str:
    """
    Encode to a JSON string.

    orjson handles the common case; integers beyond 64 bits and indented
    output fall back to the json module.
    """
    if not indent:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except TypeError:
            pass
    return json.dumps(obj, indent=indent or None, ensure_ascii=False)


def quote_literal(value: str) -> str:
    """
    Quote text as a double-quoted string literal.

    The result is valid in both JavaScript and JSON, so content such as
    ``count`` can never be read back as an identifier.
    """
    return orjson.dumps(value).decode("utf-8")


__all__ = [
    "JSONParseError",
    "extract_json_boundaries",
    "extract_json",
    "safe_json_dumps",
    "quote_literal",
]
