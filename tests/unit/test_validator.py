"""Tests for value references and document validation."""

import pytest
from returns.result import Failure, Success

from mirkit.document import (
    RefContext,
    deep_resolve_value,
    is_value_ref,
    normalize,
    read_value_by_path,
    ref_kind,
    resolve_value,
    validate_document,
)


@pytest.mark.unit
class TestRefs:
    """Test reference predicates and resolution."""

    def test_ref_shapes(self):
        assert ref_kind({"$state": "a"}) == "state"
        assert ref_kind({"$param": "a"}) == "param"
        assert ref_kind({"$index": True}) == "index"
        assert not is_value_ref({"$index": False})
        assert not is_value_ref({"$state": "a", "extra": 1})
        assert not is_value_ref({"$state": 3})
        assert ref_kind("plain") is None

    def test_read_value_by_path(self):
        source = {"user": {"tags": ["a", {"name": "b"}]}}
        assert read_value_by_path(source, "user.tags[1].name") == "b"
        assert read_value_by_path(source, "user.tags[5]") is None
        assert read_value_by_path(source, "user.missing.deeper") is None
        assert read_value_by_path(source, "  ") is source

    def test_resolve_value(self):
        context = RefContext(params={"title": "Hi"}, state={"n": 2}, item={"label": "x"}, index=4)
        assert resolve_value({"$param": "title"}, context) == "Hi"
        assert resolve_value({"$state": "n"}, context) == 2
        assert resolve_value({"$item": "label"}, context) == "x"
        assert resolve_value({"$index": True}, context) == 4
        assert resolve_value({"literal": 1}, context) == {"literal": 1}

    def test_deep_resolve(self):
        context = RefContext(state={"open": True})
        value = {"a": [{"$state": "open"}, 1], "b": {"c": {"$state": "open"}}}
        assert deep_resolve_value(value, context) == {"a": [True, 1], "b": {"c": True}}


@pytest.mark.unit
class TestValidateDocument:
    """Test advisory validation."""

    def test_valid_document(self, sample_document):
        """Test a clean document returns Success."""
        result = validate_document(sample_document)
        assert isinstance(result, Success)
        assert result.unwrap() is sample_document

    def test_collects_every_issue(self):
        """Test all issues are reported together."""
        doc = normalize(
            {"ui": {"root": {"id": "r", "type": "container", "children": [
                {"id": "x", "type": "text", "text": {"$state": "ghost"}},
                {"id": "x", "type": "input", "binding": {"path": "1bad path", "type": "string"}},
            ]}}}
        )
        result = validate_document(doc)
        assert isinstance(result, Failure)
        codes = sorted(issue.code for issue in result.failure())
        assert codes == ["duplicate_id", "invalid_binding_path", "unknown_state"]

    def test_state_refs_in_props(self):
        """Test nested prop references are checked against declared state."""
        doc = normalize(
            {
                "ui": {"root": {"id": "r", "type": "container", "props": {"style": [{"$state": "theme.dark"}]}}},
                "logic": {"state": {"count": {"initial": 0}}},
            }
        )
        issues = validate_document(doc).failure()
        assert issues[0].path == "ui.root.props.style[0]"
