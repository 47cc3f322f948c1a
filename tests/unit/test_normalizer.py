"""Tests for document normalization and container resolution."""

import string

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from mirkit.document import (
    CURRENT_SCHEMA_VERSION,
    DocumentNormalizer,
    MIRDocument,
    create_default_document,
    load_document,
    normalize,
    resolve_document,
    resolve_from_container,
)

keys = st.text(alphabet=string.ascii_letters, min_size=1, max_size=8)
json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats(allow_nan=False) | st.text(max_size=12),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(keys, children, max_size=4),
    max_leaves=25,
)
node_like = st.recursive(
    st.fixed_dictionaries(
        {"id": st.one_of(st.none(), st.integers(), keys), "type": st.one_of(st.none(), keys)},
        optional={"text": json_values, "props": json_values, "events": json_values, "style": json_values},
    ),
    lambda children: st.fixed_dictionaries(
        {"id": keys, "type": keys, "children": st.lists(children | json_values, max_size=3)}
    ),
    max_leaves=10,
)


@pytest.mark.unit
class TestNormalize:
    """Test single-document normalization."""

    def test_non_object_returns_default(self):
        """Test non-object input yields the default document."""
        for source in (None, 42, "text", [1, 2], {"ui": None}, {"ui": {"root": "x"}}):
            doc = normalize(source)
            assert doc.ui.root.id == "root"
            assert doc.ui.root.type == "container"
            assert doc.ui.root.children is None

    def test_version_stamped(self, sample_source):
        """Test version is always the current schema version."""
        assert sample_source["version"] == "0.9"
        assert normalize(sample_source).version == CURRENT_SCHEMA_VERSION

    def test_root_defaults(self):
        """Test missing root id and type are filled in."""
        doc = normalize({"ui": {"root": {"children": []}}})
        assert doc.ui.root.id == "root"
        assert doc.ui.root.type == "container"
        assert doc.ui.root.children == []

    def test_invalid_children_dropped(self):
        """Test children without id or type are dropped, siblings kept."""
        doc = normalize(
            {
                "ui": {
                    "root": {
                        "id": "root",
                        "type": "container",
                        "children": [
                            {"id": "a", "type": "text"},
                            {"type": "text"},
                            {"id": "c"},
                            "junk",
                            {"id": "d", "type": "button", "children": [{"id": "", "type": "text"}]},
                        ],
                    }
                }
            }
        )
        assert [child.id for child in doc.ui.root.children] == ["a", "d"]
        assert doc.ui.root.children[1].children == []

    def test_descendant_ids_kept_as_authored(self):
        """Test duplicate descendant ids are not rewritten."""
        doc = normalize(
            {"ui": {"root": {"id": "r", "type": "container", "children": [
                {"id": "x", "type": "text"},
                {"id": "x", "type": "text"},
            ]}}}
        )
        assert doc.node_ids() == ["r", "x", "x"]

    def test_text_forms(self):
        """Test literal, numeric and reference text."""
        doc = normalize(
            {"ui": {"root": {"id": "r", "type": "container", "children": [
                {"id": "a", "type": "text", "text": "hi"},
                {"id": "b", "type": "text", "text": 3},
                {"id": "c", "type": "text", "text": {"$state": "count"}},
                {"id": "d", "type": "text", "text": ["not", "text"]},
            ]}}}
        )
        texts = [child.text for child in doc.ui.root.children]
        assert texts == ["hi", "3", {"$state": "count"}, None]

    def test_event_forms(self):
        """Test shorthand, full and action event bindings."""
        doc = normalize(
            {"ui": {"root": {"id": "r", "type": "button", "events": {
                "click": "submit",
                "hover": {"target": "track", "debounce": 200, "preventDefault": True},
                "focus": {"trigger": "focus", "action": "navigate", "params": {"to": "/home"}},
                "blur": {"payload": {}},
            }}}}
        )
        events = doc.ui.root.events
        assert set(events) == {"click", "hover", "focus"}
        assert events["click"].target == "submit"
        assert events["hover"].debounce == 200
        assert events["hover"].prevent_default is True
        assert events["focus"].target == "navigate"
        assert events["focus"].payload == {"to": "/home"}

    def test_binding_and_resources(self):
        """Test binding and resource normalization."""
        doc = normalize(
            {"ui": {"root": {
                "id": "r",
                "type": "input",
                "binding": {"path": "form.email", "type": "string"},
                "resources": {
                    "logo": {"type": "url", "value": "https://x/logo.png", "mimeType": "image/png"},
                    "bad": {"type": "ftp", "value": "x"},
                },
            }}}
        )
        root = doc.ui.root
        assert root.binding.path == "form.email"
        assert root.binding.value_type == "string"
        assert set(root.resources) == {"logo"}
        assert root.resources["logo"].mime_type == "image/png"

    def test_logic_normalized(self, sample_document):
        """Test state and declared params."""
        logic = sample_document.logic
        assert logic.state["count"].kind == "local"
        assert logic.state["count"].initial == 0
        assert logic.props["label"].default == "Save"
        assert logic.props["onSave"].type == "() => void"

    def test_accepts_document_instance(self, sample_document):
        """Test normalizing an existing document."""
        again = normalize(sample_document)
        assert isinstance(again, MIRDocument)
        assert again.to_dict() == sample_document.to_dict()

    def test_null_metadata_extras_dropped(self):
        """Test a null metadata entry does not survive into the document."""
        doc = normalize({"metadata": {"name": "Home", "owner": None, "team": "web"}})
        assert doc.metadata.model_extra == {"team": "web"}
        assert normalize(doc) == doc
        assert normalize(doc.to_dict()) == doc

    def test_custom_schema_version(self):
        """Test normalizer stamps its own version."""
        doc = DocumentNormalizer("2.0").normalize({"ui": {"root": {"id": "r", "type": "container"}}})
        assert doc.version == "2.0"

    def test_interchange_aliases(self):
        """Test to_dict uses wire names."""
        data = normalize(
            {"ui": {"root": {"id": "r", "type": "container", "_comment": "note",
                             "events": {"click": {"target": "go", "preventDefault": False}}}}}
        ).to_dict()
        assert data["ui"]["root"]["_comment"] == "note"
        assert data["ui"]["root"]["events"]["click"]["preventDefault"] is False


@pytest.mark.unit
class TestNormalizeProperties:
    """Property tests for normalization."""

    @given(json_values)
    @hypothesis_settings(max_examples=150)
    def test_never_raises(self, source):
        """Test arbitrary input always yields a well-formed root."""
        doc = normalize(source)
        assert doc.ui.root.id
        assert doc.ui.root.type

    @given(node_like, json_values, st.dictionaries(keys, json_values, max_size=4))
    @hypothesis_settings(max_examples=150)
    def test_idempotent(self, root, logic, metadata):
        """Test normalize(normalize(x)) == normalize(x)."""
        once = normalize({"ui": {"root": root}, "logic": logic, "metadata": metadata})
        twice = normalize(once.to_dict())
        assert twice.to_dict() == once.to_dict()
        assert twice == once
        assert normalize(once) == once


@pytest.mark.unit
class TestContainerResolution:
    """Test workspace bundle resolution."""

    def _page(self, doc_id, path=None, doc_type="mir-page", text="x"):
        doc = {
            "id": doc_id,
            "type": doc_type,
            "content": {"ui": {"root": {"id": doc_id, "type": "container", "text": text}}},
        }
        if path is not None:
            doc["path"] = path
        return doc

    def test_root_page_wins_regardless_of_order(self):
        """Test the page at "/" is chosen even when listed last."""
        bundle = {"documents": [
            self._page("about", "/about"),
            self._page("layout", doc_type="mir-layout"),
            self._page("home", "/"),
        ]}
        assert resolve_from_container(bundle).ui.root.id == "home"

    def test_empty_path_counts_as_root(self):
        """Test an empty path is a root page."""
        bundle = {"documents": [self._page("about", "/about"), self._page("index", "")]}
        assert resolve_from_container(bundle).ui.root.id == "index"

    def test_first_page_without_root(self):
        """Test first page-typed document when no root page exists."""
        bundle = {"documents": [
            self._page("layout", doc_type="mir-layout"),
            self._page("about", "/about"),
            self._page("contact", "/contact"),
        ]}
        assert resolve_from_container(bundle).ui.root.id == "about"

    def test_first_document_without_pages(self):
        """Test first document when nothing is page-typed."""
        bundle = {"documents": [
            self._page("layout", doc_type="mir-layout"),
            self._page("widget", doc_type="mir-component"),
        ]}
        assert resolve_from_container(bundle).ui.root.id == "layout"

    def test_unusable_bundles(self):
        """Test bad bundles yield the default document."""
        default = create_default_document().to_dict()
        for bundle in (None, {"documents": []}, {"documents": "x"}, {"documents": [1, "a"]}):
            assert resolve_from_container(bundle).to_dict() == default

    def test_chosen_content_malformed(self):
        """Test malformed content of the chosen page falls back."""
        bundle = {"documents": [{"type": "mir-page", "path": "/", "content": "oops"}]}
        assert resolve_from_container(bundle).ui.root.type == "container"

    def test_direct_shape_preferred(self):
        """Test direct shape is tried before container shape."""
        source = {
            "ui": {"root": {"id": "direct", "type": "container"}},
            "documents": [self._page("home", "/")],
        }
        assert resolve_document(source).ui.root.id == "direct"

    def test_container_fallback(self):
        """Test container shape used when the direct shape is absent."""
        assert resolve_document({"documents": [self._page("home", "/")]}).ui.root.id == "home"


@pytest.mark.unit
class TestLoadDocument:
    """Test parsing document text."""

    def test_fenced_text(self):
        """Test markdown-fenced JSON is accepted."""
        text = '```json\n{"ui": {"root": {"id": "r", "type": "container"}}}\n```'
        assert load_document(text).ui.root.id == "r"

    def test_repairs_trailing_comma(self):
        """Test slightly malformed JSON is repaired."""
        text = '{"ui": {"root": {"id": "r", "type": "container",}}}'
        assert load_document(text).ui.root.id == "r"

    def test_garbage_returns_default(self):
        """Test non-JSON text yields the default document."""
        assert load_document("no json here").ui.root.id == "root"
