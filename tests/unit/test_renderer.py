"""Tests for live preview rendering."""

import pytest

from mirkit.document import normalize
from mirkit.external import RemoteComponent
from mirkit.registry import Element
from mirkit.renderer import FALLBACK_MARKER, MISSING_MARKER, LiveRenderer, RenderError, invoke


def _doc(children, logic=None):
    source = {"ui": {"root": {"id": "root", "type": "container", "children": children}}}
    if logic is not None:
        source["logic"] = logic
    return normalize(source)


@pytest.mark.unit
class TestLiveRenderer:
    """Test rendering through the registry."""

    def test_sample(self, registry, sample_document):
        """Test declared defaults feed state and params."""
        tree = LiveRenderer(registry).render(sample_document)

        assert tree.tag == "div"
        assert tree.props["style"] == {"padding": 16}
        assert tree.find("title").tag == "h2"
        assert tree.find("title").text_content() == "Hello"
        assert tree.find("count").text_content() == "0"
        assert tree.find("save").tag == "button"
        assert tree.find("save").text_content() == "Save"

    def test_overrides(self, registry, sample_document):
        tree = LiveRenderer(registry).render(sample_document, state={"count": 5}, params={"label": "Go"})
        assert tree.find("count").text_content() == "5"
        assert tree.find("save").text_content() == "Go"

    def test_missing_placeholder_keeps_children(self, registry):
        doc = _doc([{"id": "w", "type": "AcmeWidget", "children": [{"id": "inner", "type": "MdrText", "text": "x"}]}])
        widget = LiveRenderer(registry).render(doc).find("w")
        assert widget.props == {MISSING_MARKER: "AcmeWidget"}
        assert widget.find("inner") is not None

    def test_void_element_drops_children(self, registry):
        doc = _doc([{"id": "i", "type": "input", "text": "prefill", "children": [{"id": "c", "type": "span"}]}])
        element = LiveRenderer(registry).render(doc).find("i")
        assert element.tag == "input"
        assert element.props["defaultValue"] == "prefill"
        assert element.children == []

    def test_data_references(self, registry):
        doc = _doc([{"id": "t", "type": "text", "text": {"$data": "rows[1].name"}}])
        tree = LiveRenderer(registry).render(doc, data={"rows": [{"name": "a"}, {"name": "b"}]})
        assert tree.find("t").text_content() == "b"

    def test_resolved_props(self, registry):
        doc = _doc(
            [{"id": "l", "type": "a", "props": {"href": {"$param": "url"}, "meta": {"open": {"$state": "open"}}}}],
            logic={"state": {"open": {"initial": True}}, "props": {"url": {"default": "/home"}}},
        )
        element = LiveRenderer(registry).render(doc).find("l")
        assert element.props == {"href": "/home", "meta": {"open": True}}

    def test_external_failure_contained(self, registry):
        """Test a throwing external implementation renders a fallback."""
        def broken(props, children):
            raise ValueError("kaboom")

        registry.register("AcmeBroken", broken)
        element = LiveRenderer(registry).render(_doc([{"id": "b", "type": "AcmeBroken"}])).find("b")
        assert element.props[FALLBACK_MARKER] == "AcmeBroken"
        assert element.props["data-error"] == "kaboom"

    def test_external_non_element_contained(self, registry):
        registry.register("AcmeNone", lambda props, children: None)
        element = LiveRenderer(registry).render(_doc([{"id": "n", "type": "AcmeNone"}])).find("n")
        assert FALLBACK_MARKER in element.props

    def test_remote_component(self, registry):
        registry.register("AcmeCard", RemoteComponent("https://esm.sh/acme", "Card"))
        element = LiveRenderer(registry).render(_doc([{"id": "c", "type": "AcmeCard", "text": "Body"}])).find("c")
        assert element.tag == "Card"
        assert element.text_content() == "Body"

    def test_custom_adapter_passes_children(self, registry):
        registry.register("AcmeBox", lambda props, children: Element("section", props, children))
        doc = _doc([{"id": "box", "type": "AcmeBox", "children": [{"id": "t", "type": "text", "text": "hi"}]}])
        box = LiveRenderer(registry).render(doc).find("box")
        assert box.tag == "section"
        assert box.find("t").text_content() == "hi"


@pytest.mark.unit
class TestInvoke:
    """Test implementation handles."""

    def test_string_tag(self):
        assert invoke("span", {"a": 1}, ["x"]).tag == "span"

    def test_not_renderable(self):
        with pytest.raises(RenderError):
            invoke(42, {}, [])

    def test_wrong_return(self):
        with pytest.raises(RenderError):
            invoke(lambda props, children: "text", {}, [])
