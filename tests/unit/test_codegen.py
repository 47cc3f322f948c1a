"""Tests for package resolution, lowering and the target backends."""

import pytest

from mirkit.codegen import (
    CodeGenerator,
    GenerationCache,
    LoweringError,
    UnknownTargetError,
    available_targets,
    is_bare_import,
    lower_document,
    package_name_of,
    resolve_import,
)
from mirkit.codegen.lowering import ComponentImports, to_component_name
from mirkit.document import normalize
from mirkit.external import create_default_profiles
from mirkit.monitoring import MetricsCollector


def _doc(children, logic=None, name=None):
    source = {"ui": {"root": {"id": "root", "type": "container", "children": children}}}
    if logic is not None:
        source["logic"] = logic
    if name is not None:
        source["metadata"] = {"name": name}
    return normalize(source)


# ============================================================================
# Package resolution
# ============================================================================


@pytest.mark.unit
class TestPackages:
    """Test import specifier resolution."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("left-pad", "left-pad"),
            ("lodash/fp", "lodash"),
            ("@scope/name/sub", "@scope/name"),
            ("@scope", "@scope"),
            ("./local", None),
            ("/abs/path", None),
            ("https://esm.sh/react", None),
        ],
    )
    def test_package_name(self, source, expected):
        assert package_name_of(source) == expected

    def test_bare(self):
        assert is_bare_import("react")
        assert not is_bare_import("../x")

    def test_cdn_style_left_pad(self):
        """Test cdn-style rewrites to a URL and declares nothing."""
        resolution = resolve_import("left-pad", "cdn-style")
        assert resolution.import_source == "https://esm.sh/left-pad"
        assert resolution.declare_dependency is False

    def test_cdn_style_version_before_subpath(self):
        resolution = resolve_import("@scope/name/sub", "cdn-style", "2.0.0", "https://cdn.test/")
        assert resolution.import_source == "https://cdn.test/@scope/name@2.0.0/sub"
        assert resolution.package_name == "@scope/name"

    @pytest.mark.parametrize("strategy", ["workspace", "package-registry"])
    def test_registry_strategies(self, strategy):
        """Test workspace and package-registry keep the specifier and declare it."""
        resolution = resolve_import("left-pad", strategy)
        assert resolution.import_source == "left-pad"
        assert resolution.declare_dependency is True

    def test_relative_passthrough(self):
        for strategy in ("workspace", "package-registry", "cdn-style"):
            resolution = resolve_import("./Button", strategy)
            assert resolution.import_source == "./Button"
            assert resolution.declare_dependency is False


# ============================================================================
# Lowering
# ============================================================================


@pytest.mark.unit
class TestLowering:
    """Test document to IR lowering."""

    def test_literal_text_is_quoted(self, registry):
        """Test text content is a string literal, not an identifier."""
        ir = lower_document(_doc([{"id": "t", "type": "MdrText", "text": "Hello"}]), registry)
        text = ir.root.children[0].text
        assert text.code == '"Hello"'
        assert text.kind == "literal"
        assert text.value == "Hello"

    def test_identifier_like_text_still_quoted(self, registry):
        ir = lower_document(_doc([{"id": "t", "type": "MdrText", "text": "count"}]), registry)
        assert ir.root.children[0].text.code == '"count"'

    def test_state_and_param_access(self, registry, sample_document):
        ir = lower_document(sample_document, registry)
        count, save = ir.root.children[1], ir.root.children[2]
        assert count.text.code == "state.count"
        assert count.text.kind == "state"
        assert save.text.code == "props.label"
        assert save.events["click"].code == "props.onSave"

    def test_nested_state_path(self, registry):
        doc = _doc(
            [{"id": "t", "type": "MdrText", "text": {"$state": "user.name"}}],
            logic={"state": {"user": {"initial": {"name": "Ada"}}}},
        )
        assert lower_document(doc, registry).root.children[0].text.code == "state.user.name"

    def test_indexed_state_path(self, registry):
        doc = _doc(
            [{"id": "t", "type": "MdrText", "text": {"$state": "rows[2].title"}}],
            logic={"state": {"rows": {"initial": []}}},
        )
        assert lower_document(doc, registry).root.children[0].text.code == "state.rows[2].title"

    @pytest.mark.parametrize("path", ["count.x + fetch('//evil')", "count.a b", "count..x", "count[x]", "count."])
    def test_state_path_must_be_plain_access(self, registry, path):
        """Test anything beyond member and index access raises instead of being emitted."""
        doc = _doc(
            [{"id": "t", "type": "MdrText", "text": {"$state": path}}],
            logic={"state": {"count": {"initial": 0}}},
        )
        with pytest.raises(LoweringError) as excinfo:
            CodeGenerator(registry).generate(doc, "react")
        assert excinfo.value.node_id == "t"

    def test_undeclared_state(self, registry):
        """Test undeclared state names the offending node."""
        doc = _doc([{"id": "counter", "type": "MdrText", "text": {"$state": "count"}}])
        with pytest.raises(LoweringError) as excinfo:
            lower_document(doc, registry)
        assert excinfo.value.node_id == "counter"
        assert "count" in str(excinfo.value)

    def test_undeclared_param(self, registry):
        doc = _doc([{"id": "p", "type": "MdrText", "props": {"title": {"$param": "title"}}}])
        with pytest.raises(LoweringError):
            lower_document(doc, registry)

    def test_data_scope_reference_rejected(self, registry):
        doc = _doc([{"id": "row", "type": "MdrText", "text": {"$item": "label"}}])
        with pytest.raises(LoweringError) as excinfo:
            lower_document(doc, registry)
        assert excinfo.value.node_id == "row"

    def test_unknown_action_rejected(self, registry):
        doc = _doc([{"id": "b", "type": "MdrButton", "events": {"click": "doThing"}}])
        with pytest.raises(LoweringError):
            lower_document(doc, registry)

    def test_builtin_action(self, registry):
        doc = _doc([{"id": "b", "type": "MdrButton", "events": {
            "click": {"trigger": "click", "action": "navigate", "params": {"to": "/home"}},
        }}])
        handler = lower_document(doc, registry).root.children[0].events["click"]
        assert handler.kind == "builtin"
        assert handler.params == {"to": "/home"}

    def test_node_kinds(self, registry):
        doc = _doc([
            {"id": "a", "type": "section"},
            {"id": "b", "type": "AcmeWidget"},
            {"id": "c", "type": "button"},
            {"id": "d", "type": "RadixSlot"},
            {"id": "e", "type": "RadixLabel"},
        ])
        ir = lower_document(doc, registry)
        kinds = [(n.kind, n.element) for n in ir.root.children]
        assert kinds == [
            ("native", "section"),
            ("missing", None),
            ("native", "button"),
            ("native", "span"),
            ("component", "Label.Root"),
        ]
        assert ir.root.kind == "container"

    def test_kit_dependency(self, registry, sample_document):
        ir = lower_document(sample_document, registry)
        assert {spec.imported for spec in ir.imports} == {"MdrHeading", "MdrText", "MdrButton"}
        assert ir.dependencies == {"@mdr/ui": "latest"}

    def test_imports_deduplicated(self, registry):
        doc = _doc([{"id": "a", "type": "MdrText"}, {"id": "b", "type": "MdrText"}])
        assert len(lower_document(doc, registry).imports) == 1

    def test_component_name(self, registry, sample_document):
        assert lower_document(sample_document, registry).name == "GreetingCard"
        assert lower_document(sample_document, registry, component_name="checkout-form").name == "CheckoutForm"
        assert to_component_name("123") == "MdrComponent"
        assert to_component_name(None) == "MdrComponent"

    def test_registered_type_without_import(self, registry):
        """Test an external type with no import mapping fails loudly."""
        registry.register("AcmeCard", lambda props, children: None)
        with pytest.raises(LoweringError):
            lower_document(_doc([{"id": "x", "type": "AcmeCard"}]), registry)

    @pytest.mark.asyncio
    async def test_loaded_library_imports(self, runtime, registry, profiles):
        """Test loaded library types import from their package with its version."""
        await runtime.ensure("demo")
        doc = _doc([{"id": "b", "type": "DemoButton"}, {"id": "m", "type": "DemoCardMeta"}])
        ir = lower_document(doc, registry, imports=ComponentImports(profiles))

        assert [n.element for n in ir.root.children] == ["Button", "Card.Meta"]
        assert {(spec.source, spec.imported) for spec in ir.imports} == {("demo-ui", "Button"), ("demo-ui", "Card")}
        assert ir.dependencies == {"demo-ui": "1.2.0"}


# ============================================================================
# Backends
# ============================================================================


@pytest.mark.unit
class TestReactBackend:
    """Test React output."""

    def test_sample(self, registry, sample_document):
        code = CodeGenerator(registry).generate(sample_document, "react")

        assert code.startswith("import React, { useState } from 'react';")
        assert 'import { MdrHeading } from "@mdr/ui";' in code
        assert "interface GreetingCardProps {" in code
        assert "  onSave?: () => void;" in code
        assert "export default function GreetingCard(inputProps: GreetingCardProps) {" in code
        assert 'const props = { label: "Save", ...inputProps };' in code
        assert "const [count, setCount] = useState(0);" in code
        assert "const state = { count };" in code
        assert '<div style={{"padding":16}}>' in code
        assert '{"Hello"}' in code
        assert "{state.count}" in code
        assert "<MdrButton onClick={props.onSave}>" in code

    def test_stateless(self, registry):
        code = CodeGenerator(registry).generate(_doc([{"id": "a", "type": "section"}]), "react")
        assert code.startswith("import React from 'react';")
        assert "export default function MdrComponent() {" in code
        assert "<section />" in code

    def test_missing_placeholder(self, registry):
        code = CodeGenerator(registry).generate(_doc([{"id": "w", "type": "AcmeWidget"}]), "react")
        assert '<div data-mir-missing={"AcmeWidget"} />' in code

    def test_navigate_handler(self, registry):
        doc = _doc([{"id": "b", "type": "button", "events": {
            "click": {"action": "navigate", "params": {"to": "/docs", "target": "_self"}},
        }}])
        code = CodeGenerator(registry).generate(doc, "react")
        assert "onClick={() => { window.location.assign(\"/docs\"); }}" in code


@pytest.mark.unit
class TestVueBackend:
    """Test Vue single-file component output."""

    def test_sample(self, registry, sample_document):
        code = CodeGenerator(registry).generate(sample_document, "vue")

        assert code.startswith("<template>\n")
        assert '<div :style="{&quot;padding&quot;:16}">' in code
        assert " Hello\n" in code
        assert '"Hello"' not in code
        assert "{{ state.count }}" in code
        assert '<MdrButton @click="props.onSave">' in code
        assert '<script setup lang="ts">' in code
        assert "import { reactive } from 'vue';" in code
        assert 'withDefaults(defineProps<{ label?: string; onSave?: () => void }>(), { label: "Save" });' in code
        assert "const state = reactive({ count: 0 });" in code

    def test_builtin_handler_hoisted(self, registry):
        doc = _doc([{"id": "go", "type": "button", "events": {
            "click": {"action": "executeGraph", "params": {"graph": "main"}},
        }}])
        code = CodeGenerator(registry).generate(doc, "vue")
        assert '@click="on_go_click"' in code
        assert "const on_go_click = () => {" in code
        assert "mdr:execute-graph" in code

    def test_literal_text_is_static_markup(self, registry):
        doc = _doc([{"id": "t", "type": "MdrText", "text": "a }} b <i>{{ state.secret }}"}])
        code = CodeGenerator(registry).generate(doc, "vue")
        assert "a &#125;&#125; b &lt;i&gt;&#123;&#123; state.secret &#125;&#125;" in code
        assert "}}" not in code.split("<script")[0]
        assert "<i>" not in code


# ============================================================================
# Generator
# ============================================================================


@pytest.mark.unit
class TestCodeGenerator:
    """Test generation requests."""

    def test_targets(self):
        assert {"react", "vue"} <= set(available_targets())

    def test_unknown_target(self, registry, sample_document):
        with pytest.raises(UnknownTargetError):
            CodeGenerator(registry).compile(sample_document, "svelte")

    def test_lowering_error_emits_nothing(self, registry):
        metrics = MetricsCollector()
        generator = CodeGenerator(registry, metrics=metrics)
        doc = _doc([{"id": "x", "type": "MdrText", "text": {"$state": "ghost"}}])
        with pytest.raises(LoweringError):
            generator.compile(doc)
        assert metrics.registry.get_sample_value(
            "mir_generations_total", {"target": "react", "status": "error"}
        ) == 1.0

    def test_result(self, registry, sample_document):
        result = CodeGenerator(registry, strategy="cdn-style").compile(sample_document, "react")
        assert result.generation_id.startswith("gen_")
        assert result.dependencies == {}
        assert 'from "https://esm.sh/@mdr/ui";' in result.code
        assert result.to_dict()["ir"]["name"] == "GreetingCard"

    def test_cache_hit(self, registry, sample_document):
        metrics = MetricsCollector()
        generator = CodeGenerator(registry, cache=GenerationCache(), metrics=metrics)
        first = generator.compile(sample_document)
        second = generator.compile(sample_document)
        assert second is first
        assert metrics.registry.get_sample_value("mir_generation_cache_hits_total") == 1.0

    def test_registry_change_invalidates(self, registry, sample_document):
        cache = GenerationCache()
        generator = CodeGenerator(registry, cache=cache)
        first = generator.compile(sample_document)
        registry.register("AcmeA", lambda props, children: None)
        assert cache.stats.size == 0
        assert generator.compile(sample_document).generation_id != first.generation_id

    def test_bundled_profiles(self, registry):
        """Test Ant Design and Material UI import styles."""
        generator = CodeGenerator(registry, profiles=create_default_profiles())
        registry.register("AntdFormItem", lambda props, children: None)
        registry.register("MuiTextField", lambda props, children: None)
        doc = _doc([{"id": "f", "type": "AntdFormItem"}, {"id": "t", "type": "MuiTextField"}])

        result = generator.compile(doc, "react")

        assert 'import { Form } from "antd";' in result.code
        assert 'import TextField from "@mui/material/TextField";' in result.code
        assert "<Form.Item />" in result.code
        assert result.dependencies == {"antd": "5.28.0", "@mui/material": "7.3.2"}

    def test_custom_backend(self, registry, sample_document, monkeypatch):
        """Test a registered backend receives the lowered document."""
        from mirkit.codegen import Backend, register_backend
        from mirkit.codegen.backends import base

        monkeypatch.setattr(base, "_BACKENDS", dict(base._BACKENDS))

        @register_backend
        class OutlineBackend(Backend):
            target = "outline"

            def emit(self, document):
                return " ".join(node.id for node in document.root.walk())

        assert "outline" in available_targets()
        assert CodeGenerator(registry).generate(sample_document, "outline") == "root title count save"

    def test_backend_without_target_rejected(self):
        from mirkit.codegen import Backend, register_backend

        class Nameless(Backend):
            def emit(self, document):
                return ""

        with pytest.raises(ValueError):
            register_backend(Nameless)
