"""Tests for the bundled Ant Design and Material UI profiles."""

import pytest

from mirkit.document import normalize
from mirkit.external import EsmExportLoader, ExternalLibraryRuntime, LoadStatus, create_default_profiles
from mirkit.external.libraries import AntdProfile, MuiProfile
from mirkit.external.libraries.antd import ANTD_INPUT_ADAPTER, ANTD_MODAL_ADAPTER
from mirkit.registry import AdapterContext
from mirkit.renderer import LiveRenderer

ANTD_MODULE = """
export function Button() {}
export const Form = createForm();
export const Input = forwardRef(InputImpl);
export { Modal };
export const message = createMessage();
export const version = "5.28.0";
"""


class AnyUrlClient:
    """Serves one module for every package URL."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.urls: list[str] = []

    async def fetch_text(self, url: str) -> str | None:
        self.urls.append(url)
        return self.source


@pytest.fixture
def antd_runtime(registry):
    return ExternalLibraryRuntime(
        registry=registry,
        profiles=create_default_profiles(),
        loaders={"esm.sh": EsmExportLoader(AnyUrlClient(ANTD_MODULE))},
        enrich=False,
    )


@pytest.mark.unit
class TestProfiles:
    """Test profile naming rules."""

    def test_runtime_types(self):
        antd = AntdProfile()
        assert antd.runtime_type("Form.Item") == "AntdFormItem"
        assert antd.item_id("Input.TextArea") == "antd-input-text-area"
        assert MuiProfile().runtime_type("TextField") == "MuiTextField"

    def test_entry_candidates_cache_busted(self):
        candidates = AntdProfile().descriptor().entry_candidates
        assert len(candidates) == 2
        assert all("antd@5.28.0" in url and "&v=" in url for url in candidates)

    def test_input_adapters(self):
        profile = AntdProfile()
        for path in ("Input", "Input.TextArea", "InputNumber"):
            assert profile.adapter_for(path) is ANTD_INPUT_ADAPTER
        assert profile.adapter_for("Modal") is ANTD_MODAL_ADAPTER

    def test_modal_renders_inline(self):
        result = ANTD_MODAL_ADAPTER.apply(AdapterContext(node_id="m", props={"open": True}, style={}, text="Body"))
        assert result.props == {"open": True, "getContainer": False, "mask": False}
        assert result.children == "Body"

    def test_mui_dialog_defaults(self):
        adapter = MuiProfile().adapter_for("Dialog")
        result = adapter.apply(AdapterContext(node_id="d", props={}, style={}, text=None))
        assert result.props["disablePortal"] is True
        assert result.props["open"] is False


@pytest.mark.unit
class TestAntdLoad:
    """Test loading Ant Design from a module source."""

    @pytest.mark.asyncio
    async def test_include_paths_resolved(self, antd_runtime, registry):
        """Test static members of exported components are registered."""
        assert await antd_runtime.ensure("antd") == []

        paths = {c.path for c in antd_runtime.components("antd")}
        assert paths == {
            "Button", "Form", "Form.Item", "Input", "Input.Password",
            "Input.Search", "Input.TextArea", "Modal",
        }
        assert registry.has("AntdFormItem")
        assert not registry.has("AntdMessage")
        assert len(antd_runtime.loaders["esm.sh"].client.urls) == 1

    @pytest.mark.asyncio
    async def test_manifest_applied(self, antd_runtime):
        await antd_runtime.ensure("antd")
        by_path = {c.path: c for c in antd_runtime.components("antd")}
        assert by_path["Form.Item"].component_name == "Form Item"
        assert by_path["Modal"].codegen_hints == {"inlinePortal": True}
        assert by_path["Button"].default_props == {"type": "primary", "size": "middle"}
        assert [g.id for g in antd_runtime.groups("antd")] == ["antd-general", "antd-data-entry", "antd-feedback"]

    @pytest.mark.asyncio
    async def test_rendered_through_registry(self, antd_runtime, registry):
        await antd_runtime.ensure("antd")
        doc = normalize({"ui": {"root": {"id": "root", "type": "container", "children": [
            {"id": "m", "type": "AntdModal", "text": "Hi"},
            {"id": "i", "type": "AntdInput", "text": "typed"},
        ]}}})
        tree = LiveRenderer(registry).render(doc)

        modal = tree.find("m")
        assert modal.tag == "Modal"
        assert modal.props["getContainer"] is False
        assert modal.text_content() == "Hi"
        assert tree.find("i").props["value"] == "typed"

    @pytest.mark.asyncio
    async def test_mui_unavailable_isolated(self, antd_runtime):
        """Test a library whose entry candidates all fail is isolated."""
        antd_runtime.loaders["esm.sh"].client = AnyUrlClient("")
        diagnostics = await antd_runtime.ensure_many(["mui"])
        assert diagnostics[0].code == "ELIB-1001"
        assert antd_runtime.state("mui").status == LoadStatus.ERROR
