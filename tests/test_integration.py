"""End-to-end tests through the dependency injection container."""

from typing import Any

import pytest

from mirkit.codegen import CodeGenerator, LoweringError
from mirkit.core import get_settings
from mirkit.document import load_document
from mirkit.external import (
    CanonicalExternalComponent,
    ExternalLibraryRuntime,
    LibraryDescriptor,
    LibraryProfile,
    LoadStatus,
    ProfileRegistry,
    ScanMode,
)
from mirkit.registry import ComponentRegistry
from mirkit.renderer import LiveRenderer


class KitProfile(LibraryProfile):
    """Re-exposes two kit components as an importable-module library."""

    include_paths = ("MdrButton", "MdrText")
    scan_mode = ScanMode.INCLUDE_ONLY
    display_name = "Kit"

    def descriptor(self) -> LibraryDescriptor:
        return LibraryDescriptor(
            library_id="kit",
            package_name="mirkit",
            version="0.1.0",
            source="python",
            entry_candidates=["mirkit.registry.kit"],
        )

    def to_canonical_components(self, namespace: Any, paths: list[str]) -> list[CanonicalExternalComponent]:
        from mirkit.registry import CUSTOM_ADAPTER

        return [
            CanonicalExternalComponent(
                library_id="kit",
                component_name=path,
                path=path,
                runtime_type=f"Kit{path[3:]}",
                item_id=f"kit-{path[3:].lower()}",
                implementation=namespace[path],
                adapter=CUSTOM_ADAPTER,
            )
            for path in paths
        ]


@pytest.mark.integration
def test_container_shares_registry(di_container):
    """Runtime, generator and renderer see one registry."""
    registry = di_container.get(ComponentRegistry)
    assert di_container.get(ExternalLibraryRuntime).registry is registry
    assert di_container.get(CodeGenerator).registry is registry
    assert di_container.get(LiveRenderer).registry is registry


@pytest.mark.integration
def test_container_follows_settings(di_container):
    generator = di_container.get(CodeGenerator)
    runtime = di_container.get(ExternalLibraryRuntime)
    assert generator.cache is None
    assert runtime.enrich is False
    assert set(runtime.loaders) == {"esm.sh", "python"}
    assert set(di_container.get(ProfileRegistry).library_ids()) == {"antd", "mui"}
    assert di_container.get(type(get_settings())) is get_settings()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_load_render_generate(di_container):
    """A loaded library is usable by both the renderer and the generator."""
    di_container.get(ProfileRegistry).register_profile(KitProfile())
    runtime = di_container.get(ExternalLibraryRuntime)

    assert await runtime.ensure("kit") == []
    assert runtime.state("kit").status == LoadStatus.SUCCESS
    assert runtime.groups("kit")[0].id == "kit-all"

    document = load_document(
        """```json
        {"ui": {"root": {"id": "root", "type": "container", "children": [
            {"id": "t", "type": "KitText", "text": "From kit"},
            {"id": "u", "type": "Unloaded"}
        ]}}}
        ```"""
    )

    tree = di_container.get(LiveRenderer).render(document)
    assert tree.find("t").text_content() == "From kit"
    assert tree.find("u").props == {"data-mir-missing": "Unloaded"}

    # kit types have no package import mapping outside the Mdr prefix
    with pytest.raises(LoweringError) as excinfo:
        di_container.get(CodeGenerator).compile(document, "react")
    assert excinfo.value.node_id == "t"

    runtime.unregister_library("kit")
    assert di_container.get(ComponentRegistry).resolve("KitText").missing
