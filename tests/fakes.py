"""In-memory library loader and demo profiles shared by the tests."""

import asyncio
from typing import Any

from mirkit.external import GroupDefinition, GroupedLibraryProfile, LoadError, ModuleLoader
from mirkit.registry import Element


def _component(tag: str):
    def render(props: dict[str, Any], children: list[Any]) -> Element:
        return Element(tag=tag, props=dict(props), children=list(children))

    return render


class FakeLoader(ModuleLoader):
    """In-memory loader counting calls; ``gate`` holds loads until set."""

    def __init__(self, namespaces: dict[str, Any]) -> None:
        self.namespaces = namespaces
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def load(self, entry: str) -> dict[str, Any]:
        self.calls.append(entry)
        if self.gate is not None:
            await self.gate.wait()
        if entry not in self.namespaces:
            raise LoadError(f"{entry} -> not found")
        return self.namespaces[entry]


class DemoProfile(GroupedLibraryProfile):
    library_id = "demo"
    package_name = "demo-ui"
    version = "1.2.0"
    runtime_prefix = "Demo"
    display_name = "Demo UI"
    groups = (
        GroupDefinition("demo-basic", "Demo / Basic", ("Button", "Card", "Card.Meta")),
        GroupDefinition("demo-form", "Demo / Form", ("Input",)),
    )
    default_props = {"Button": {"size": "small"}}

    def entry_candidates(self) -> list[str]:
        return [f"fake://{self.library_id}/index.js"]


class BrokenProfile(DemoProfile):
    library_id = "broken"
    package_name = "broken-ui"
    runtime_prefix = "Broken"


def demo_namespace() -> dict[str, Any]:
    card = _component("section")
    card.Meta = _component("header")
    return {
        "Button": _component("button"),
        "Card": card,
        "Input": _component("input"),
        "theme": {"primary": "#1677ff"},
    }

