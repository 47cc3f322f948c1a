"""Built-in catalogue: native elements, headless primitives and the Mdr kit."""

from typing import Any

from . import kit
from .adapters import (
    HTML_ADAPTER,
    HTML_BUTTON_ADAPTER,
    HTML_INPUT_ADAPTER,
    HTML_TEXT_ADAPTER,
    MDR_ADAPTER,
    MDR_ADAPTER_OVERRIDES,
)
from .discovery import scan_namespace
from .element import Element
from .types import ComponentAdapter, RegistryEntry

KIT_PREFIX = "Mdr"

NATIVE_COMPONENTS: dict[str, tuple[str, ComponentAdapter]] = {
    "container": ("div", HTML_ADAPTER),
    "div": ("div", HTML_ADAPTER),
    "text": ("span", HTML_TEXT_ADAPTER),
    "button": ("button", HTML_BUTTON_ADAPTER),
    "input": ("input", HTML_INPUT_ADAPTER),
}

HEADLESS_COMPONENTS: dict[str, tuple[str, ComponentAdapter]] = {
    "RadixSlot": ("span", HTML_TEXT_ADAPTER),
    "RadixLabel": ("label", HTML_TEXT_ADAPTER),
    "RadixSeparator": ("div", HTML_ADAPTER),
    "RadixAccordion": ("div", HTML_ADAPTER),
    "RadixTabs": ("div", HTML_ADAPTER),
    "RadixDialog": ("div", HTML_ADAPTER),
    "RadixPopover": ("div", HTML_ADAPTER),
    "RadixTooltip": ("div", HTML_ADAPTER),
    "RadixDropdownMenu": ("div", HTML_ADAPTER),
    "RadixSwitch": ("button", HTML_BUTTON_ADAPTER),
}


def create_headless_primitive(tag: str, name: str):
    """Unstyled primitive rendering a plain host element."""

    def primitive(props: dict[str, Any], children: list[Any]) -> Element:
        return Element(tag=tag, props=dict(props), children=list(children))

    primitive.__name__ = name
    primitive.display_name = f"Headless{tag.capitalize()}"
    return primitive


def discover_kit(namespace: Any = kit) -> dict[str, RegistryEntry]:
    """
    Auto-register every kit component, then apply adapter overrides.

    Overrides always win over the default kit adapter.
    """
    entries = {
        name: RegistryEntry(type=name, implementation=impl, adapter=MDR_ADAPTER)
        for name, impl in scan_namespace(namespace, prefix=KIT_PREFIX).items()
    }
    for name, adapter in MDR_ADAPTER_OVERRIDES.items():
        if name in entries:
            entries[name] = RegistryEntry(type=name, implementation=entries[name].implementation, adapter=adapter)
    return entries


def create_builtin_entries() -> dict[str, RegistryEntry]:
    """Fresh built-in partition."""
    entries: dict[str, RegistryEntry] = {}
    for type_name, (tag, adapter) in NATIVE_COMPONENTS.items():
        entries[type_name] = RegistryEntry(type=type_name, implementation=tag, adapter=adapter)
    entries.update(discover_kit())
    for type_name, (tag, adapter) in HEADLESS_COMPONENTS.items():
        entries[type_name] = RegistryEntry(
            type=type_name,
            implementation=create_headless_primitive(tag, type_name),
            adapter=adapter,
        )
    return entries
