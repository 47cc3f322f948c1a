"""
Mdr UI kit.

Every ``Mdr*`` callable here is picked up by built-in discovery. Components
take ``(props, children)`` and return an Element.
"""

from typing import Any

from .discovery import forward_ref
from .element import Element


def _kit_component(tag: str, name: str, text_prop: str | None = None):
    def component(props: dict[str, Any], children: list[Any]) -> Element:
        attrs = {k: v for k, v in props.items() if k != "dataAttributes"}
        data = props.get("dataAttributes")
        if isinstance(data, dict):
            attrs.update(data)
        attrs["data-mdr"] = name
        content = list(children)
        if text_prop and text_prop in attrs and not content:
            content = [str(attrs.pop(text_prop))]
        return Element(tag=tag, props=attrs, children=content)

    component.__name__ = name
    component.__qualname__ = name
    return component


# Layout
MdrDiv = _kit_component("div", "MdrDiv")
MdrSection = _kit_component("section", "MdrSection")
MdrCard = _kit_component("div", "MdrCard")
MdrPanel = _kit_component("div", "MdrPanel")

# Typography
MdrText = _kit_component("span", "MdrText")
MdrHeading = _kit_component("h2", "MdrHeading")
MdrParagraph = _kit_component("p", "MdrParagraph")

# Controls
MdrButton = _kit_component("button", "MdrButton", text_prop="text")
MdrButtonLink = _kit_component("a", "MdrButtonLink", text_prop="text")
MdrInput = _kit_component("input", "MdrInput")
MdrTextarea = _kit_component("textarea", "MdrTextarea", text_prop="value")
MdrSearch = _kit_component("input", "MdrSearch")
MdrLink = _kit_component("a", "MdrLink", text_prop="text")
MdrImage = _kit_component("img", "MdrImage")


def MdrIcon(props: dict[str, Any], children: list[Any]) -> Element:
    icon = props.get("icon")
    attrs = {k: v for k, v in props.items() if k != "icon"}
    attrs["data-mdr"] = "MdrIcon"
    if isinstance(icon, dict):
        attrs["data-icon"] = f"{icon.get('provider')}:{icon.get('name')}"
    return Element(tag="i", props=attrs)


@forward_ref("MdrIconLink")
def MdrIconLink(props: dict[str, Any], children: list[Any]) -> Element:
    link_props = {k: v for k, v in props.items() if k != "icon"}
    link_props["data-mdr"] = "MdrIconLink"
    return Element(tag="a", props=link_props, children=[MdrIcon({"icon": props.get("icon")}, [])])


# Design tokens: shares the naming prefix but is plain data
MdrTokens = {
    "radius": {"sm": 4, "md": 8, "lg": 12},
    "spacing": {"xs": 4, "sm": 8, "md": 16, "lg": 24},
}
