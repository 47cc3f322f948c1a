"""Built-in adapters for native elements and the Mdr kit."""

from typing import Any

from .types import AdapterContext, AdapterResult, ComponentAdapter

DEFAULT_ICON_PROVIDER = "lucide"


def _input_mapping(context: AdapterContext) -> AdapterResult:
    props = dict(context.props)
    if context.text is not None and "value" not in props and "defaultValue" not in props:
        props["defaultValue"] = context.text
    return AdapterResult(props=props)


def _text_prop(prop: str, stringify: bool = True):
    """Mapping that moves text into ``prop`` unless the author already set it."""

    def mapping(context: AdapterContext) -> AdapterResult:
        props = dict(context.props)
        if context.text is not None and prop not in props:
            props[prop] = str(context.text) if stringify else context.text
        return AdapterResult(props=props)

    return mapping


def resolve_icon_props(props: dict[str, Any]) -> dict[str, Any]:
    """
    Collapse ``iconRef`` / ``iconName`` / ``iconProvider`` into one ``icon`` prop.

    Examples:
        >>> resolve_icon_props({"iconName": "home"})
        {'icon': {'provider': 'lucide', 'name': 'home'}}
    """
    result = dict(props)
    icon_ref = result.pop("iconRef", None)
    icon_name = result.pop("iconName", None)
    provider = result.pop("iconProvider", None)

    if icon_ref is None and isinstance(icon_name, str):
        icon_ref = {
            "provider": provider if isinstance(provider, str) else DEFAULT_ICON_PROVIDER,
            "name": icon_name,
        }
    if isinstance(icon_ref, dict) and isinstance(icon_ref.get("name"), str):
        result["icon"] = icon_ref
    return result


def _icon_mapping(context: AdapterContext) -> AdapterResult:
    return AdapterResult(props=resolve_icon_props(context.props))


# Native HTML
HTML_ADAPTER = ComponentAdapter(name="html")
HTML_TEXT_ADAPTER = ComponentAdapter(name="html-text")
HTML_BUTTON_ADAPTER = ComponentAdapter(name="html-button")
HTML_INPUT_ADAPTER = ComponentAdapter(
    name="html-input", supports_children=False, is_void=True, map_props=_input_mapping
)

# Mdr kit
MDR_ADAPTER = ComponentAdapter(name="mdr", kind="mdr")
MDR_TEXT_ADAPTER = ComponentAdapter(name="mdr-text", kind="mdr")
MDR_BUTTON_ADAPTER = ComponentAdapter(
    name="mdr-button", kind="mdr", supports_children=False, map_props=_text_prop("text", stringify=False)
)
MDR_INPUT_ADAPTER = ComponentAdapter(
    name="mdr-input", kind="mdr", supports_children=False, map_props=_text_prop("value")
)
MDR_LINK_ADAPTER = ComponentAdapter(
    name="mdr-link", kind="mdr", supports_children=False, map_props=_text_prop("text")
)
MDR_ICON_ADAPTER = ComponentAdapter(
    name="mdr-icon", kind="mdr", supports_children=False, map_props=_icon_mapping
)

# Externally loaded libraries
CUSTOM_ADAPTER = ComponentAdapter(name="custom", kind="custom")

MDR_ADAPTER_OVERRIDES: dict[str, ComponentAdapter] = {
    "MdrText": MDR_TEXT_ADAPTER,
    "MdrHeading": MDR_TEXT_ADAPTER,
    "MdrParagraph": MDR_TEXT_ADAPTER,
    "MdrButton": MDR_BUTTON_ADAPTER,
    "MdrButtonLink": MDR_BUTTON_ADAPTER,
    "MdrInput": MDR_INPUT_ADAPTER,
    "MdrTextarea": MDR_INPUT_ADAPTER,
    "MdrSearch": MDR_INPUT_ADAPTER,
    "MdrIcon": MDR_ICON_ADAPTER,
    "MdrIconLink": MDR_ICON_ADAPTER,
    "MdrLink": MDR_LINK_ADAPTER,
}

ADAPTERS_BY_NAME: dict[str, ComponentAdapter] = {
    adapter.name: adapter
    for adapter in (
        HTML_ADAPTER,
        HTML_TEXT_ADAPTER,
        HTML_BUTTON_ADAPTER,
        HTML_INPUT_ADAPTER,
        MDR_ADAPTER,
        MDR_TEXT_ADAPTER,
        MDR_BUTTON_ADAPTER,
        MDR_INPUT_ADAPTER,
        MDR_LINK_ADAPTER,
        MDR_ICON_ADAPTER,
        CUSTOM_ADAPTER,
    )
}
