"""Ant Design profile."""

from ...registry import AdapterContext, AdapterResult, ComponentAdapter
from ..profiles import GroupDefinition, GroupedLibraryProfile, cache_bust_token
from ..types import ComponentOverride, LibraryManifest

ANTD_VERSION = "5.28.0"


def _text_children(context: AdapterContext) -> AdapterResult:
    props = dict(context.props)
    children = props.get("children")
    if children is None and context.text is not None:
        children = str(context.text)
    return AdapterResult(props=props, children=children)


def _input_value(context: AdapterContext) -> AdapterResult:
    props = dict(context.props)
    if context.text is not None and "value" not in props:
        props["value"] = str(context.text)
    return AdapterResult(props=props)


def _inline_modal(context: AdapterContext) -> AdapterResult:
    result = _text_children(context)
    for key, value in (("open", False), ("getContainer", False), ("mask", False)):
        result.props.setdefault(key, value)
    return result


ANTD_TEXT_ADAPTER = ComponentAdapter(name="antd-text", kind="custom", map_props=_text_children)
ANTD_INPUT_ADAPTER = ComponentAdapter(
    name="antd-input", kind="custom", supports_children=False, map_props=_input_value
)
ANTD_MODAL_ADAPTER = ComponentAdapter(name="antd-modal", kind="custom", map_props=_inline_modal)

INPUT_PATHS = (
    "Input",
    "Input.Password",
    "Input.Search",
    "Input.TextArea",
    "InputNumber",
    "AutoComplete",
    "Mentions",
)

ANTD_GROUPS = (
    GroupDefinition("antd-general", "Ant Design / General", ("App", "Button", "FloatButton")),
    GroupDefinition(
        "antd-layout",
        "Ant Design / Layout",
        (
            "Divider",
            "Flex",
            "Layout",
            "Layout.Header",
            "Layout.Content",
            "Layout.Footer",
            "Layout.Sider",
            "Space",
            "Space.Compact",
            "Splitter",
        ),
    ),
    GroupDefinition(
        "antd-navigation",
        "Ant Design / Navigation",
        ("Affix", "Anchor", "Breadcrumb", "Dropdown", "Menu", "Pagination", "Steps", "Tabs"),
    ),
    GroupDefinition(
        "antd-data-entry",
        "Ant Design / Data Entry",
        (
            "AutoComplete",
            "Cascader",
            "Checkbox",
            "ColorPicker",
            "DatePicker",
            "Form",
            "Form.Item",
            "Input",
            "Input.Password",
            "Input.Search",
            "Input.TextArea",
            "InputNumber",
            "Mentions",
            "Radio",
            "Rate",
            "Select",
            "Slider",
            "Switch",
            "TimePicker",
            "Transfer",
            "TreeSelect",
            "Upload",
        ),
    ),
    GroupDefinition(
        "antd-data-display",
        "Ant Design / Data Display",
        (
            "Avatar",
            "Badge",
            "Calendar",
            "Card",
            "Card.Meta",
            "Carousel",
            "Collapse",
            "Descriptions",
            "Empty",
            "Image",
            "List",
            "List.Item",
            "List.Item.Meta",
            "Popover",
            "QRCode",
            "Segmented",
            "Statistic",
            "Table",
            "Tag",
            "Timeline",
            "Tooltip",
            "Tour",
            "Tree",
            "Typography",
            "Typography.Text",
            "Typography.Title",
            "Typography.Paragraph",
            "Typography.Link",
        ),
    ),
    GroupDefinition(
        "antd-feedback",
        "Ant Design / Feedback",
        ("Alert", "Drawer", "Modal", "Popconfirm", "Progress", "Result", "Skeleton", "Spin", "Watermark"),
    ),
)

ANTD_MANIFEST = LibraryManifest(
    component_overrides={
        "Button": ComponentOverride(behavior_tags=["action"]),
        "Modal": ComponentOverride(behavior_tags=["overlay"], codegen_hints={"inlinePortal": True}),
        "Drawer": ComponentOverride(behavior_tags=["overlay"], codegen_hints={"inlinePortal": True}),
        "Form.Item": ComponentOverride(display_name="Form Item"),
    }
)


class AntdProfile(GroupedLibraryProfile):
    """Ant Design loaded from esm.sh."""

    library_id = "antd"
    package_name = "antd"
    version = ANTD_VERSION
    runtime_prefix = "Antd"
    display_name = "Ant Design"
    groups = ANTD_GROUPS
    exclude_exports = frozenset({"default", "message", "notification", "theme", "version", "unstableSetRender"})
    manifest = ANTD_MANIFEST
    default_adapter = ANTD_TEXT_ADAPTER
    adapters = {"Modal": ANTD_MODAL_ADAPTER, **{path: ANTD_INPUT_ADAPTER for path in INPUT_PATHS}}
    default_props = {
        "Button": {"type": "primary", "size": "middle"},
        "Input": {"placeholder": "Input", "size": "middle"},
        "Modal": {"open": False, "title": "Modal Title", "getContainer": False, "mask": False, "footer": None},
        "Drawer": {"open": False, "title": "Drawer Title"},
    }

    def entry_candidates(self) -> list[str]:
        token = cache_bust_token()
        return [
            f"https://esm.sh/v135/antd@{self.version}/es2022/antd.mjs?external=react,react-dom&v={token}",
            f"https://esm.sh/antd@{self.version}?target=es2022&external=react,react-dom&v={token}",
        ]
