"""Material UI profile."""

from ...registry import AdapterContext, AdapterResult, ComponentAdapter
from ..profiles import GroupDefinition, GroupedLibraryProfile, cache_bust_token
from ..types import ComponentOverride, LibraryManifest

MUI_VERSION = "7.3.2"

DIALOG_DEFAULTS = {
    "open": False,
    "fullWidth": True,
    "maxWidth": "sm",
    "disablePortal": True,
    "hideBackdrop": True,
}


def _text_children(context: AdapterContext) -> AdapterResult:
    props = dict(context.props)
    children = props.get("children")
    if children is None and context.text:
        children = str(context.text)
    return AdapterResult(props=props, children=children)


def _input_value(context: AdapterContext) -> AdapterResult:
    props = dict(context.props)
    if context.text is not None and "value" not in props:
        props["value"] = str(context.text)
    return AdapterResult(props=props)


def _dialog(context: AdapterContext) -> AdapterResult:
    result = _text_children(context)
    for key, value in DIALOG_DEFAULTS.items():
        result.props.setdefault(key, value)
    return result


MUI_TEXT_ADAPTER = ComponentAdapter(name="mui-text", kind="custom", map_props=_text_children)
MUI_INPUT_ADAPTER = ComponentAdapter(
    name="mui-input", kind="custom", supports_children=False, map_props=_input_value
)
MUI_DIALOG_ADAPTER = ComponentAdapter(name="mui-dialog", kind="custom", map_props=_dialog)

MUI_GROUPS = (
    GroupDefinition(
        "mui-inputs",
        "Material UI / Inputs",
        ("Button", "TextField", "Checkbox", "Radio", "Switch", "Slider"),
    ),
    GroupDefinition("mui-surfaces", "Material UI / Surfaces", ("Card", "Paper", "Accordion", "Tabs")),
    GroupDefinition("mui-layout", "Material UI / Layout", ("Box", "Stack", "Grid", "Container")),
    GroupDefinition(
        "mui-feedback",
        "Material UI / Feedback",
        ("Alert", "Snackbar", "Dialog", "CircularProgress"),
    ),
)

MUI_MANIFEST = LibraryManifest(
    component_overrides={
        "Button": ComponentOverride(behavior_tags=["action"]),
        "Dialog": ComponentOverride(behavior_tags=["overlay"]),
        "TextField": ComponentOverride(display_name="Text Field"),
    }
)


class MuiProfile(GroupedLibraryProfile):
    """Material UI loaded from esm.sh."""

    library_id = "mui"
    package_name = "@mui/material"
    version = MUI_VERSION
    runtime_prefix = "Mui"
    import_style = "default"
    display_name = "Material UI"
    groups = MUI_GROUPS
    exclude_exports = frozenset(
        {"default", "colors", "styled", "useTheme", "ThemeProvider", "createTheme", "alpha", "darken", "lighten"}
    )
    manifest = MUI_MANIFEST
    default_adapter = MUI_TEXT_ADAPTER
    adapters = {"TextField": MUI_INPUT_ADAPTER, "Dialog": MUI_DIALOG_ADAPTER}
    default_props = {
        "Button": {"variant": "contained", "size": "medium"},
        "TextField": {"label": "Text Field", "size": "small", "variant": "outlined"},
        "Card": {"variant": "outlined"},
        "Dialog": dict(DIALOG_DEFAULTS),
    }

    def entry_candidates(self) -> list[str]:
        token = cache_bust_token()
        deps = "external=react,react-dom&deps=@emotion/react,@emotion/styled"
        return [
            f"https://esm.sh/@mui/material@{self.version}?target=es2022&{deps}&v={token}",
            f"https://esm.sh/v135/@mui/material@{self.version}/es2022/material.mjs?{deps}&v={token}",
        ]
