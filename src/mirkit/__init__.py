"""
mirkit
Declarative UI documents: normalization, component resolution, external
component libraries, live rendering and code generation.
"""

from .core import Settings, create_container, get_settings
from .document import MIRDocument, load_document, normalize, resolve_from_container
from .registry import ComponentRegistry
from .external import ExternalLibraryRuntime
from .codegen import CodeGenerator
from .renderer import LiveRenderer

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "create_container",
    "get_settings",
    "MIRDocument",
    "load_document",
    "normalize",
    "resolve_from_container",
    "ComponentRegistry",
    "ExternalLibraryRuntime",
    "CodeGenerator",
    "LiveRenderer",
]
