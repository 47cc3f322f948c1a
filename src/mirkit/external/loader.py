"""
Library Loaders
Turn a descriptor's entry candidates into an export namespace.
"""

import importlib
import re
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..clients import CDNClient
from ..core import get_logger
from ..registry import Element
from ..registry.discovery import namespace_items
from . import diagnostics as diag
from .types import Diagnostic, LibraryDescriptor

logger = get_logger(__name__)

MAX_REEXPORT_DEPTH = 2

_EXPORT_DECL = re.compile(r"export\s+(?:default\s+)?(?:async\s+)?(function\*?|class)\s+([A-Za-z_$][\w$]*)")
_EXPORT_CONST = re.compile(r"export\s+(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=\s*(\S)")
_EXPORT_LIST = re.compile(r"export\s*\{([^}]*)\}(?!\s*from)")
_EXPORT_FROM = re.compile(r"export\s*(?:\*|\{[^}]*\})\s*from\s*[\"']([^\"']+)[\"']")


class LoadError(Exception):
    """A single entry candidate could not be loaded."""

    pass


class RemoteComponent:
    """
    Handle for a component exported by a remote ES module.

    Carries the element-type marker; rendering it produces a host element
    that names the remote export. Static members (``Layout.Header``) are
    reachable as PascalCase attributes.
    """

    __element_type__ = "remote"

    def __init__(self, module_url: str, path: str) -> None:
        self.module_url = module_url
        self.path = path
        self.display_name = path

    def __getattr__(self, name: str) -> "RemoteComponent":
        if name[:1].isupper():
            return RemoteComponent(self.module_url, f"{self.path}.{name}")
        raise AttributeError(name)

    def render(self, props: dict[str, Any], children: list[Any]) -> Element:
        return Element(
            tag=self.path,
            props={**props, "data-remote-module": self.module_url},
            children=list(children),
        )

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RemoteComponent) and (other.module_url, other.path) == (self.module_url, self.path)

    def __hash__(self) -> int:
        return hash((self.module_url, self.path))

    def __repr__(self) -> str:
        return f"RemoteComponent({self.path!r})"


class RemoteValue:
    """Non-component remote export (constants, helpers, hooks)."""

    def __init__(self, module_url: str, name: str) -> None:
        self.module_url = module_url
        self.name = name

    def __repr__(self) -> str:
        return f"RemoteValue({self.name!r})"


def parse_esm_exports(source: str, module_url: str) -> dict[str, Any]:
    """
    Named exports of an ES module, as remote handles.

    ``export function``/``class`` and ``export const X = <call or arrow>``
    become components; ``export const X = {...}`` / ``[...]`` literals are
    plain data. Only PascalCase names can be components.
    """
    exports: dict[str, Any] = {}

    def add(name: str, component: bool) -> None:
        if component and name[:1].isupper():
            exports[name] = RemoteComponent(module_url, name)
        else:
            exports.setdefault(name, RemoteValue(module_url, name))

    for _, name in _EXPORT_DECL.findall(source):
        add(name, component=True)
    for name, first in _EXPORT_CONST.findall(source):
        add(name, component=first not in "{[\"'`0123456789")
    for block in _EXPORT_LIST.findall(source):
        for spec in block.split(","):
            parts = spec.strip().split()
            if not parts:
                continue
            add(parts[-1], component=True)
    exports.pop("default", None)
    return exports


def find_reexports(source: str, module_url: str) -> list[str]:
    """Absolute URLs of ``export ... from`` targets."""
    base = httpx.URL(module_url)
    return [str(base.join(target)) for target in _EXPORT_FROM.findall(source)]


class ModuleLoader(ABC):
    """Loads one entry candidate into an export namespace."""

    @abstractmethod
    async def load(self, entry: str) -> dict[str, Any]:
        """
        Raises:
            LoadError: If the entry cannot be loaded
        """
        pass


class PythonModuleLoader(ModuleLoader):
    """Entry candidates are importable module paths."""

    async def load(self, entry: str) -> dict[str, Any]:
        try:
            module = importlib.import_module(entry)
        except ImportError as e:
            raise LoadError(f"{entry} -> {e}") from e
        return namespace_items(module)


class EsmExportLoader(ModuleLoader):
    """Entry candidates are ES module URLs fetched through the CDN client."""

    def __init__(self, client: CDNClient) -> None:
        self.client = client

    async def load(self, entry: str) -> dict[str, Any]:
        exports = await self._load_url(entry, depth=0)
        if not exports:
            raise LoadError(f"{entry} -> no named exports")
        return exports

    async def _load_url(self, url: str, depth: int) -> dict[str, Any]:
        source = await self.client.fetch_text(url)
        if source is None:
            raise LoadError(f"{url} -> fetch failed")
        exports = parse_esm_exports(source, url)
        if depth < MAX_REEXPORT_DEPTH:
            for target in find_reexports(source, url):
                for name, value in (await self._load_url(target, depth + 1)).items():
                    exports.setdefault(name, value)
        return exports


async def load_entry(
    descriptor: LibraryDescriptor,
    loader: ModuleLoader,
    diagnostics: list[Diagnostic],
) -> dict[str, Any] | None:
    """
    Try entry candidates in order; first success wins.

    Appends a load-failed diagnostic and returns None when every candidate fails.
    """
    attempts: list[str] = []
    for entry in descriptor.entry_candidates:
        try:
            namespace = await loader.load(entry)
            logger.info("entry_loaded", entry=entry, exports=len(namespace))
            return namespace
        except LoadError as e:
            attempts.append(str(e))
            logger.warning("entry_failed", entry=entry, error=str(e))

    target = f"{descriptor.package_name}@{descriptor.version} from {descriptor.source}"
    diagnostics.append(diag.load_failed(descriptor.library_id, target, attempts))
    return None
