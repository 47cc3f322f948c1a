"""
Library Profiles
Library-specific glue: descriptor, catalogue conversion and palette groups.
"""

import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..core import get_logger
from ..registry import CUSTOM_ADAPTER, ComponentAdapter, get_value_by_path, is_component_like
from .dts import resolve_dts_urls
from .types import (
    CanonicalExternalComponent,
    CanonicalGroup,
    LibraryDescriptor,
    LibraryManifest,
    ScanMode,
)

logger = get_logger(__name__)


def to_pascal_case(value: str) -> str:
    """``"text-field"`` -> ``"TextField"``; already-Pascal input is kept."""
    parts = [part for part in re.split(r"[^A-Za-z0-9]+", value) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)


def to_kebab_case(value: str) -> str:
    """``"TextArea"`` -> ``"text-area"``."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value)
    return re.sub(r"[^A-Za-z0-9]+", "-", spaced).strip("-").lower()


def cache_bust_token() -> str:
    """Changes every millisecond so retries bypass stale CDN artifacts."""
    return format(time.time_ns() // 1_000_000, "x")


class LibraryProfile(ABC):
    """
    Contract a library adapter module supplies to the runtime.

    Subclasses implement ``descriptor`` and ``to_canonical_components``;
    scanning behaviour is tuned through the class attributes.
    """

    include_paths: tuple[str, ...] = ()
    exclude_exports: frozenset[str] = frozenset()
    scan_mode: ScanMode = ScanMode.DISCOVER
    manifest: LibraryManifest | None = None
    display_name: str | None = None

    @abstractmethod
    def descriptor(self) -> LibraryDescriptor:
        """Where and how to load the library."""
        pass

    @abstractmethod
    def to_canonical_components(self, namespace: Any, paths: list[str]) -> list[CanonicalExternalComponent]:
        """Convert scanned export paths into canonical components."""
        pass

    def to_groups(self, components: list[CanonicalExternalComponent]) -> list[CanonicalGroup]:
        """Palette grouping; one group per library unless overridden."""
        if not components:
            return []
        library_id = components[0].library_id
        return [CanonicalGroup(id=f"{library_id}-all", title=self.display_name or library_id, items=tuple(components))]

    def declaration_urls(self, component_path: str) -> list[str]:
        """Candidate ``.d.ts`` URLs used for prop option enrichment."""
        return resolve_dts_urls(self.descriptor(), component_path)


@dataclass(frozen=True)
class GroupDefinition:
    id: str
    title: str
    components: tuple[str, ...]


class GroupedLibraryProfile(LibraryProfile):
    """
    Profile for a component library with a curated palette.

    Runtime types are ``<prefix><PascalPath>`` (``Form.Item`` -> ``AntdFormItem``);
    item ids are ``<libraryId>-<kebab-path>``. ``import_style`` tells the code
    generator whether components are named exports of the package
    (``named``) or default exports of per-component modules (``default``).
    """

    library_id: str = ""
    package_name: str = ""
    version: str = ""
    runtime_prefix: str = ""
    groups: tuple[GroupDefinition, ...] = ()
    scan_mode = ScanMode.INCLUDE_ONLY
    import_style: str = "named"
    adapters: dict[str, ComponentAdapter] = {}
    default_adapter: ComponentAdapter = CUSTOM_ADAPTER
    default_props: dict[str, dict[str, Any]] = {}

    @property
    def include_paths(self) -> tuple[str, ...]:
        return tuple(path for group in self.groups for path in group.components)

    @property
    def other_group(self) -> GroupDefinition:
        return GroupDefinition(f"{self.library_id}-other", f"{self.display_name} / Other", ())

    def entry_candidates(self) -> list[str]:
        return []

    def descriptor(self) -> LibraryDescriptor:
        return LibraryDescriptor(
            library_id=self.library_id,
            package_name=self.package_name,
            version=self.version,
            source="esm.sh",
            entry_candidates=self.entry_candidates(),
        )

    def runtime_type(self, path: str) -> str:
        return self.runtime_prefix + "".join(to_pascal_case(segment) for segment in path.split("."))

    def item_id(self, path: str) -> str:
        return "-".join([self.library_id, *(to_kebab_case(segment) for segment in path.split("."))])

    def adapter_for(self, path: str) -> ComponentAdapter:
        return self.adapters.get(path, self.default_adapter)

    def to_canonical_components(self, namespace: Any, paths: list[str]) -> list[CanonicalExternalComponent]:
        components = []
        for path in paths:
            implementation = get_value_by_path(namespace, path)
            if not is_component_like(implementation):
                continue
            components.append(
                CanonicalExternalComponent(
                    library_id=self.library_id,
                    component_name=path,
                    path=path,
                    runtime_type=self.runtime_type(path),
                    item_id=self.item_id(path),
                    implementation=implementation,
                    adapter=self.adapter_for(path),
                    default_props=dict(self.default_props.get(path, {})),
                )
            )
        return components

    def to_groups(self, components: list[CanonicalExternalComponent]) -> list[CanonicalGroup]:
        by_path = {item.path: item for item in components}
        known = set(self.include_paths)

        groups = []
        for definition in self.groups:
            items = tuple(by_path[path] for path in definition.components if path in by_path)
            if items:
                groups.append(CanonicalGroup(id=definition.id, title=definition.title, items=items))

        extra = sorted(path for path in by_path if path not in known)
        if extra:
            other = self.other_group
            groups.append(CanonicalGroup(id=other.id, title=other.title, items=tuple(by_path[p] for p in extra)))
        return groups


class ProfileRegistry:
    """
    Registered library profiles by library id.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, LibraryProfile] = {}

    def register_profile(self, profile: LibraryProfile) -> str:
        """
        Register a profile (replaces any profile with the same id).

        Returns:
            The profile's library id
        """
        library_id = profile.descriptor().library_id
        if library_id in self._profiles:
            logger.warning("profile_replaced", library_id=library_id)
        self._profiles[library_id] = profile
        logger.info("profile_registered", library_id=library_id)
        return library_id

    def unregister_profile(self, library_id: str) -> bool:
        if self._profiles.pop(library_id, None) is None:
            return False
        logger.info("profile_unregistered", library_id=library_id)
        return True

    def get(self, library_id: str) -> LibraryProfile | None:
        return self._profiles.get(library_id)

    def library_ids(self) -> list[str]:
        return list(self._profiles)

    def display_name(self, library_id: str) -> str:
        profile = self._profiles.get(library_id.strip())
        if profile is not None and profile.display_name:
            return profile.display_name
        return library_id.strip()

    def reset(self) -> None:
        self._profiles.clear()

    def __contains__(self, library_id: str) -> bool:
        return library_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def create_default_profiles() -> ProfileRegistry:
    """Profile registry seeded with the bundled Ant Design and Material UI profiles."""
    from .libraries import AntdProfile, MuiProfile

    registry = ProfileRegistry()
    registry.register_profile(AntdProfile())
    registry.register_profile(MuiProfile())
    return registry
