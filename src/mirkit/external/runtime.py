"""
External Library Runtime
On-demand loading of third-party component libraries into the registry.

Per library: idle -> loading -> success | error. At most one load per
library is in flight; concurrent callers share it. Expected failures become
diagnostics on the library's state, never exceptions.
"""

import asyncio
import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from ..core import LogContext, get_logger
from ..core.id import new_attempt_id
from ..monitoring import MetricsCollector
from ..registry import ComponentRegistry
from . import diagnostics as diag
from .dts import DeclarationCache, enrich_prop_options
from .loader import ModuleLoader, load_entry
from .manifest import apply_manifest_to_components, apply_manifest_to_groups
from .profiles import LibraryProfile, ProfileRegistry
from .scanner import scan_module_paths
from .types import (
    CanonicalExternalComponent,
    CanonicalGroup,
    Diagnostic,
    ExternalLibraryState,
    LibraryDescriptor,
    LoadStatus,
    ScanMode,
)

logger = get_logger(__name__)

StateListener = Callable[[ExternalLibraryState], None]


@dataclass
class _Catalogue:
    components: list[CanonicalExternalComponent]
    groups: list[CanonicalGroup]


class ExternalLibraryRuntime:
    """
    Loads libraries through their profiles and feeds the registry.

    Only this object writes to the registry's external partition.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        profiles: ProfileRegistry,
        loaders: dict[str, ModuleLoader],
        declarations: DeclarationCache | None = None,
        enrich: bool = True,
        metrics: MetricsCollector | None = None,
        configured_ids: Iterable[str] = (),
    ) -> None:
        self.registry = registry
        self.profiles = profiles
        self.loaders = dict(loaders)
        self.declarations = declarations
        self.enrich = enrich
        self.metrics = metrics
        self.configured_ids = tuple(configured_ids)

        self._states: dict[str, ExternalLibraryState] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._enrichments: set[asyncio.Task] = set()
        self._components: dict[str, list[CanonicalExternalComponent]] = {}
        self._groups: dict[str, list[CanonicalGroup]] = {}
        self._types: dict[str, list[str]] = {}
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def ensure(self, library_id: str) -> list[Diagnostic]:
        """
        Make sure a library is loaded and registered.

        Returns:
            Diagnostics of the attempt that settled the library (empty if
            it was already loaded)
        """
        library_id = library_id.strip()
        if self.state(library_id).status == LoadStatus.SUCCESS:
            return []

        pending = self._inflight.get(library_id)
        if pending is not None and self.is_loading(library_id):
            logger.debug("load_joined", library_id=library_id)
            return list(await asyncio.shield(pending))

        profile = self.profiles.get(library_id)
        if profile is None:
            diagnostic = diag.unknown_library(library_id)
            logger.warning("library_unknown", library_id=library_id)
            self._set_state(
                ExternalLibraryState(
                    library_id=library_id,
                    status=LoadStatus.ERROR,
                    diagnostics=(diagnostic,),
                    attempt_id=new_attempt_id(),
                    updated_at=time.time(),
                )
            )
            return [diagnostic]

        attempt_id = new_attempt_id()
        self._set_state(
            ExternalLibraryState(
                library_id=library_id,
                status=LoadStatus.LOADING,
                attempt_id=attempt_id,
                updated_at=time.time(),
            )
        )
        task = asyncio.ensure_future(self._load(library_id, profile, attempt_id))
        self._inflight[library_id] = task

        def _clear(done: asyncio.Task) -> None:
            if self._inflight.get(library_id) is done:
                del self._inflight[library_id]

        task.add_done_callback(_clear)
        return list(await asyncio.shield(task))

    async def ensure_many(self, library_ids: Iterable[str]) -> list[Diagnostic]:
        """Ensure several libraries concurrently; failures stay per library."""
        unique = list(dict.fromkeys(library_id.strip() for library_id in library_ids))
        results = await asyncio.gather(*(self.ensure(library_id) for library_id in unique))
        return [diagnostic for result in results for diagnostic in result]

    async def ensure_configured(self) -> list[Diagnostic]:
        """Ensure the libraries named in settings."""
        return await self.ensure_many(self.configured_ids)

    async def retry(self, library_id: str) -> list[Diagnostic]:
        """Start a fresh attempt for a library that settled in error."""
        library_id = library_id.strip()
        current = self.state(library_id)
        if current.status == LoadStatus.ERROR:
            self._set_state(ExternalLibraryState(library_id=library_id, updated_at=time.time()))
        return await self.ensure(library_id)

    async def _load(self, library_id: str, profile: LibraryProfile, attempt_id: str) -> tuple[Diagnostic, ...]:
        diagnostics: list[Diagnostic] = []
        start = time.perf_counter()

        with LogContext(library_id=library_id, attempt_id=attempt_id):
            logger.info("library_load_started")
            try:
                catalogue = await self._run_pipeline(library_id, profile, diagnostics)
            except Exception as e:
                logger.error("library_load_unexpected", error=str(e), exc_info=True)
                diagnostics.append(diag.unexpected_failure(library_id, e))
                catalogue = None

            if self.state(library_id).attempt_id != attempt_id:
                logger.info("library_load_superseded")
                return tuple(diagnostics)

            if catalogue is not None:
                self._commit(library_id, catalogue)

            failed = catalogue is None or any(d.is_error for d in diagnostics)
            status = LoadStatus.ERROR if failed else LoadStatus.SUCCESS
            self._set_state(
                ExternalLibraryState(
                    library_id=library_id,
                    status=status,
                    diagnostics=tuple(diagnostics),
                    attempt_id=attempt_id,
                    updated_at=time.time(),
                )
            )

            duration = time.perf_counter() - start
            if self.metrics is not None:
                self.metrics.record_library_load(library_id, status.value, duration)
                self.metrics.set_external_components(library_id, len(self._components.get(library_id, [])))
            logger.info(
                "library_load_finished",
                status=status.value,
                components=len(self._components.get(library_id, [])),
                diagnostics=len(diagnostics),
                duration_ms=round(duration * 1000, 2),
            )

            if status == LoadStatus.SUCCESS:
                self._schedule_enrichment(library_id, profile, attempt_id)
        return tuple(diagnostics)

    async def _run_pipeline(
        self,
        library_id: str,
        profile: LibraryProfile,
        diagnostics: list[Diagnostic],
    ) -> _Catalogue | None:
        descriptor = profile.descriptor()
        loader = self.loaders.get(descriptor.source)
        if loader is None:
            target = f"{descriptor.package_name}@{descriptor.version} from {descriptor.source}"
            diagnostics.append(diag.load_failed(library_id, target, [f"no loader for source {descriptor.source!r}"]))
            return None

        namespace = await load_entry(descriptor, loader, diagnostics)
        if namespace is None:
            return None

        paths = scan_module_paths(
            namespace,
            include_paths=profile.include_paths,
            exclude_exports=profile.exclude_exports,
            discover=profile.scan_mode != ScanMode.INCLUDE_ONLY,
        )
        if not paths:
            diagnostics.append(diag.no_renderable_exports(library_id))
            return None

        try:
            components = apply_manifest_to_components(
                profile.to_canonical_components(namespace, paths), profile.manifest
            )
        except Exception as e:
            logger.warning("conversion_failed", error=str(e))
            diagnostics.append(diag.conversion_failed(library_id, e))
            return None

        components = self._dedupe(library_id, components, diagnostics)
        if not components:
            diagnostics.append(diag.nothing_registered(library_id))
            return None

        try:
            groups = apply_manifest_to_groups(components, profile.to_groups(components), profile.manifest)
        except Exception as e:
            logger.warning("grouping_failed", error=str(e))
            diagnostics.append(diag.conversion_failed(library_id, e))
            return None

        return _Catalogue(components=components, groups=groups)

    def _dedupe(
        self,
        library_id: str,
        components: list[CanonicalExternalComponent],
        diagnostics: list[Diagnostic],
    ) -> list[CanonicalExternalComponent]:
        """First component per runtime type wins."""
        seen: set[str] = set()
        kept = []
        for component in components:
            if component.runtime_type in seen:
                diagnostics.append(diag.duplicate_runtime_type(library_id, component.runtime_type))
                continue
            seen.add(component.runtime_type)
            kept.append(component)
        return kept

    def _commit(self, library_id: str, catalogue: _Catalogue) -> None:
        """Swap the library's registry types and catalogue in one step."""
        new_types = [component.runtime_type for component in catalogue.components]
        stale = [t for t in self._types.get(library_id, []) if t not in set(new_types)]
        self.registry.unregister_many(stale)
        self.registry.register_many(
            (component.runtime_type, component.implementation, component.adapter)
            for component in catalogue.components
        )
        self._types[library_id] = new_types
        self._components[library_id] = catalogue.components
        self._groups[library_id] = catalogue.groups

    # ------------------------------------------------------------------
    # Enrichment
    # ------------------------------------------------------------------

    async def enrich_prop_options(
        self,
        descriptor: LibraryDescriptor,
        components: list[CanonicalExternalComponent],
    ) -> list[CanonicalExternalComponent]:
        """Best-effort prop option enrichment; unchanged components on any failure."""
        if self.declarations is None:
            return list(components)
        profile = self.profiles.get(descriptor.library_id)
        resolver = profile.declaration_urls if profile is not None else None
        return await enrich_prop_options(descriptor, components, self.declarations, url_resolver=resolver)

    def _schedule_enrichment(self, library_id: str, profile: LibraryProfile, attempt_id: str) -> None:
        if not self.enrich or self.declarations is None:
            return
        task = asyncio.ensure_future(self._enrich(library_id, profile, attempt_id))
        self._enrichments.add(task)
        task.add_done_callback(self._enrichments.discard)

    async def _enrich(self, library_id: str, profile: LibraryProfile, attempt_id: str) -> None:
        components = self._components.get(library_id, [])
        enriched = await self.enrich_prop_options(profile.descriptor(), components)

        current = self.state(library_id)
        if current.attempt_id != attempt_id or self._components.get(library_id) is not components:
            logger.debug("enrichment_discarded", library_id=library_id)
            return

        by_item = {component.item_id: component for component in enriched}
        self._components[library_id] = enriched
        self._groups[library_id] = [
            replace(group, items=tuple(by_item.get(item.item_id, item) for item in group.items))
            for group in self._groups.get(library_id, [])
        ]
        self._notify(current)

    async def drain(self) -> None:
        """Wait for background enrichment to settle."""
        while self._enrichments:
            await asyncio.gather(*list(self._enrichments), return_exceptions=True)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def state(self, library_id: str) -> ExternalLibraryState:
        """Current state; an idle state is created on first reference."""
        library_id = library_id.strip()
        current = self._states.get(library_id)
        if current is None:
            current = ExternalLibraryState(library_id=library_id)
            self._states[library_id] = current
        return current

    def states(self) -> dict[str, ExternalLibraryState]:
        return dict(self._states)

    def latest_diagnostics(self, library_id: str) -> list[Diagnostic]:
        return list(self.state(library_id).diagnostics)

    def is_loading(self, library_id: str) -> bool:
        return self.state(library_id).status == LoadStatus.LOADING

    def components(self, library_id: str | None = None) -> list[CanonicalExternalComponent]:
        """Canonical components of one library, or of every loaded library."""
        if library_id is not None:
            return list(self._components.get(library_id.strip(), []))
        return [component for items in self._components.values() for component in items]

    def groups(self, library_id: str) -> list[CanonicalGroup]:
        return list(self._groups.get(library_id.strip(), []))

    def unregister_library(self, library_id: str) -> bool:
        """Remove a library's registry types, catalogue and state."""
        library_id = library_id.strip()
        types = self._types.pop(library_id, [])
        removed = self.registry.unregister_many(types)
        self._components.pop(library_id, None)
        self._groups.pop(library_id, None)
        # a superseded load settles without registering anything
        self._inflight.pop(library_id, None)
        known = self._states.pop(library_id, None) is not None
        if self.metrics is not None:
            self.metrics.set_external_components(library_id, 0)
        logger.info("library_unregistered", library_id=library_id, types=removed)
        return known or removed > 0

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener(state)`` on every state change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: ExternalLibraryState) -> None:
        self._states[state.library_id] = state
        self._notify(state)

    def _notify(self, state: ExternalLibraryState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error("state_listener_failed", library_id=state.library_id, error=str(e), exc_info=True)
