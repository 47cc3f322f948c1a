"""
Component Registry
Resolves node types to implementations plus adapters.
"""

from typing import Any, Callable, Iterable, Mapping

from ..core import get_logger
from .adapters import CUSTOM_ADAPTER, HTML_ADAPTER
from .builtins import create_builtin_entries
from .discovery import scan_namespace
from .types import ComponentAdapter, RegistryEntry, ResolvedComponent

logger = get_logger(__name__)

MISSING_IMPLEMENTATION = "div"

RevisionListener = Callable[[int], None]


class ComponentRegistry:
    """
    Owned store of type -> implementation mappings.

    Two partitions: built-ins seeded at construction and never mutated, and an
    external partition written by the library runtime. Resolution checks the
    external partition first. The external mapping is replaced wholesale on
    every write, so readers never observe a half-applied batch.
    """

    def __init__(self, builtins: Mapping[str, RegistryEntry] | None = None) -> None:
        self._builtins: Mapping[str, RegistryEntry] = dict(
            builtins if builtins is not None else create_builtin_entries()
        )
        self._external: dict[str, RegistryEntry] = {}
        self._revision = 0
        self._listeners: list[RevisionListener] = []
        logger.info("registry_init", builtins=len(self._builtins))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get(self, type_name: str) -> RegistryEntry | None:
        """Exact entry lookup (external, then built-in)."""
        return self._external.get(type_name) or self._builtins.get(type_name)

    def has(self, type_name: str) -> bool:
        return self.get(type_name) is not None

    def resolve(self, type_name: str) -> ResolvedComponent:
        """
        Resolve a node type.

        Order: external partition, built-ins, lowercase native passthrough,
        then the missing sentinel. Never raises.
        """
        entry = self.get(type_name)
        if entry is not None:
            return ResolvedComponent(
                type=type_name,
                implementation=entry.implementation,
                adapter=entry.adapter,
                external=entry.external,
            )
        if type_name and type_name.lower() == type_name:
            return ResolvedComponent(
                type=type_name, implementation=type_name, adapter=HTML_ADAPTER, native=True
            )
        logger.debug("type_missing", type=type_name)
        return ResolvedComponent(
            type=type_name, implementation=MISSING_IMPLEMENTATION, adapter=HTML_ADAPTER, missing=True
        )

    # ------------------------------------------------------------------
    # External partition
    # ------------------------------------------------------------------

    def register(self, type_name: str, implementation: Any, adapter: ComponentAdapter = CUSTOM_ADAPTER) -> None:
        """
        Register an external type (replaces a previous registration).

        Args:
            type_name: Node type key
            implementation: Implementation handle
            adapter: Field mapping for the implementation
        """
        self.register_many([(type_name, implementation, adapter)])

    def register_many(self, entries: Iterable[tuple[str, Any, ComponentAdapter]]) -> list[str]:
        """Register a batch in one atomic swap. Returns the registered types."""
        staged = {
            type_name: RegistryEntry(type=type_name, implementation=impl, adapter=adapter, external=True)
            for type_name, impl, adapter in entries
        }
        if not staged:
            return []
        self._external = {**self._external, **staged}
        logger.info("types_registered", count=len(staged))
        self._bump()
        return list(staged)

    def unregister(self, type_name: str) -> bool:
        """Remove an external type; built-ins cannot be removed."""
        return self.unregister_many([type_name]) > 0

    def unregister_many(self, type_names: Iterable[str]) -> int:
        """Remove external types in one swap. Returns how many were removed."""
        doomed = {name for name in type_names if name in self._external}
        if not doomed:
            return 0
        self._external = {k: v for k, v in self._external.items() if k not in doomed}
        logger.info("types_unregistered", count=len(doomed))
        self._bump()
        return len(doomed)

    def discover(
        self,
        namespace: Any,
        prefix: str = "",
        adapter: ComponentAdapter = CUSTOM_ADAPTER,
        overrides: Mapping[str, ComponentAdapter] | None = None,
    ) -> list[str]:
        """
        Auto-register component-like exports of a namespace.

        Plain-data exports are skipped even when they match ``prefix``;
        ``overrides`` take precedence over ``adapter``.

        Returns:
            Registered type names
        """
        overrides = overrides or {}
        found = scan_namespace(namespace, prefix=prefix)
        return self.register_many(
            (name, impl, overrides.get(name, adapter)) for name, impl in found.items()
        )

    def reset_external(self) -> None:
        """Drop every external registration."""
        if self._external:
            self._external = {}
            self._bump()

    def external_types(self) -> list[str]:
        return list(self._external)

    def builtin_types(self) -> list[str]:
        return list(self._builtins)

    # ------------------------------------------------------------------
    # Revisions
    # ------------------------------------------------------------------

    @property
    def revision(self) -> int:
        """Increments on every external mutation."""
        return self._revision

    def subscribe(self, listener: RevisionListener) -> Callable[[], None]:
        """Call ``listener(revision)`` after each mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _bump(self) -> None:
        self._revision += 1
        for listener in list(self._listeners):
            try:
                listener(self._revision)
            except Exception as e:
                logger.error("revision_listener_failed", error=str(e), exc_info=True)

    def stats(self) -> dict[str, Any]:
        """Registry statistics."""
        return {
            "builtin": len(self._builtins),
            "external": len(self._external),
            "revision": self._revision,
        }
