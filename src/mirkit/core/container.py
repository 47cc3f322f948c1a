"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .config import Settings, get_settings
from .logging_config import configure_logging
from ..clients import CDNClient
from ..codegen import CodeGenerator, GenerationCache
from ..document import DocumentNormalizer
from ..external import (
    DeclarationCache,
    EsmExportLoader,
    ExternalLibraryRuntime,
    FileStore,
    KeyValueStore,
    MemoryStore,
    ProfileRegistry,
    PythonModuleLoader,
    create_default_profiles,
)
from ..monitoring import MetricsCollector
from ..registry import ComponentRegistry
from ..renderer import LiveRenderer


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_normalizer(self) -> DocumentNormalizer:
        return DocumentNormalizer(self.settings.schema_version)

    @singleton
    @provider
    def provide_registry(self) -> ComponentRegistry:
        """One registry per container, shared by the runtime, generator and renderer."""
        return ComponentRegistry()

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        return MetricsCollector()

    @singleton
    @provider
    def provide_cdn_client(self) -> CDNClient:
        return CDNClient(
            timeout=self.settings.fetch_timeout,
            fail_max=self.settings.breaker_fail_max,
            reset_timeout=self.settings.breaker_reset_timeout,
        )

    @singleton
    @provider
    def provide_store(self) -> KeyValueStore:
        """Durable file store when a cache directory is configured."""
        if self.settings.dts_cache_dir:
            return FileStore(self.settings.dts_cache_dir)
        return MemoryStore()

    @singleton
    @provider
    def provide_profiles(self) -> ProfileRegistry:
        return create_default_profiles()

    @singleton
    @provider
    def provide_declarations(
        self, store: KeyValueStore, client: CDNClient, metrics: MetricsCollector
    ) -> DeclarationCache:
        return DeclarationCache(store, client, ttl_seconds=self.settings.dts_cache_ttl, metrics=metrics)

    @singleton
    @provider
    def provide_runtime(
        self,
        registry: ComponentRegistry,
        profiles: ProfileRegistry,
        client: CDNClient,
        declarations: DeclarationCache,
        metrics: MetricsCollector,
    ) -> ExternalLibraryRuntime:
        """Provide external library runtime with both loaders."""
        return ExternalLibraryRuntime(
            registry=registry,
            profiles=profiles,
            loaders={"esm.sh": EsmExportLoader(client), "python": PythonModuleLoader()},
            declarations=declarations,
            enrich=self.settings.enrich_prop_options,
            metrics=metrics,
            configured_ids=self.settings.external_library_ids,
        )

    @singleton
    @provider
    def provide_generator(
        self, registry: ComponentRegistry, profiles: ProfileRegistry, metrics: MetricsCollector
    ) -> CodeGenerator:
        cache = None
        if self.settings.enable_generation_cache:
            cache = GenerationCache(max_size=self.settings.generation_cache_size)
        return CodeGenerator(
            registry=registry,
            profiles=profiles,
            strategy=self.settings.dependency_strategy,
            cdn_base_url=self.settings.cdn_base_url,
            cache=cache,
            metrics=metrics,
        )

    @singleton
    @provider
    def provide_renderer(self, registry: ComponentRegistry) -> LiveRenderer:
        return LiveRenderer(registry)


def create_container(settings: Settings | None = None, configure_logs: bool = True) -> Injector:
    """Create configured injector; also applies the logging settings unless told not to."""
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(settings.log_level, settings.json_logs)
    return Injector([CoreModule(settings)])
