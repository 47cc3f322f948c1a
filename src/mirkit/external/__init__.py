"""External component libraries: profiles, loading, enrichment and load state."""

from .types import (
    CanonicalExternalComponent,
    CanonicalGroup,
    ComponentOverride,
    Diagnostic,
    DiagnosticCode,
    DiagnosticLevel,
    DiagnosticStage,
    ExternalLibraryState,
    GroupOverride,
    LibraryDescriptor,
    LibraryManifest,
    LoadStatus,
    ScanMode,
)
from .store import FileStore, KeyValueStore, MemoryStore
from .dts import DeclarationCache, create_dts_cache_key, enrich_prop_options, infer_prop_options
from .loader import EsmExportLoader, LoadError, ModuleLoader, PythonModuleLoader, RemoteComponent
from .scanner import scan_module_paths
from .manifest import apply_manifest_to_components, apply_manifest_to_groups
from .profiles import (
    GroupDefinition,
    GroupedLibraryProfile,
    LibraryProfile,
    ProfileRegistry,
    create_default_profiles,
)
from .runtime import ExternalLibraryRuntime

__all__ = [
    "CanonicalExternalComponent",
    "CanonicalGroup",
    "ComponentOverride",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLevel",
    "DiagnosticStage",
    "ExternalLibraryState",
    "GroupOverride",
    "LibraryDescriptor",
    "LibraryManifest",
    "LoadStatus",
    "ScanMode",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "DeclarationCache",
    "create_dts_cache_key",
    "enrich_prop_options",
    "infer_prop_options",
    "EsmExportLoader",
    "LoadError",
    "ModuleLoader",
    "PythonModuleLoader",
    "RemoteComponent",
    "scan_module_paths",
    "apply_manifest_to_components",
    "apply_manifest_to_groups",
    "GroupDefinition",
    "GroupedLibraryProfile",
    "LibraryProfile",
    "ProfileRegistry",
    "create_default_profiles",
    "ExternalLibraryRuntime",
]
