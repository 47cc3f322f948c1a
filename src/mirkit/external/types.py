"""
External Library Type Definitions
Descriptors, diagnostics, load state and canonical components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..registry import ComponentAdapter


class DiagnosticLevel(str, Enum):
    """Diagnostic severity"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticStage(str, Enum):
    """Pipeline stage that produced a diagnostic"""
    RESOLVE = "resolve"
    LOAD = "load"
    CONVERT = "convert"
    ENRICH = "enrich"


class DiagnosticCode:
    """Stable diagnostic codes (branch on these, never on messages)."""

    LOAD_FAILED = "ELIB-1001"
    UNKNOWN_LIBRARY = "ELIB-1004"
    UNEXPECTED_FAILURE = "ELIB-1099"
    NO_RENDERABLE_EXPORTS = "ELIB-2001"
    CONVERSION_FAILED = "ELIB-2002"
    NOTHING_REGISTERED = "ELIB-3001"
    DUPLICATE_RUNTIME_TYPE = "ELIB-3002"


class LoadStatus(str, Enum):
    """Per-library load state"""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class ScanMode(str, Enum):
    """How a profile's module exports are scanned"""
    DISCOVER = "discover"
    INCLUDE_ONLY = "include-only"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Diagnostic(_WireModel):
    """Structured report of a non-fatal library failure"""
    code: str
    level: DiagnosticLevel
    stage: DiagnosticStage
    message: str
    library_id: str | None = Field(default=None, alias="libraryId")
    hint: str | None = None
    retryable: bool = False

    @property
    def is_error(self) -> bool:
        return self.level == DiagnosticLevel.ERROR


class LibraryDescriptor(_WireModel):
    """Where and how to load one library"""
    library_id: str = Field(..., alias="libraryId", min_length=1)
    package_name: str = Field(..., alias="packageName")
    version: str
    source: str = Field(default="esm.sh", description="Loader key: 'esm.sh' or 'python'")
    entry_candidates: list[str] = Field(default_factory=list, alias="entryCandidates")


class ExternalLibraryState(_WireModel):
    """
    Load state of one library.

    Replaced wholesale on every transition, so status and diagnostics always
    belong to the same attempt.
    """
    library_id: str = Field(..., alias="libraryId")
    status: LoadStatus = LoadStatus.IDLE
    diagnostics: tuple[Diagnostic, ...] = ()
    attempt_id: str | None = Field(default=None, alias="attemptId")
    updated_at: float = Field(default=0.0, alias="updatedAt")


class ComponentOverride(_WireModel):
    """Manifest override for one component path"""
    display_name: str | None = Field(default=None, alias="displayName")
    default_props: dict[str, Any] = Field(default_factory=dict, alias="defaultProps")
    behavior_tags: list[str] | None = Field(default=None, alias="behaviorTags")
    codegen_hints: dict[str, Any] = Field(default_factory=dict, alias="codegenHints")
    group_id: str | None = Field(default=None, alias="groupId")
    group_title: str | None = Field(default=None, alias="groupTitle")


class GroupOverride(_WireModel):
    title: str | None = None


class LibraryManifest(_WireModel):
    """Per-library display and grouping overrides"""
    component_overrides: dict[str, ComponentOverride] = Field(default_factory=dict, alias="componentOverrides")
    group_overrides: dict[str, GroupOverride] = Field(default_factory=dict, alias="groupOverrides")


@dataclass(frozen=True)
class CanonicalExternalComponent:
    """One component contributed by an external library."""

    library_id: str
    component_name: str
    path: str
    runtime_type: str
    item_id: str
    implementation: Any
    adapter: ComponentAdapter
    default_props: dict[str, Any] = field(default_factory=dict)
    behavior_tags: tuple[str, ...] = ()
    prop_options: dict[str, list[str]] = field(default_factory=dict)
    slots: tuple[str, ...] = ()
    codegen_hints: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CanonicalGroup:
    """Palette grouping of canonical components."""

    id: str
    title: str
    items: tuple[CanonicalExternalComponent, ...] = ()
    source: str = "external"

    @property
    def item_ids(self) -> list[str]:
        return [item.item_id for item in self.items]
