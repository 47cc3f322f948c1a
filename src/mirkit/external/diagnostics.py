"""Diagnostic constructors for the load pipeline."""

from .types import Diagnostic, DiagnosticCode, DiagnosticLevel, DiagnosticStage


def unknown_library(library_id: str) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.UNKNOWN_LIBRARY,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.RESOLVE,
        library_id=library_id,
        message=f'External library "{library_id}" is not registered.',
        hint="Register a library profile before loading it.",
        retryable=False,
    )


def load_failed(library_id: str, target: str, attempts: list[str]) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.LOAD_FAILED,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.LOAD,
        library_id=library_id,
        message=f"Failed to load {target}.",
        hint=" | ".join(attempts) or "No entry candidates were provided for this library descriptor.",
        retryable=True,
    )


def unexpected_failure(library_id: str, error: Exception) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.UNEXPECTED_FAILURE,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.LOAD,
        library_id=library_id,
        message=f"Unexpected {library_id} runtime load failure.",
        hint=f"{type(error).__name__}: {error}",
        retryable=True,
    )


def no_renderable_exports(library_id: str) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.NO_RENDERABLE_EXPORTS,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.CONVERT,
        library_id=library_id,
        message=f"No renderable exports found for {library_id}.",
        hint="Verify include paths and module export names.",
        retryable=True,
    )


def conversion_failed(library_id: str, error: Exception) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.CONVERSION_FAILED,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.CONVERT,
        library_id=library_id,
        message=f"Converting {library_id} exports to canonical components failed.",
        hint=f"{type(error).__name__}: {error}",
        retryable=False,
    )


def nothing_registered(library_id: str) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.NOTHING_REGISTERED,
        level=DiagnosticLevel.ERROR,
        stage=DiagnosticStage.CONVERT,
        library_id=library_id,
        message="No runtime-renderable components found after scan.",
        hint="Check export scanner rules or verify remote module exports.",
        retryable=True,
    )


def duplicate_runtime_type(library_id: str, runtime_type: str) -> Diagnostic:
    return Diagnostic(
        code=DiagnosticCode.DUPLICATE_RUNTIME_TYPE,
        level=DiagnosticLevel.WARNING,
        stage=DiagnosticStage.CONVERT,
        library_id=library_id,
        message=f'Duplicated runtime type "{runtime_type}" detected during registration.',
        hint="Later duplicate entries are ignored to keep the registry deterministic.",
        retryable=False,
    )
