"""Code generation: lowering to IR and target backends."""

from .errors import GenerationError, LoweringError, UnknownTargetError
from .ir import BoundExpression, IRDocument, IRHandler, IRImport, IRNode, IRParam, IRStateVar
from .packages import ImportResolution, is_bare_import, package_name_of, resolve_import
from .lowering import ComponentImports, DocumentLowering, lower_document
from .backends import Backend, available_targets, get_backend, register_backend
from .cache import GenerationCache, GenerationResult
from .generator import CodeGenerator

__all__ = [
    "GenerationError",
    "LoweringError",
    "UnknownTargetError",
    "BoundExpression",
    "IRDocument",
    "IRHandler",
    "IRImport",
    "IRNode",
    "IRParam",
    "IRStateVar",
    "ImportResolution",
    "is_bare_import",
    "package_name_of",
    "resolve_import",
    "ComponentImports",
    "DocumentLowering",
    "lower_document",
    "Backend",
    "available_targets",
    "get_backend",
    "register_backend",
    "GenerationCache",
    "GenerationResult",
    "CodeGenerator",
]
