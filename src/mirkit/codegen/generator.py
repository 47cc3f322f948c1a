"""
Code Generator
Document -> IR -> target source, with per-revision memoization.
"""

import time

from ..core import LogContext, get_logger
from ..core.config import DependencyStrategy
from ..core.id import new_generation_id
from ..document import MIRDocument
from ..external.profiles import ProfileRegistry
from ..monitoring import MetricsCollector
from ..registry import ComponentRegistry
from .backends import get_backend
from .cache import GenerationCache, GenerationResult, generation_cache_key
from .errors import GenerationError
from .ir import IRDocument
from .lowering import ComponentImports, lower_document
from .packages import DEFAULT_CDN_BASE_URL

logger = get_logger(__name__)


class CodeGenerator:
    """
    Generates target-framework source from documents.

    Shares the registry by reference with the live renderer, so both see
    the same external types.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        profiles: ProfileRegistry | None = None,
        strategy: DependencyStrategy = "workspace",
        cdn_base_url: str = DEFAULT_CDN_BASE_URL,
        cache: GenerationCache | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.registry = registry
        self.profiles = profiles
        self.strategy = strategy
        self.cdn_base_url = cdn_base_url
        self.cache = cache
        self.metrics = metrics
        if cache is not None:
            registry.subscribe(self._on_revision)

    def _on_revision(self, revision: int) -> None:
        # keys embed the revision, so older entries can never hit again
        self.cache.clear()
        logger.debug("generation_cache_cleared", revision=revision)

    def lower(self, document: MIRDocument, component_name: str | None = None) -> IRDocument:
        """Lower without emitting; raises LoweringError on the first bad node."""
        return lower_document(
            document,
            self.registry,
            imports=ComponentImports(self.profiles),
            strategy=self.strategy,
            cdn_base_url=self.cdn_base_url,
            component_name=component_name,
        )

    def generate(self, document: MIRDocument, target: str = "react") -> str:
        """Source text for ``target``."""
        return self.compile(document, target).code

    def compile(
        self,
        document: MIRDocument,
        target: str = "react",
        component_name: str | None = None,
    ) -> GenerationResult:
        """
        Full generation result.

        Raises:
            UnknownTargetError: No backend for ``target``
            LoweringError: A node could not be lowered; nothing is emitted
        """
        key = generation_cache_key(document, target, self.registry.revision, component_name)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("generation_cache_hit", target=target)
                if self.metrics is not None:
                    self.metrics.record_generation_cache_hit()
                return cached

        backend = get_backend(target)
        generation_id = new_generation_id()
        start = time.perf_counter()

        with LogContext(generation_id=generation_id, target=target):
            try:
                ir = self.lower(document, component_name)
                code = backend.emit(ir)
            except GenerationError as e:
                logger.warning("generation_failed", error=str(e), node_id=getattr(e, "node_id", None))
                self._record(target, "error", start)
                raise

            result = GenerationResult(
                code=code,
                ir=ir,
                dependencies=dict(ir.dependencies),
                generation_id=generation_id,
                target=target,
            )
            self._record(target, "success", start)
            logger.info(
                "generation_complete",
                nodes=sum(1 for _ in ir.root.walk()),
                imports=len(ir.imports),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )

        if self.cache is not None:
            self.cache.set(key, result)
        return result

    def _record(self, target: str, status: str, start: float) -> None:
        if self.metrics is not None:
            self.metrics.record_generation(target, status, time.perf_counter() - start)
