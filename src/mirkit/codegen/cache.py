"""Generation Cache - lightweight wrapper around generic LRU cache."""

from dataclasses import dataclass

from ..core import LRUCache, hash_fields, hash_json
from ..document import MIRDocument
from .ir import IRDocument


@dataclass(frozen=True)
class GenerationResult:
    """Output of one generation request."""

    code: str
    ir: IRDocument
    dependencies: dict[str, str]
    generation_id: str
    target: str

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "ir": self.ir.to_dict(),
            "dependencies": dict(self.dependencies),
            "generation_id": self.generation_id,
            "target": self.target,
        }


def generation_cache_key(
    document: MIRDocument,
    target: str,
    revision: int,
    component_name: str | None = None,
) -> str:
    """Key covering everything that changes generated output."""
    return hash_fields(hash_json(document.to_dict()), target, str(revision), component_name or "")


class GenerationCache:
    """
    Type-safe LRU cache for generation results.

    Keys include the registry revision, so loading or unloading a library
    never serves output produced against the old registry.
    """

    def __init__(self, max_size: int = 128, ttl_seconds: int = 3600) -> None:
        self._cache: LRUCache[GenerationResult] = LRUCache(max_size=max_size, ttl_seconds=ttl_seconds)

    def get(self, key: str) -> GenerationResult | None:
        return self._cache.get(key)

    def set(self, key: str, result: GenerationResult) -> None:
        self._cache.set(key, result)

    def clear(self) -> None:
        self._cache.clear()

    @property
    def stats(self):
        """Get cache statistics."""
        return self._cache.stats
