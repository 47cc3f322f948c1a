"""In-process LRU cache with optional TTL.

Backs the declaration fetch memo (keyed by URL) and the generation cache
(keyed by document fingerprint, target and registry revision).
"""

import time
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")


@dataclass
class Stats:
    """Counters reported by a cache."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "hit_rate": self.hit_rate}


class _Entry(NamedTuple):
    value: Any
    stored_at: float


class LRUCache(Generic[T]):
    """
    Bounded mapping that evicts the least recently read entry.

    Entries older than ``ttl_seconds`` read as misses and are dropped on
    access. Keys are used as given; callers hash anything large first.

    Examples:
        >>> memo = LRUCache[str](max_size=256, ttl_seconds=86400)
        >>> memo.set("https://cdn.jsdelivr.net/npm/antd@5.28.0/es/button/index.d.ts", "...")
        >>> memo.stats.size
        1
    """

    def __init__(self, max_size: int = 100, ttl_seconds: int | None = None):
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    def _expired(self, entry: _Entry) -> bool:
        return self.ttl_seconds is not None and time.time() - entry.stored_at >= self.ttl_seconds

    def _sync_size(self) -> None:
        self._stats.size = len(self._entries)

    def get(self, key: str) -> T | None:
        """Value for key, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None or self._expired(entry):
            if entry is not None:
                del self._entries[key]
                self._sync_size()
            self._stats.misses += 1
            return None

        self._entries.move_to_end(key)
        self._stats.hits += 1
        return entry.value

    def set(self, key: str, value: T) -> None:
        self._entries.pop(key, None)
        self._entries[key] = _Entry(value, time.time())
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            self._stats.evictions += 1
        self._sync_size()

    def delete(self, key: str) -> bool:
        """Drop key; False if it was not cached."""
        if self._entries.pop(key, None) is None:
            return False
        self._sync_size()
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._sync_size()

    @property
    def stats(self) -> Stats:
        return self._stats

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        # presence only, LRU order untouched
        return key in self._entries


__all__ = ["LRUCache", "Stats"]
