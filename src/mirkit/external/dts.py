"""
Type Declaration Enrichment
Scrapes enumerable literal-union prop values from published ``.d.ts`` files.

Fetches go through a durable key-value cache first; a valid cached entry
means no network access at all. Every failure degrades to "no enrichment".
"""

import asyncio
import re
import time
from dataclasses import replace
from typing import Callable

from ..clients import CDNClient
from ..core import get_logger, hash_string, Algorithm, LRUCache
from ..monitoring import MetricsCollector
from .store import KeyValueStore
from .types import CanonicalExternalComponent, LibraryDescriptor

logger = get_logger(__name__)

PROP_KEYS = ("category", "type", "variant", "color", "severity", "size")
DTS_CACHE_PREFIX = "mdr.external.dts."
DTS_CACHE_TTL_SECONDS = 60 * 60 * 24

JSDELIVR = "https://cdn.jsdelivr.net/npm"
UNPKG = "https://unpkg.com"

_QUOTED = re.compile(r"'([^']+)'|\"([^\"]+)\"")
_ALIAS_NAME = re.compile(r"\b([A-Z][A-Za-z0-9_]*)\b")

UrlResolver = Callable[[str], list[str]]


def create_dts_cache_key(url: str) -> str:
    """Deterministic durable cache key for a resolved declaration URL."""
    return f"{DTS_CACHE_PREFIX}{hash_string(url.strip(), Algorithm.SHA256)}"


# ============================================================================
# Parsing
# ============================================================================


def extract_quoted_options(source: str) -> list[str]:
    """Unique quoted literals, in order of appearance."""
    values = (single or double for single, double in _QUOTED.findall(source))
    return list(dict.fromkeys(values))


def parse_type_alias_union(dts: str, type_name: str) -> list[str]:
    match = re.search(rf"type\s+{re.escape(type_name)}\s*=\s*([\s\S]{{0,300}}?);", dts)
    if match is None:
        return []
    return extract_quoted_options(match.group(1))


def parse_prop_options(dts: str, prop_name: str) -> list[str]:
    """
    Literal values a prop accepts.

    Handles inline unions (``size?: 'small' | 'large';``) and one level of
    aliasing (``variant?: ButtonVariant;`` + ``type ButtonVariant = ...;``).
    """
    match = re.search(rf"(?<![\w$]){re.escape(prop_name)}\??:\s*([\s\S]{{0,220}}?);", dts)
    if match is None:
        return []
    prop_type = match.group(1).strip()
    quoted = extract_quoted_options(prop_type)
    if quoted:
        return quoted
    alias = _ALIAS_NAME.search(prop_type)
    if alias is None:
        return []
    return parse_type_alias_union(dts, alias.group(1))


def infer_prop_options(dts: str, prop_keys: tuple[str, ...] = PROP_KEYS) -> dict[str, list[str]]:
    """Options per prop, keeping only props with a real choice (2+ values)."""
    options = {}
    for key in prop_keys:
        values = parse_prop_options(dts, key)
        if len(values) > 1:
            options[key] = values
    return options


def _antd_path_candidates(component_path: str) -> list[str]:
    base = component_path.split(".")[0].lower()
    return [
        f"{base}/index.d.ts",
        f"{base}/{base}.d.ts",
        f"{base}/{component_path.lower()}.d.ts",
    ]


def resolve_dts_urls(descriptor: LibraryDescriptor, component_path: str) -> list[str]:
    """Candidate declaration URLs for a component, most likely first."""
    package, version = descriptor.package_name, descriptor.version
    if package == "@mui/material":
        base = component_path.split(".")[0]
        return [
            f"{JSDELIVR}/@mui/material@{version}/{base}/{base}.d.ts",
            f"{UNPKG}/@mui/material@{version}/{base}/{base}.d.ts",
        ]
    if package == "antd":
        return [
            f"{cdn}/antd@{version}/es/{path}"
            for path in _antd_path_candidates(component_path)
            for cdn in (JSDELIVR, UNPKG)
        ]
    return []


# ============================================================================
# Fetching
# ============================================================================


class DeclarationCache:
    """
    Cache-first declaration fetcher.

    Lookup order: in-process memo, durable store, network. Concurrent
    requests for one URL share a single fetch.
    """

    def __init__(
        self,
        store: KeyValueStore,
        client: CDNClient,
        ttl_seconds: int = DTS_CACHE_TTL_SECONDS,
        memo_size: int = 256,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics
        self._memo = LRUCache[str](max_size=memo_size, ttl_seconds=ttl_seconds)
        self._inflight: dict[str, asyncio.Future] = {}

    async def read_cached(self, url: str) -> str | None:
        """Valid durable entry for ``url``; expired or malformed entries are dropped."""
        key = create_dts_cache_key(url)
        entry = await self.store.get(key)
        if entry is None:
            return None
        content = entry.get("content") if isinstance(entry, dict) else None
        cached_at = entry.get("cachedAt") if isinstance(entry, dict) else None
        if (
            not isinstance(content, str)
            or not isinstance(cached_at, (int, float))
            or time.time() - cached_at > self.ttl_seconds
        ):
            await self.store.delete(key)
            return None
        return content

    async def write_cached(self, url: str, content: str) -> None:
        await self.store.set(create_dts_cache_key(url), {"content": content, "cachedAt": time.time()})

    async def fetch(self, url: str) -> str | None:
        """Declaration text for ``url`` or None."""
        memoized = self._memo.get(url)
        if memoized is not None:
            return memoized

        pending = self._inflight.get(url)
        if pending is not None:
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._fetch_uncached(url))
        self._inflight[url] = task
        task.add_done_callback(lambda _: self._inflight.pop(url, None))
        return await asyncio.shield(task)

    async def _fetch_uncached(self, url: str) -> str | None:
        cached = await self.read_cached(url)
        if cached is not None:
            self._record(hit=True)
            self._memo.set(url, cached)
            return cached

        self._record(hit=False)
        content = await self.client.fetch_text(url)
        if content:
            await self.write_cached(url, content)
            self._memo.set(url, content)
        return content or None

    def _record(self, hit: bool) -> None:
        if self.metrics is not None:
            self.metrics.record_dts_cache(hit)


async def enrich_prop_options(
    descriptor: LibraryDescriptor,
    components: list[CanonicalExternalComponent],
    declarations: DeclarationCache,
    url_resolver: UrlResolver | None = None,
) -> list[CanonicalExternalComponent]:
    """
    Augment ``prop_options`` from published type declarations.

    Best effort per component: one that cannot be fetched or parsed is
    returned unchanged without affecting the others. Existing options are
    kept; scraped ones are merged on top.
    """
    resolve_urls = url_resolver or (lambda path: resolve_dts_urls(descriptor, path))

    async def enrich_one(component: CanonicalExternalComponent) -> CanonicalExternalComponent:
        dts = None
        for url in resolve_urls(component.path):
            dts = await declarations.fetch(url)
            if dts:
                break
        if not dts:
            return component
        options = infer_prop_options(dts)
        if not options:
            return component
        return replace(component, prop_options={**component.prop_options, **options})

    results = await asyncio.gather(*(enrich_one(c) for c in components), return_exceptions=True)
    enriched = []
    for component, result in zip(components, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning(
                "enrich_component_failed",
                library_id=descriptor.library_id,
                path=component.path,
                error=str(result),
            )
            enriched.append(component)
        else:
            enriched.append(result)

    changed = sum(1 for before, after in zip(components, enriched) if before is not after)
    logger.info("enrich_complete", library_id=descriptor.library_id, enriched=changed)
    return enriched
