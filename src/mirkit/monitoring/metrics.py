"""
Metrics Collection
Prometheus metrics for library loading, enrichment and code generation
"""

import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the toolkit.

    Each collector owns its CollectorRegistry so several instances (one per
    container, one per test) never clash on metric names.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()

        # External library metrics
        self.library_loads_total = Counter(
            "mir_library_loads_total",
            "Total number of external library load attempts",
            ["library_id", "status"],
            registry=self.registry,
        )
        self.library_load_duration = Histogram(
            "mir_library_load_duration_seconds",
            "External library load duration in seconds",
            ["library_id"],
            buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry,
        )
        self.external_components = Gauge(
            "mir_external_components",
            "Registered external component types",
            ["library_id"],
            registry=self.registry,
        )

        # Declaration cache metrics
        self.dts_cache_hits = Counter(
            "mir_dts_cache_hits_total",
            "Declaration fetches served from cache",
            registry=self.registry,
        )
        self.dts_cache_misses = Counter(
            "mir_dts_cache_misses_total",
            "Declaration fetches that went to the network",
            registry=self.registry,
        )

        # Generation metrics
        self.generations_total = Counter(
            "mir_generations_total",
            "Total number of code generation requests",
            ["target", "status"],
            registry=self.registry,
        )
        self.generation_duration = Histogram(
            "mir_generation_duration_seconds",
            "Code generation duration in seconds",
            ["target"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=self.registry,
        )
        self.generation_cache_hits = Counter(
            "mir_generation_cache_hits_total",
            "Generation requests served from the memo",
            registry=self.registry,
        )

    def record_library_load(self, library_id: str, status: str, duration: float) -> None:
        """Record a library load attempt."""
        self.library_loads_total.labels(library_id=library_id, status=status).inc()
        self.library_load_duration.labels(library_id=library_id).observe(duration)

    def set_external_components(self, library_id: str, count: int) -> None:
        self.external_components.labels(library_id=library_id).set(count)

    def record_dts_cache(self, hit: bool) -> None:
        """Record a declaration cache lookup."""
        if hit:
            self.dts_cache_hits.inc()
        else:
            self.dts_cache_misses.inc()

    def record_generation(self, target: str, status: str, duration: float) -> None:
        """Record a generation request."""
        self.generations_total.labels(target=target, status=status).inc()
        self.generation_duration.labels(target=target).observe(duration)

    def record_generation_cache_hit(self) -> None:
        self.generation_cache_hits.inc()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]):
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)
