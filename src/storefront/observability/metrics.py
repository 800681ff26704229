"""Prometheus metrics for the storefront cache.

Provides metrics collection for:
- Cache reads (hits, misses by reason)
- Cache writes
- Sweeper deletions
- Storage operation latency

Usage:
    from storefront.observability.metrics import record_cache_hit

    record_cache_hit("profile")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

from storefront.config import settings

logger = logging.getLogger(__name__)


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    cache_hits_total: Any = None
    cache_misses_total: Any = None
    cache_writes_total: Any = None
    cache_sweep_deleted_total: Any = None
    cache_operation_duration_seconds: Any = None

    # Internal state
    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not settings.enable_metrics:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = REGISTRY

        self.cache_hits_total = Counter(
            "storefront_cache_hits_total",
            "Cache hits",
            ["kind"],
        )

        self.cache_misses_total = Counter(
            "storefront_cache_misses_total",
            "Cache misses",
            ["kind", "reason"],
        )

        self.cache_writes_total = Counter(
            "storefront_cache_writes_total",
            "Cache entries written",
            ["kind"],
        )

        self.cache_sweep_deleted_total = Counter(
            "storefront_cache_sweep_deleted_total",
            "Expired cache entries deleted by the sweeper",
            ["kind"],
        )

        self.cache_operation_duration_seconds = Histogram(
            "storefront_cache_operation_duration_seconds",
            "Cache storage operation latency in seconds",
            ["operation", "kind"],
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if self._registry is None:
            return b"# Metrics disabled\n"
        return generate_latest(self._registry)


# Global metrics registry
metrics_registry = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry


def record_cache_hit(kind: str) -> None:
    """Record cache hit."""
    metrics = get_metrics()
    if metrics.cache_hits_total:
        metrics.cache_hits_total.labels(kind=kind).inc()


def record_cache_miss(kind: str, reason: str) -> None:
    """Record cache miss."""
    metrics = get_metrics()
    if metrics.cache_misses_total:
        metrics.cache_misses_total.labels(kind=kind, reason=reason).inc()


def record_cache_write(kind: str, entries: int = 1) -> None:
    """Record entries written for a kind."""
    metrics = get_metrics()
    if metrics.cache_writes_total:
        metrics.cache_writes_total.labels(kind=kind).inc(entries)


def record_sweep_deleted(kind: str, deleted: int) -> None:
    """Record entries removed by one sweep of a kind."""
    metrics = get_metrics()
    if metrics.cache_sweep_deleted_total and deleted:
        metrics.cache_sweep_deleted_total.labels(kind=kind).inc(deleted)


def record_cache_operation(operation: str, kind: str, duration: float) -> None:
    """Record cache operation duration.

    Args:
        operation: Storage operation (get, put, delete, sweep)
        kind: Entity kind
        duration: Operation duration in seconds
    """
    metrics = get_metrics()
    if metrics.cache_operation_duration_seconds:
        metrics.cache_operation_duration_seconds.labels(
            operation=operation,
            kind=kind,
        ).observe(duration)
