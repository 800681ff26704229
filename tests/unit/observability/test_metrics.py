"""Tests for cache metrics."""

from prometheus_client import REGISTRY

from storefront.observability.metrics import (
    get_metrics,
    record_cache_hit,
    record_cache_miss,
    record_sweep_deleted,
)


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestCacheMetrics:
    """Test metric recording helpers."""

    def test_registry_initialized_once(self) -> None:
        """get_metrics() returns the same initialized registry."""
        assert get_metrics() is get_metrics()

    def test_hit_counter(self) -> None:
        """Hits are counted per kind."""
        before = _sample("storefront_cache_hits_total", {"kind": "profile"})
        record_cache_hit("profile")
        assert _sample("storefront_cache_hits_total", {"kind": "profile"}) == before + 1

    def test_miss_counter_by_reason(self) -> None:
        """Misses are counted per kind and reason."""
        labels = {"kind": "products", "reason": "expired"}
        before = _sample("storefront_cache_misses_total", labels)
        record_cache_miss("products", "expired")
        assert _sample("storefront_cache_misses_total", labels) == before + 1

    def test_sweep_deleted_skips_zero(self) -> None:
        """Empty sweeps do not touch the counter."""
        labels = {"kind": "reviews"}
        before = _sample("storefront_cache_sweep_deleted_total", labels)
        record_sweep_deleted("reviews", 0)
        record_sweep_deleted("reviews", 4)
        assert _sample("storefront_cache_sweep_deleted_total", labels) == before + 4

    def test_exposition(self) -> None:
        """The registry renders the exposition format."""
        record_cache_hit("categories")
        assert b"storefront_cache_hits_total" in get_metrics().generate_latest()
