"""Observability module for the storefront cache.

Provides structured logging and Prometheus metrics:
- JSON or console logging with store id context
- Cache hit/miss/write/sweep counters
"""

from storefront.observability.logging import (
    LogContext,
    configure_logging,
    operation_var,
    store_id_var,
)
from storefront.observability.metrics import get_metrics, metrics_registry

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "store_id_var",
    "operation_var",
    # Metrics
    "get_metrics",
    "metrics_registry",
]
