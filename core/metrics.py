"""
Prometheus metrics for the cache-aside service.
"""

from typing import Dict, Any, Optional

from prometheus_client import CollectorRegistry, Counter


class CacheMetrics:
    """
    Counters describing cache traffic and degradation.

    With the default ``registry=None`` the counters are not registered
    anywhere and cannot be scraped. Pass ``prometheus_client.REGISTRY`` (or
    the service's own registry) to expose them.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache metrics."""
        self._metrics["cache_requests_total"] = Counter(
            "cache_requests_total",
            "Total cache requests by operation and outcome",
            ["operation", "result"],
            registry=self.registry
        )

        self._metrics["cache_compute_total"] = Counter(
            "cache_compute_total",
            "Total recomputations triggered by cache misses",
            registry=self.registry
        )

    def record_request(self, operation: str, result: str):
        """Record one cache request outcome (hit, miss, unavailable, decode_error, ...)."""
        self._metrics["cache_requests_total"].labels(
            operation=operation,
            result=result
        ).inc()

    def record_compute(self):
        """Record one recomputation on a miss."""
        self._metrics["cache_compute_total"].inc()

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)
