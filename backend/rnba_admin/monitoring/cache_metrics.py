"""
Cache Metrics

Prometheus counters for the two-tier cache and the data services
reading through it.
"""

from prometheus_client import Counter

CACHE_LOOKUPS = Counter(
    "rnba_cache_lookups_total",
    "Cache lookups by tier and result",
    ["tier", "result"],
)

CACHE_WRITES = Counter(
    "rnba_cache_writes_total",
    "Cache writes by outcome",
    ["outcome"],
)

CACHE_INVALIDATIONS = Counter(
    "rnba_cache_invalidations_total",
    "Cache keys invalidated",
)

STALE_FALLBACKS = Counter(
    "rnba_cache_stale_fallbacks_total",
    "Expired cache entries served because the backend fetch failed",
    ["service"],
)


def record_lookup(tier: str, hit: bool) -> None:
    CACHE_LOOKUPS.labels(tier=tier, result="hit" if hit else "miss").inc()


def record_write(outcome: str) -> None:
    CACHE_WRITES.labels(outcome=outcome).inc()


def record_invalidation() -> None:
    CACHE_INVALIDATIONS.inc()


def record_stale_fallback(service: str) -> None:
    STALE_FALLBACKS.labels(service=service).inc()
