from prometheus_client import Counter, Histogram

CACHE_LOOKUPS = Counter(
    "cq_cache_lookups_total", "TTL cache lookups", ["cache", "result"]
)
UPSTREAM_REQUESTS = Counter(
    "cq_upstream_requests_total", "Requests sent to the price provider", ["endpoint", "outcome"]
)
UPSTREAM_LATENCY = Histogram(
    "cq_upstream_latency_seconds", "Price provider request latency", ["endpoint"]
)
