"""Prometheus metrics for MindScribe.

All metric objects are defined here so they can be imported from any module.
"""

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# Storage metrics
# ---------------------------------------------------------------------------

STORAGE_OPERATIONS = Counter(
    "mindscribe_storage_operations_total",
    "Total persistence adapter operations",
    ["operation", "outcome"],  # load/save/remove/clear, ok/error/missing
)

STORAGE_BYTES = Gauge(
    "mindscribe_storage_bytes",
    "Approximate bytes stored under the application prefix",
)

# ---------------------------------------------------------------------------
# Entity metrics
# ---------------------------------------------------------------------------

ENTITY_MUTATIONS = Counter(
    "mindscribe_entity_mutations_total",
    "Total entity mutations",
    ["collection", "operation"],  # created, updated, deleted
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS = Counter(
    "mindscribe_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_DURATION = Histogram(
    "mindscribe_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
)
