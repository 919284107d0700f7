"""
Prometheus metrics for the licensing client.

Custom metrics for license operations, remote calls and the status cache.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Licensing service metrics
pls_remote_requests_total = Counter(
    "pls_remote_requests_total",
    "Total requests sent to the licensing service",
    ["endpoint", "method", "status_code"],
)

pls_remote_request_duration_seconds = Histogram(
    "pls_remote_request_duration_seconds",
    "Licensing service request duration in seconds",
    ["endpoint", "method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# License operation metrics
license_operations_total = Counter(
    "pls_license_operations_total",
    "Total license operations",
    ["operation", "environment", "outcome"],
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["result"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
