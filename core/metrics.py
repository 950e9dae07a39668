"""
Prometheus metrics for the license key service.

Custom metrics for business logic and performance monitoring.
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

# License metrics
licenses_generated_total = Counter(
    "licenses_generated_total",
    "Total license keys generated",
    ["license_type"],
)

license_checks_total = Counter(
    "license_checks_total",
    "Total license checks by outcome",
    ["result"],
)

auto_allowed_ips_total = Counter(
    "auto_allowed_ips_total",
    "Total IP addresses admitted by auto-allow",
)

license_tokens_signed_total = Counter(
    "license_tokens_signed_total",
    "Total offline verification tokens issued",
)

# Rate limiting
rate_limited_requests_total = Counter(
    "rate_limited_requests_total",
    "Total requests rejected by the rate limiter",
    ["pool"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
