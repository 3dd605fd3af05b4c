"""
Prometheus metrics for the therapy tracker service.

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
    ["kind"],
)

licenses_redeemed_total = Counter(
    "licenses_redeemed_total",
    "Total licenses redeemed to provision a tenant",
    ["kind"],
)

licenses_revoked_total = Counter(
    "licenses_revoked_total",
    "Total pending licenses revoked",
)

licenses_expired_total = Counter(
    "licenses_expired_total",
    "Total licenses moved to expired",
)

license_validations_total = Counter(
    "license_validations_total",
    "Total license key validations",
    ["outcome"],
)

# Tenant metrics
tenants_registered_total = Counter(
    "tenants_registered_total",
    "Total tenants registered",
)

professional_users_added_total = Counter(
    "professional_users_added_total",
    "Total professional users added",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
