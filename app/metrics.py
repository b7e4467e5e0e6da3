"""Prometheus metrics definitions for flex-reviews-server.

Exposes metrics for:
1. HTTP API metrics (requests, latency, errors)
2. Hostaway and Google Places client metrics (calls, latency, errors)
3. Review snapshot metrics (fetches by source, size, approval updates)
4. Background job metrics (runs, duration, last run)
"""
from prometheus_client import Counter, Histogram, Gauge

# =============================================================================
# HTTP API METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

HTTP_REQUESTS_IN_PROGRESS = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
)

HTTP_RESPONSE_SIZE_BYTES = Histogram(
    "http_response_size_bytes",
    "HTTP response body size in bytes",
    ["method", "endpoint"],
    buckets=(100, 500, 1000, 5000, 10000, 50000, 100000, 500000),
)

# =============================================================================
# HOSTAWAY API CLIENT METRICS
# =============================================================================

HOSTAWAY_API_CALLS_TOTAL = Counter(
    "hostaway_api_calls_total",
    "Total number of Hostaway API calls",
    ["endpoint", "status"],  # status: success, error
)

HOSTAWAY_API_CALL_DURATION_SECONDS = Histogram(
    "hostaway_api_call_duration_seconds",
    "Hostaway API call latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

HOSTAWAY_API_ERRORS_TOTAL = Counter(
    "hostaway_api_errors_total",
    "Total number of Hostaway API errors",
    ["endpoint", "error_type"],  # error_type: http_error, timeout, connection_error, bad_response
)

# =============================================================================
# GOOGLE PLACES API CLIENT METRICS
# =============================================================================

GOOGLE_PLACES_API_CALLS_TOTAL = Counter(
    "google_places_api_calls_total",
    "Total number of Google Places API calls",
    ["endpoint", "status"],  # status: success, error
)

GOOGLE_PLACES_API_CALL_DURATION_SECONDS = Histogram(
    "google_places_api_call_duration_seconds",
    "Google Places API call latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

GOOGLE_PLACES_API_ERRORS_TOTAL = Counter(
    "google_places_api_errors_total",
    "Total number of Google Places API errors",
    ["endpoint", "error_type"],  # error_type: api_status, http_error, timeout, connection_error, bad_response
)

# =============================================================================
# REVIEW SNAPSHOT METRICS
# =============================================================================

REVIEW_FETCHES_TOTAL = Counter(
    "review_fetches_total",
    "Review collection rebuilds by data source",
    ["source"],  # source: real_api, mock_data
)

REVIEWS_IN_SNAPSHOT = Gauge(
    "reviews_in_snapshot",
    "Number of normalized reviews in the current snapshot",
)

APPROVAL_UPDATES_TOTAL = Counter(
    "approval_updates_total",
    "Review approval updates",
    ["status"],  # status: success, error, not_found
)

# =============================================================================
# BACKGROUND JOB METRICS
# =============================================================================

BACKGROUND_JOB_RUNS_TOTAL = Counter(
    "background_job_runs_total",
    "Total number of background job runs",
    ["job_name", "status"],  # status: success, error
)

BACKGROUND_JOB_DURATION_SECONDS = Histogram(
    "background_job_duration_seconds",
    "Background job duration in seconds",
    ["job_name"],
    buckets=(0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
)

BACKGROUND_JOB_LAST_RUN_TIMESTAMP = Gauge(
    "background_job_last_run_timestamp",
    "Unix timestamp of last successful job run",
    ["job_name"],
)
