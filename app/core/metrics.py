# File: app/core/metrics.py
from prometheus_client import Counter, Histogram

REQUESTS_TOTAL = Counter(
    "gateway_requests_total",
    "Total number of generation requests by outcome.",
    ["capability", "status"]
)

REQUEST_PROCESSING_DURATION_SECONDS = Histogram(
    "gateway_request_duration_seconds",
    "Time taken to process an HTTP request.",
    ["method", "path"]
)

PROVIDER_API_DURATION_SECONDS = Histogram(
    "gateway_provider_duration_seconds",
    "Duration of calls to the upstream AI provider.",
    ["capability", "model_name"],
    buckets=[0.1, 0.5, 1, 2, 5, 10, 20, 30, 60]
)

PROVIDER_API_ERRORS_TOTAL = Counter(
    "gateway_provider_errors_total",
    "Total number of errors from the upstream AI provider.",
    ["capability", "error_type"]
)

GENERATION_COST_USD_TOTAL = Counter(
    "gateway_generation_cost_usd_total",
    "Accumulated estimated cost of provider calls in USD.",
    ["capability", "model_name"]
)
