"""Prometheus metrics for monitoring analytics outcomes, store reads and routing"""

from prometheus_client import Counter, Histogram

# Analytics metrics
metric_counter = Counter(
    "finance_metric_total",
    "Analytics metrics computed",
    ["metric", "risk"],  # risk: low | medium | high | critical | error
)

metric_duration_histogram = Histogram(
    "finance_metric_duration_seconds",
    "Time spent computing an analytics metric, store reads included",
    ["metric"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Record store metrics
store_read_failures_counter = Counter(
    "finance_store_read_failures_total",
    "Failed record store reads",
    ["entity"],  # incomes | expenses | recurring payments | transactions | balance
)

# Intent routing
intent_counter = Counter(
    "finance_intent_total",
    "Queries routed by detected intent",
    ["intent"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_metric(metric: str, risk: str, duration_seconds: float) -> None:
    """Record outcome and latency of one analytics computation"""
    metric_counter.labels(metric=metric, risk=risk).inc()
    metric_duration_histogram.labels(metric=metric).observe(duration_seconds)
