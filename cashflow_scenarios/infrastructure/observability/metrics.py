"""Prometheus metrics for monitoring overrides, rejected moves, and scenario fetches"""

from prometheus_client import Counter, Histogram

# Override metrics
override_counter = Counter(
    "scenario_override_total",
    "Transaction overrides processed",
    ["source", "outcome"],  # source: api | local | server; outcome: applied | rejected
)

move_rejected_counter = Counter(
    "scenario_move_rejected_total",
    "Moves rejected before any mutation",
    ["reason"],  # validation | not_found
)

# Scenario API metrics
scenario_fetch_failures_counter = Counter(
    "scenario_fetch_failures_total",
    "Failed scenario API reads",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_override(source: str, applied: bool, count: int = 1) -> None:
    """Record how many overrides were applied or rejected"""
    outcome = "applied" if applied else "rejected"
    override_counter.labels(source=source, outcome=outcome).inc(count)
