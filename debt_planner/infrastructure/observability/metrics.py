"""Prometheus metrics for plan volume, simulation length, and engine failures"""

from prometheus_client import Counter, Histogram

# Plan metrics
plan_counter = Counter(
    "debt_planner_plans_total",
    "Repayment plans computed",
    ["strategy", "outcome"],  # outcome: ok | <error kind>
)

plan_months_histogram = Histogram(
    "debt_planner_plan_months",
    "Months until debt-free for computed plans",
    buckets=[6, 12, 24, 36, 60, 120, 240, 480, 1200],
)

# What-if analysis metrics
scenario_counter = Counter(
    "debt_planner_scenarios_total",
    "Consolidation, refinance and debt-to-income analyses",
    ["analysis", "outcome"],
)

domain_error_counter = Counter(
    "debt_planner_domain_errors_total",
    "Engine failures surfaced to callers",
    ["kind"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_plan(strategy: str, total_months: int | None, error_kind: str | None = None) -> None:
    """Record one plan computation; total_months is only observed on success"""
    outcome = error_kind or "ok"
    plan_counter.labels(strategy=strategy, outcome=outcome).inc()
    if error_kind is not None:
        domain_error_counter.labels(kind=error_kind).inc()
    elif total_months is not None:
        plan_months_histogram.observe(total_months)


def record_scenario(analysis: str, error_kind: str | None = None) -> None:
    outcome = error_kind or "ok"
    scenario_counter.labels(analysis=analysis, outcome=outcome).inc()
    if error_kind is not None:
        domain_error_counter.labels(kind=error_kind).inc()
