"""Prometheus metrics for schedule processing, recalculations and goal projections"""

from typing import Iterable

from prometheus_client import Counter, Histogram

from allowance_ledger.domain.models import GoalOutcome, Transaction

# Ledger metrics
auto_deposit_counter = Counter(
    "ledger_auto_deposits_total",
    "Scheduled deposits generated",
    ["kind"],  # allowance | interest
)

recalculation_counter = Counter(
    "ledger_recalculations_total",
    "Ledger recalculations run",
    ["mode"],  # extend | pivot | full
)

goal_projection_counter = Counter(
    "ledger_goal_projections_total",
    "Savings goal projections computed",
    ["outcome"],
)

# Storage metrics
storage_failures_counter = Counter(
    "storage_failures_total",
    "Failed account state loads or saves",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recalculation(
    mode: str,
    before: Iterable[Transaction],
    after: Iterable[Transaction],
) -> None:
    """Count a recalculation and the auto deposits it added"""
    recalculation_counter.labels(mode=mode).inc()

    existing = set(before)
    for txn in after:
        if txn not in existing:
            auto_deposit_counter.labels(kind=txn.kind.value).inc()


def record_goal_projection(outcome: GoalOutcome) -> None:
    goal_projection_counter.labels(outcome=outcome.value).inc()
