"""Prometheus metrics for budget summaries, anomaly detection and trends"""

from typing import Iterable
from prometheus_client import Counter, Histogram, Gauge
from budget_engine.domain.models import Anomaly

# Summary metrics
budget_summary_duration_histogram = Histogram(
    "budget_summary_duration_seconds",
    "Time to load and assemble a budget summary",
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

period_not_found_counter = Counter(
    "budget_period_not_found_total",
    "Lookups for budget periods that do not exist",
)

# Anomaly metrics
anomaly_counter = Counter(
    "budget_anomalies_total",
    "Anomalies raised by detection rules",
    ["type", "severity"],  # large_transaction | category_overspend | duplicate_merchant
)

# Trends
trends_period_gauge = Gauge(
    "budget_trends_periods",
    "Number of periods in the last trends series built",
)


def record_anomalies(anomalies: Iterable[Anomaly]) -> None:
    """Count anomalies by rule and severity"""
    for anomaly in anomalies:
        anomaly_counter.labels(type=anomaly.type, severity=anomaly.severity).inc()
