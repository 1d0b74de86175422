"""
Rule-based anomaly detection for budget transactions.

Three independent rules:
1. Single spend > 2x the historical average transaction for its saver/category (alert from 3x)
2. Saver/category spend > 150% of budget while more than half the period remains
3. Same merchant charged more than once on the same day
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from budget_engine.domain.models import (
    Anomaly,
    CategoryAverage,
    CategorySpendRow,
    PeriodContext,
    PeriodTransaction,
)
from budget_engine.utils.date_utils import round_half_up

LARGE_TX_WARNING_MULTIPLE = 2
LARGE_TX_ALERT_MULTIPLE = 3
OVERSPEND_WARNING_RATIO = 1.5
OVERSPEND_ALERT_RATIO = 2
OVERSPEND_MIN_REMAINING_FRACTION = 0.5
DUPLICATE_MIN_COUNT = 2


def spend_key(saver_key: Optional[str], category_key: Optional[str]) -> str:
    """Lookup key for a saver/category pair; missing parts become empty strings"""
    return f"{saver_key or ''}::{category_key or ''}"


def _format_dollars(cents: int) -> str:
    return f"${cents / 100:.2f}"


def _large_transactions(spending: List[PeriodTransaction], avg_tx: Dict[str, int]) -> List[Anomaly]:
    anomalies = []
    for tx in spending:
        avg_cents = avg_tx.get(spend_key(tx.saver_key, tx.category_key))
        if not avg_cents or avg_cents <= 0:
            continue

        tx_abs = abs(tx.amount_cents)
        if tx_abs <= avg_cents * LARGE_TX_WARNING_MULTIPLE:
            continue

        multiple = int(round_half_up(tx_abs / avg_cents))
        anomalies.append(
            Anomaly(
                id=f"large_tx::{tx.id}",
                type="large_transaction",
                severity="alert" if tx_abs >= avg_cents * LARGE_TX_ALERT_MULTIPLE else "warning",
                saver_key=tx.saver_key,
                category_key=tx.category_key,
                description=(
                    f"{tx.description} ({_format_dollars(tx_abs)}) is {multiple}x "
                    f"the average transaction for this category"
                ),
                amount_cents=tx_abs,
                comparison_cents=avg_cents,
            )
        )
    return anomalies


def _category_overspend(
    spending: List[PeriodTransaction],
    budgets: Dict[str, int],
    period_context: PeriodContext,
) -> List[Anomaly]:
    if period_context.days_remaining <= period_context.total_days * OVERSPEND_MIN_REMAINING_FRACTION:
        return []

    totals: Dict[Tuple[Optional[str], Optional[str]], int] = defaultdict(int)
    for tx in spending:
        totals[(tx.saver_key or None, tx.category_key or None)] += abs(tx.amount_cents)

    anomalies = []
    for (saver_key, category_key), total_cents in totals.items():
        key = spend_key(saver_key, category_key)
        budget = budgets.get(key)
        if not budget or budget <= 0 or total_cents <= budget * OVERSPEND_WARNING_RATIO:
            continue

        pct_used = int(round_half_up(total_cents / budget * 100))
        anomalies.append(
            Anomaly(
                id=f"overspend::{key}",
                type="category_overspend",
                severity="alert" if total_cents > budget * OVERSPEND_ALERT_RATIO else "warning",
                saver_key=saver_key,
                category_key=category_key,
                description=(
                    f"{category_key or saver_key} is at {pct_used}% of budget "
                    f"with {period_context.days_remaining} days remaining"
                ),
                amount_cents=total_cents,
                comparison_cents=budget,
            )
        )
    return anomalies


def _duplicate_merchants(spending: List[PeriodTransaction]) -> List[Anomaly]:
    groups: Dict[Tuple[str, str], List[PeriodTransaction]] = defaultdict(list)
    for tx in spending:
        merchant = tx.description.upper().strip()
        groups[(merchant, tx.transaction_date.isoformat())].append(tx)

    anomalies = []
    for (merchant, day), txs in groups.items():
        if len(txs) < DUPLICATE_MIN_COUNT:
            continue

        total_cents = sum(abs(t.amount_cents) for t in txs)
        first = txs[0]
        anomalies.append(
            Anomaly(
                id=f"duplicate::{merchant}::{day}",
                type="duplicate_merchant",
                severity="warning",
                saver_key=first.saver_key,
                category_key=first.category_key,
                description=(
                    f"{merchant} was charged {len(txs)} times on {day} "
                    f"(total {_format_dollars(total_cents)})"
                ),
                amount_cents=total_cents,
                comparison_cents=abs(first.amount_cents),
            )
        )
    return anomalies


def sort_anomalies(anomalies: Iterable[Anomaly]) -> List[Anomaly]:
    """Alerts before warnings, then largest amount first; id breaks ties"""
    return sorted(anomalies, key=lambda a: (a.severity != "alert", -a.amount_cents, a.id))


def detect_anomalies(
    period_transactions: List[PeriodTransaction],
    historical_averages: List[CategoryAverage],
    period_context: PeriodContext,
) -> List[Anomaly]:
    """
    Flag irregular spending in the current period.

    Pure function: the caller supplies the period's transactions, historical
    per-category averages and the period's day counts. Only spend
    (negative amounts) is analysed. Anomaly ids are stable across calls with
    the same data so clients can track dismissals by id.

    A large transaction is an alert from exactly 3x its average (a $600 spend
    against a $200 average alerts); the warning threshold stays strictly
    above 2x.
    """
    avg_tx: Dict[str, int] = {}
    budgets: Dict[str, int] = {}
    for avg in historical_averages:
        key = spend_key(avg.saver_key, avg.category_key)
        avg_tx[key] = avg.avg_transaction_cents
        budgets[key] = avg.budget_cents

    # Sorted by id so group representatives don't depend on input order
    spending = sorted(
        (t for t in period_transactions if t.amount_cents < 0),
        key=lambda t: t.id,
    )

    anomalies = (
        _large_transactions(spending, avg_tx)
        + _category_overspend(spending, budgets, period_context)
        + _duplicate_merchants(spending)
    )
    return sort_anomalies(anomalies)


def compute_category_averages(
    period_rows: List[List[CategorySpendRow]],
    category_budgets: Dict[str, int],
    num_prior_periods: int,
) -> List[CategoryAverage]:
    """
    Historical averages per saver/category from prior periods' grouped spend.

    avg_transaction_cents is total / transaction count; avg_period_total_cents
    is total / number of prior periods. Budgets are keyed by spend_key().
    """
    if num_prior_periods <= 0:
        return []

    totals: Dict[Tuple[Optional[str], Optional[str]], List[int]] = {}
    for rows in period_rows:
        for row in rows:
            bucket = totals.setdefault((row.saver_key or None, row.category_key or None), [0, 0])
            bucket[0] += row.total_cents
            bucket[1] += row.tx_count

    averages = []
    for (saver_key, category_key), (total_cents, tx_count) in totals.items():
        averages.append(
            CategoryAverage(
                saver_key=saver_key,
                category_key=category_key,
                avg_transaction_cents=int(round_half_up(total_cents / tx_count)) if tx_count > 0 else 0,
                avg_period_total_cents=int(round_half_up(total_cents / num_prior_periods)),
                budget_cents=category_budgets.get(spend_key(saver_key, category_key), 0),
            )
        )
    return averages
