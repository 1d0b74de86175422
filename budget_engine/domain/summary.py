"""Budget summary assembly - spend against allocations for one period"""

from datetime import date
from typing import Dict, List

from budget_engine.domain.models import (
    AllocationWithCategory,
    BudgetPeriod,
    BudgetSummary,
    BudgetTotals,
    CategoryBreakdown,
    IncomeSummary,
    PeriodProgress,
)
from budget_engine.utils.date_utils import days_between, inclusive_days, round_half_up

WARNING_THRESHOLD = 80
OVER_THRESHOLD = 100


def category_status(percent_used: float) -> str:
    """Map percent of budget used to under / warning / over"""
    if percent_used > OVER_THRESHOLD:
        return "over"
    if percent_used >= WARNING_THRESHOLD:
        return "warning"
    return "under"


def calculate_percent_used(budgeted_cents: int, spent_cents: int) -> float:
    """
    Unrounded percent of the allocation spent.

    A zero allocation with any spend reports 100 so it still shows as fully
    used; zero on both sides is 0.
    """
    if budgeted_cents > 0:
        return spent_cents / budgeted_cents * 100
    if spent_cents > 0:
        return 100.0
    return 0.0


def build_category_breakdown(allocation: AllocationWithCategory, spent_cents: int) -> CategoryBreakdown:
    budgeted_cents = allocation.allocated_cents
    percent_used = calculate_percent_used(budgeted_cents, spent_cents)
    # Status uses the unrounded value so 100.04% still reads as over
    status = category_status(percent_used)
    if budgeted_cents == 0 and spent_cents > 0:
        # Any spend against a zero allocation is over budget, not at 100%
        status = "over"

    return CategoryBreakdown(
        category_id=allocation.category_id,
        category_name=allocation.category_name,
        colour=allocation.colour,
        icon=allocation.icon,
        budgeted_cents=budgeted_cents,
        spent_cents=spent_cents,
        remaining_cents=budgeted_cents - spent_cents,
        percent_used=round_half_up(percent_used, 1),
        status=status,
    )


def period_progress(start_date: date, end_date: date, today: date) -> PeriodProgress:
    """Inclusive day counts for a period as of today, clamped to the period"""
    total_days = inclusive_days(start_date, end_date)
    days_elapsed = max(0, min(total_days, days_between(start_date, today) + 1))
    days_remaining = max(0, total_days - days_elapsed)
    progress_percent = int(round_half_up(days_elapsed / total_days * 100)) if total_days > 0 else 0

    return PeriodProgress(
        total_days=total_days,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        progress_percent=progress_percent,
    )


def calculate_savings_rate(savings_cents: int, actual_income_cents: int) -> float:
    """Savings as a percentage of actual income, one decimal place"""
    if actual_income_cents <= 0:
        return 0.0
    return round_half_up(savings_cents / actual_income_cents * 1000) / 10


def build_budget_summary(
    period: BudgetPeriod,
    allocations: List[AllocationWithCategory],
    actual_income_cents: int,
    spend_by_category: Dict[str, int],
    today: date,
) -> BudgetSummary:
    """
    Assemble a BudgetSummary from already-loaded period data.

    Categories follow the allocation sort_order; only categories that have an
    allocation in the period appear. Totals:
    - unallocated = expected income - total budgeted
    - savings = actual income - total spent
    """
    sorted_allocations = sorted(allocations, key=lambda a: a.sort_order or 0)

    categories = [
        build_category_breakdown(alloc, spend_by_category.get(alloc.category_id, 0))
        for alloc in sorted_allocations
    ]

    total_budgeted = sum(c.budgeted_cents for c in categories)
    total_spent = sum(c.spent_cents for c in categories)
    savings_cents = actual_income_cents - total_spent

    progress = period_progress(period.start_date, period.end_date, today)

    return BudgetSummary(
        period_id=period.id,
        start_date=period.start_date,
        end_date=period.end_date,
        income=IncomeSummary(
            expected_cents=period.expected_income_cents,
            actual_cents=actual_income_cents,
        ),
        categories=categories,
        totals=BudgetTotals(
            budgeted_cents=total_budgeted,
            spent_cents=total_spent,
            unallocated_cents=period.expected_income_cents - total_budgeted,
            savings_cents=savings_cents,
            savings_rate=calculate_savings_rate(savings_cents, actual_income_cents),
        ),
        days_elapsed=progress.days_elapsed,
        days_remaining=progress.days_remaining,
        total_days=progress.total_days,
    )
