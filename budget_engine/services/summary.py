"""Budget summary aggregation over the persistence collaborator"""

import asyncio
import logging
import time
import uuid
from datetime import date

from budget_engine.domain.exceptions import PeriodNotFoundError
from budget_engine.domain.models import BudgetSummary
from budget_engine.domain.summary import build_budget_summary
from budget_engine.infrastructure.database.source import BudgetDataSource
from budget_engine.infrastructure.observability.logging import log_summary
from budget_engine.infrastructure.observability.metrics import (
    budget_summary_duration_histogram,
    period_not_found_counter,
)

logger = logging.getLogger(__name__)


async def calculate_budget_summary(
    source: BudgetDataSource,
    period_id: uuid.UUID,
    today: date | None = None,
) -> BudgetSummary:
    """
    Compute the spend/income/savings breakdown for one budget period.

    Flow:
    1. Load the period and its allocations concurrently
    2. Fail with PeriodNotFoundError if the period is missing
    3. Load actual income and per-category spend for the period's dates concurrently
    4. Assemble the summary

    Read-only. A failed read propagates unchanged; no partial summary is returned.
    """
    start_time = time.time()
    if today is None:
        today = date.today()

    period, allocations = await asyncio.gather(
        asyncio.to_thread(source.get_period, period_id),
        asyncio.to_thread(source.get_allocations_with_categories, period_id),
    )

    if period is None:
        period_not_found_counter.inc()
        logger.warning("Budget period not found", extra={"period_id": str(period_id)})
        raise PeriodNotFoundError(period_id)

    actual_income_cents, spend_by_category = await asyncio.gather(
        asyncio.to_thread(source.sum_income, period.start_date, period.end_date),
        asyncio.to_thread(source.sum_spend_by_category, period.start_date, period.end_date),
    )

    summary = build_budget_summary(period, allocations, actual_income_cents, spend_by_category, today)

    duration = time.time() - start_time
    budget_summary_duration_histogram.observe(duration)
    log_summary(
        str(period_id),
        summary.totals.spent_cents,
        summary.totals.savings_rate,
        len(summary.categories),
        duration * 1000,
    )
    return summary
