"""Spending trends across recent budget periods"""

import asyncio
from datetime import date
from typing import List

from budget_engine.config import settings
from budget_engine.domain.models import PeriodRef, PeriodTrendRow, SaverMetadata
from budget_engine.domain.trends import build_trend_row
from budget_engine.infrastructure.database.source import BudgetDataSource
from budget_engine.infrastructure.observability.metrics import trends_period_gauge
from budget_engine.services.summary import calculate_budget_summary


def clamp_periods_count(periods_count: int | None) -> int:
    """Requested number of periods bounded to [1, trends_max_periods]"""
    if not periods_count:
        periods_count = settings.trends_default_periods
    return min(max(1, periods_count), settings.trends_max_periods)


async def build_trends(
    source: BudgetDataSource,
    periods: List[PeriodRef],
    saver_metadata: List[SaverMetadata],
    today: date | None = None,
) -> List[PeriodTrendRow]:
    """
    Build one trend row per period, oldest to newest.

    Each period's summary and saver spend are loaded concurrently; rows are
    ordered by start date once everything has completed.
    """
    if not periods:
        return []
    if today is None:
        today = date.today()

    summaries, saver_spend = await asyncio.gather(
        asyncio.gather(*(calculate_budget_summary(source, p.id, today) for p in periods)),
        asyncio.gather(
            *(asyncio.to_thread(source.sum_spend_by_saver, p.start_date, p.end_date) for p in periods)
        ),
    )

    rows = [
        build_trend_row(summary, spend, saver_metadata, today)
        for summary, spend in zip(summaries, saver_spend)
    ]
    rows.sort(key=lambda r: r.start_date)

    trends_period_gauge.set(len(rows))
    return rows


async def load_trends(
    source: BudgetDataSource,
    periods_count: int | None = None,
    today: date | None = None,
) -> List[PeriodTrendRow]:
    """Trend rows for the most recent periods, using the active spending savers"""
    limit = clamp_periods_count(periods_count)

    periods, savers = await asyncio.gather(
        asyncio.to_thread(source.list_recent_periods, limit),
        asyncio.to_thread(source.list_spending_savers),
    )
    return await build_trends(source, periods, savers, today)
