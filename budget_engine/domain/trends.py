"""Spending trend rows - one chart point per budget period"""

from datetime import date
from typing import Dict, List

from budget_engine.domain.models import (
    BudgetSummary,
    PeriodTrendRow,
    SaverMetadata,
    TrendCategory,
    TrendSaver,
)


def build_trend_row(
    summary: BudgetSummary,
    saver_spend: Dict[str, int],
    savers: List[SaverMetadata],
    today: date,
) -> PeriodTrendRow:
    """
    Flatten a period summary plus per-saver spend into a trend row.

    A period containing today is marked projected: its totals are still
    accumulating.
    """
    return PeriodTrendRow(
        period_id=summary.period_id,
        start_date=summary.start_date,
        end_date=summary.end_date,
        total_spent_cents=summary.totals.spent_cents,
        total_income_cents=summary.income.actual_cents,
        savings_rate=summary.totals.savings_rate,
        is_projected=summary.start_date <= today <= summary.end_date,
        categories=[
            TrendCategory(
                category_id=cat.category_id,
                name=cat.category_name,
                colour=cat.colour,
                spent_cents=cat.spent_cents,
            )
            for cat in summary.categories
        ],
        savers=[
            TrendSaver(
                saver_key=s.saver_key,
                display_name=s.display_name,
                emoji=s.emoji,
                colour=s.colour,
                budget_cents=s.budget_cents,
                spent_cents=saver_spend.get(s.saver_key, 0),
            )
            for s in savers
        ],
    )
