"""Anomaly detection for a stored budget period"""

import asyncio
import logging
import uuid
from datetime import date
from typing import List

from budget_engine.domain.anomalies import detect_anomalies
from budget_engine.domain.exceptions import PeriodNotFoundError
from budget_engine.domain.models import Anomaly
from budget_engine.domain.summary import period_progress
from budget_engine.infrastructure.database.source import BudgetDataSource
from budget_engine.infrastructure.observability.logging import log_anomalies
from budget_engine.infrastructure.observability.metrics import period_not_found_counter, record_anomalies

logger = logging.getLogger(__name__)


async def detect_period_anomalies(
    source: BudgetDataSource,
    period_id: uuid.UUID,
    today: date | None = None,
) -> List[Anomaly]:
    """
    Run the anomaly rules over one period's transactions.

    Historical averages come from the periods that started before this one.
    """
    if today is None:
        today = date.today()

    period = await asyncio.to_thread(source.get_period, period_id)
    if period is None:
        period_not_found_counter.inc()
        logger.warning("Budget period not found", extra={"period_id": str(period_id)})
        raise PeriodNotFoundError(period_id)

    progress = period_progress(period.start_date, period.end_date, today)

    transactions, averages = await asyncio.gather(
        asyncio.to_thread(source.list_transactions, period.start_date, period.end_date),
        asyncio.to_thread(source.get_historical_averages, period.start_date),
    )

    anomalies = detect_anomalies(transactions, averages, progress.to_context())

    record_anomalies(anomalies)
    alert_count = sum(1 for a in anomalies if a.severity == "alert")
    log_anomalies(str(period_id), alert_count, len(anomalies) - alert_count)
    return anomalies
