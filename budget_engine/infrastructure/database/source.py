"""Read-only data source feeding the budget engine from the database"""

import uuid
from datetime import date
from typing import Callable, Dict, List, Optional
from sqlalchemy.orm import Session
from budget_engine.config import settings
from budget_engine.domain.anomalies import compute_category_averages
from budget_engine.domain.models import (
    AllocationWithCategory,
    BudgetPeriod,
    CategoryAverage,
    PeriodRef,
    PeriodTransaction,
    SaverMetadata,
)
from budget_engine.infrastructure.database.repositories import (
    AllocationRepository,
    PeriodRepository,
    SaverRepository,
    TransactionRepository,
)


class BudgetDataSource:
    """
    Collaborator reads used by the budget services.

    Every method opens its own short-lived session, so calls are safe to run
    concurrently from worker threads (see asyncio.to_thread in the services).
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_period(self, period_id: uuid.UUID) -> Optional[BudgetPeriod]:
        with self.session_factory() as db:
            record = PeriodRepository(db).get_by_id(period_id)
            if record is None:
                return None
            return BudgetPeriod(
                id=record.id,
                start_date=record.start_date,
                end_date=record.end_date,
                expected_income_cents=int(record.expected_income_cents),
            )

    def get_allocations_with_categories(self, period_id: uuid.UUID) -> List[AllocationWithCategory]:
        with self.session_factory() as db:
            return AllocationRepository(db).get_with_categories(period_id)

    def sum_income(self, start_date: date, end_date: date) -> int:
        with self.session_factory() as db:
            return TransactionRepository(db).sum_income(start_date, end_date)

    def sum_spend_by_category(self, start_date: date, end_date: date) -> Dict[str, int]:
        with self.session_factory() as db:
            return TransactionRepository(db).sum_spend_by_category(start_date, end_date)

    def sum_spend_by_saver(self, start_date: date, end_date: date) -> Dict[str, int]:
        with self.session_factory() as db:
            return TransactionRepository(db).sum_spend_by_saver(start_date, end_date)

    def list_transactions(self, start_date: date, end_date: date) -> List[PeriodTransaction]:
        with self.session_factory() as db:
            return [
                PeriodTransaction(
                    id=str(t.id),
                    description=t.description,
                    amount_cents=int(t.amount_cents),
                    transaction_date=t.transaction_date,
                    saver_key=t.saver_key,
                    category_key=t.category_key,
                )
                for t in TransactionRepository(db).list_in_period(start_date, end_date)
            ]

    def get_historical_averages(
        self,
        before: date,
        saver_key: str | None = None,
        category_key: str | None = None,
    ) -> List[CategoryAverage]:
        """
        Per saver/category averages over the periods that started before `before`.

        Uses up to settings.anomaly_history_periods prior periods. Optional
        saver_key / category_key narrow the result.
        """
        with self.session_factory() as db:
            prior = PeriodRepository(db).list_before(before, settings.anomaly_history_periods)
            transactions = TransactionRepository(db)
            period_rows = [transactions.spend_by_saver_category(p.start_date, p.end_date) for p in prior]
            budgets = SaverRepository(db).category_budgets()

        averages = compute_category_averages(period_rows, budgets, len(prior))
        return [
            avg
            for avg in averages
            if (saver_key is None or avg.saver_key == saver_key)
            and (category_key is None or avg.category_key == category_key)
        ]

    def list_recent_periods(self, limit: int) -> List[PeriodRef]:
        """Most recent periods, newest first"""
        with self.session_factory() as db:
            return [
                PeriodRef(id=p.id, start_date=p.start_date, end_date=p.end_date)
                for p in PeriodRepository(db).list_recent(limit)
            ]

    def list_spending_savers(self) -> List[SaverMetadata]:
        with self.session_factory() as db:
            return [
                SaverMetadata(
                    saver_key=s.saver_key,
                    display_name=s.display_name,
                    emoji=s.emoji,
                    colour=s.colour,
                    budget_cents=int(s.monthly_budget_cents),
                )
                for s in SaverRepository(db).list_active_spending()
            ]
