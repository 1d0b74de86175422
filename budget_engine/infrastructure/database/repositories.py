"""Data access layer for budget entities"""

import uuid
import logging
from datetime import date
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from budget_engine.config import settings
from budget_engine.domain.anomalies import spend_key
from budget_engine.domain.models import (
    AllocationWithCategory,
    CategorySpendRow,
    PaydaySettings,
    ResolvedAllocation,
)
from budget_engine.domain.payday import calculate_budget_period
from budget_engine.infrastructure.database.models import (
    BankTransactionRecord,
    BudgetAllocationRecord,
    BudgetCategoryRecord,
    BudgetPeriodRecord,
    BudgetSaverRecord,
    PaydayConfigRecord,
)

logger = logging.getLogger(__name__)


class PeriodRepository:
    """Repository for budget periods"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, period_id: uuid.UUID) -> Optional[BudgetPeriodRecord]:
        return self.db.query(BudgetPeriodRecord).filter(BudgetPeriodRecord.id == period_id).first()

    def get_by_start_date(self, start_date: date) -> Optional[BudgetPeriodRecord]:
        return self.db.query(BudgetPeriodRecord).filter(BudgetPeriodRecord.start_date == start_date).first()

    def get_containing(self, day: date) -> Optional[BudgetPeriodRecord]:
        """Period whose [start_date, end_date] covers day"""
        return (
            self.db.query(BudgetPeriodRecord)
            .filter(BudgetPeriodRecord.start_date <= day, BudgetPeriodRecord.end_date >= day)
            .first()
        )

    def list_recent(self, limit: int) -> List[BudgetPeriodRecord]:
        """Most recent periods, newest first"""
        return (
            self.db.query(BudgetPeriodRecord)
            .order_by(BudgetPeriodRecord.start_date.desc())
            .limit(limit)
            .all()
        )

    def list_before(self, start_date: date, limit: int) -> List[BudgetPeriodRecord]:
        """Periods starting before start_date, newest first"""
        return (
            self.db.query(BudgetPeriodRecord)
            .filter(BudgetPeriodRecord.start_date < start_date)
            .order_by(BudgetPeriodRecord.start_date.desc())
            .limit(limit)
            .all()
        )

    def ensure_period_for(
        self,
        day: date,
        payday_settings: PaydaySettings,
        expected_income_cents: int | None = None,
    ) -> BudgetPeriodRecord:
        """
        Return the period covering day, creating it from the payday rule if missing.

        The new row is flushed, not committed; the caller owns the transaction.
        """
        existing = self.get_containing(day)
        if existing:
            return existing

        pay_period = calculate_budget_period(payday_settings, day)

        # Another period may already start on the computed payday if settings changed
        existing = self.get_by_start_date(pay_period.start_date)
        if existing:
            return existing

        db_period = BudgetPeriodRecord(
            start_date=pay_period.start_date,
            end_date=pay_period.end_date,
            expected_income_cents=(
                expected_income_cents
                if expected_income_cents is not None
                else settings.default_expected_income_cents
            ),
        )
        self.db.add(db_period)
        self.db.flush()

        logger.info(
            "Budget period created",
            extra={
                "period_id": str(db_period.id),
                "start_date": pay_period.start_date.isoformat(),
                "end_date": pay_period.end_date.isoformat(),
            },
        )
        return db_period


class AllocationRepository:
    """Repository for per-period category allocations"""

    def __init__(self, db: Session):
        self.db = db

    def get_with_categories(self, period_id: uuid.UUID) -> List[AllocationWithCategory]:
        """Allocations for a period joined with category display fields, by sort_order"""
        rows = (
            self.db.query(
                BudgetAllocationRecord.category_id,
                BudgetAllocationRecord.allocated_cents,
                BudgetCategoryRecord.name,
                BudgetCategoryRecord.colour,
                BudgetCategoryRecord.icon,
                BudgetCategoryRecord.sort_order,
            )
            .join(BudgetCategoryRecord, BudgetAllocationRecord.category_id == BudgetCategoryRecord.id)
            .filter(BudgetAllocationRecord.budget_period_id == period_id)
            .order_by(BudgetCategoryRecord.sort_order.asc())
            .all()
        )
        return [
            AllocationWithCategory(
                category_id=row.category_id,
                allocated_cents=int(row.allocated_cents),
                category_name=row.name,
                colour=row.colour,
                icon=row.icon,
                sort_order=row.sort_order,
            )
            for row in rows
        ]

    def replace_allocations(self, period_id: uuid.UUID, allocations: List[ResolvedAllocation]) -> None:
        """Swap a period's allocations for a resolved template"""
        (
            self.db.query(BudgetAllocationRecord)
            .filter(BudgetAllocationRecord.budget_period_id == period_id)
            .delete(synchronize_session=False)
        )
        for alloc in allocations:
            self.db.add(
                BudgetAllocationRecord(
                    budget_period_id=period_id,
                    category_id=alloc.category_id,
                    allocated_cents=alloc.allocated_cents,
                )
            )
        self.db.flush()


class TransactionRepository:
    """Aggregate reads over bank transactions, excluding transfers and soft-deleted rows"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _in_period(start_date: date, end_date: date) -> list:
        return [
            BankTransactionRecord.transaction_date >= start_date,
            BankTransactionRecord.transaction_date <= end_date,
            BankTransactionRecord.is_transfer.is_(False),
            BankTransactionRecord.deleted_at.is_(None),
        ]

    def sum_income(self, start_date: date, end_date: date, income_category_id: str | None = None) -> int:
        category_id = income_category_id or settings.income_category_id
        total = (
            self.db.query(func.coalesce(func.sum(BankTransactionRecord.amount_cents), 0))
            .filter(BankTransactionRecord.category_id == category_id, *self._in_period(start_date, end_date))
            .scalar()
        )
        return int(total or 0)

    def sum_spend_by_category(self, start_date: date, end_date: date) -> Dict[str, int]:
        """Absolute spend per budget category id"""
        rows = (
            self.db.query(
                BankTransactionRecord.category_id,
                func.coalesce(func.sum(func.abs(BankTransactionRecord.amount_cents)), 0).label("total_cents"),
            )
            .filter(BankTransactionRecord.amount_cents < 0, *self._in_period(start_date, end_date))
            .group_by(BankTransactionRecord.category_id)
            .all()
        )
        return {row.category_id: int(row.total_cents) for row in rows if row.category_id}

    def sum_spend_by_saver(self, start_date: date, end_date: date) -> Dict[str, int]:
        """Absolute spend per saver key"""
        rows = (
            self.db.query(
                BankTransactionRecord.saver_key,
                func.coalesce(func.sum(func.abs(BankTransactionRecord.amount_cents)), 0).label("total_cents"),
            )
            .filter(BankTransactionRecord.amount_cents < 0, *self._in_period(start_date, end_date))
            .group_by(BankTransactionRecord.saver_key)
            .all()
        )
        return {row.saver_key: int(row.total_cents) for row in rows if row.saver_key}

    def spend_by_saver_category(self, start_date: date, end_date: date) -> List[CategorySpendRow]:
        """Spend total and count per saver/category pair"""
        rows = (
            self.db.query(
                BankTransactionRecord.saver_key,
                BankTransactionRecord.category_key,
                func.coalesce(func.sum(func.abs(BankTransactionRecord.amount_cents)), 0).label("total_cents"),
                func.count().label("tx_count"),
            )
            .filter(BankTransactionRecord.amount_cents < 0, *self._in_period(start_date, end_date))
            .group_by(BankTransactionRecord.saver_key, BankTransactionRecord.category_key)
            .all()
        )
        return [
            CategorySpendRow(
                saver_key=row.saver_key,
                category_key=row.category_key,
                total_cents=int(row.total_cents),
                tx_count=int(row.tx_count),
            )
            for row in rows
        ]

    def list_in_period(self, start_date: date, end_date: date) -> List[BankTransactionRecord]:
        return (
            self.db.query(BankTransactionRecord)
            .filter(*self._in_period(start_date, end_date))
            .order_by(BankTransactionRecord.transaction_date.asc())
            .all()
        )


class SaverRepository:
    """Repository for savers and their category budgets"""

    def __init__(self, db: Session):
        self.db = db

    def list_active_spending(self) -> List[BudgetSaverRecord]:
        return (
            self.db.query(BudgetSaverRecord)
            .filter(BudgetSaverRecord.is_active.is_(True), BudgetSaverRecord.saver_type == "spending")
            .order_by(BudgetSaverRecord.sort_order.asc())
            .all()
        )

    def category_budgets(self) -> Dict[str, int]:
        """Monthly budget per saver/category key for active categories linked to an active saver"""
        rows = (
            self.db.query(
                BudgetSaverRecord.saver_key,
                BudgetCategoryRecord.category_key,
                BudgetCategoryRecord.monthly_budget_cents,
            )
            .join(BudgetSaverRecord, BudgetCategoryRecord.saver_id == BudgetSaverRecord.id)
            .filter(BudgetCategoryRecord.is_active.is_(True), BudgetSaverRecord.is_active.is_(True))
            .all()
        )
        return {
            spend_key(row.saver_key, row.category_key): int(row.monthly_budget_cents or 0)
            for row in rows
        }


class PaydayConfigRepository:
    """Repository for the saved payday rule"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> PaydaySettings:
        """Saved payday settings, or the configured defaults if none were saved"""
        row = self.db.query(PaydayConfigRecord).first()
        if row is None:
            return PaydaySettings(
                payday_day=settings.default_payday_day,
                adjust_for_weekends=settings.default_adjust_for_weekends,
            )
        return PaydaySettings(payday_day=row.payday_day, adjust_for_weekends=row.adjust_for_weekends)

    def save_settings(self, payday_settings: PaydaySettings, income_source_pattern: str | None = None) -> PaydayConfigRecord:
        """Upsert the single payday config row; a None pattern keeps the stored one"""
        row = self.db.query(PaydayConfigRecord).first()
        if row is None:
            row = PaydayConfigRecord()
            self.db.add(row)
        row.payday_day = payday_settings.payday_day
        row.adjust_for_weekends = payday_settings.adjust_for_weekends
        if income_source_pattern is not None:
            row.income_source_pattern = income_source_pattern
        self.db.flush()
        return row
