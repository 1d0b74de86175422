"""Pytest fixtures for testing"""

import uuid
import pytest
from datetime import date
from typing import Dict, Generator, List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_engine.domain.models import (
    AllocationWithCategory,
    BudgetPeriod,
    CategoryAverage,
    PeriodRef,
    PeriodTransaction,
    SaverMetadata,
)
from budget_engine.infrastructure.database.models import Base
from budget_engine.infrastructure.database.source import BudgetDataSource


class FakeBudgetSource:
    """In-memory stand-in for BudgetDataSource, keyed the same way the SQL source is"""

    def __init__(self):
        self.periods: Dict[uuid.UUID, BudgetPeriod] = {}
        self.allocations: Dict[uuid.UUID, List[AllocationWithCategory]] = {}
        self.income: Dict[uuid.UUID, int] = {}
        self.category_spend: Dict[uuid.UUID, Dict[str, int]] = {}
        self.saver_spend: Dict[uuid.UUID, Dict[str, int]] = {}
        self.transactions: Dict[uuid.UUID, List[PeriodTransaction]] = {}
        self.averages: List[CategoryAverage] = []
        self.savers: List[SaverMetadata] = []
        self.calls: List[str] = []

    def add_period(
        self,
        start_date: date,
        end_date: date,
        expected_income_cents: int = 600000,
        period_id: Optional[uuid.UUID] = None,
    ) -> BudgetPeriod:
        period = BudgetPeriod(
            id=period_id or uuid.uuid4(),
            start_date=start_date,
            end_date=end_date,
            expected_income_cents=expected_income_cents,
        )
        self.periods[period.id] = period
        return period

    def _period_for(self, start_date: date, end_date: date) -> Optional[BudgetPeriod]:
        for period in self.periods.values():
            if period.start_date == start_date and period.end_date == end_date:
                return period
        return None

    def get_period(self, period_id):
        self.calls.append("get_period")
        return self.periods.get(period_id)

    def get_allocations_with_categories(self, period_id):
        self.calls.append("get_allocations_with_categories")
        return list(self.allocations.get(period_id, []))

    def sum_income(self, start_date, end_date):
        self.calls.append("sum_income")
        period = self._period_for(start_date, end_date)
        return self.income.get(period.id, 0) if period else 0

    def sum_spend_by_category(self, start_date, end_date):
        self.calls.append("sum_spend_by_category")
        period = self._period_for(start_date, end_date)
        return dict(self.category_spend.get(period.id, {})) if period else {}

    def sum_spend_by_saver(self, start_date, end_date):
        self.calls.append("sum_spend_by_saver")
        period = self._period_for(start_date, end_date)
        return dict(self.saver_spend.get(period.id, {})) if period else {}

    def list_transactions(self, start_date, end_date):
        self.calls.append("list_transactions")
        period = self._period_for(start_date, end_date)
        return list(self.transactions.get(period.id, [])) if period else []

    def get_historical_averages(self, before, saver_key=None, category_key=None):
        self.calls.append("get_historical_averages")
        return list(self.averages)

    def list_recent_periods(self, limit):
        self.calls.append("list_recent_periods")
        newest_first = sorted(self.periods.values(), key=lambda p: p.start_date, reverse=True)
        return [PeriodRef(id=p.id, start_date=p.start_date, end_date=p.end_date) for p in newest_first[:limit]]

    def list_spending_savers(self):
        self.calls.append("list_spending_savers")
        return list(self.savers)


@pytest.fixture
def fake_source() -> FakeBudgetSource:
    """Empty in-memory data source"""
    return FakeBudgetSource()


@pytest.fixture
def engine(tmp_path):
    """SQLite test database, created fresh for each test"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def source(session_factory) -> BudgetDataSource:
    """Data source reading from the test database"""
    return BudgetDataSource(session_factory)


@pytest.fixture
def sample_allocations() -> list[AllocationWithCategory]:
    """Allocations deliberately out of sort order"""
    return [
        AllocationWithCategory("groceries", 100000, "Groceries", "#22c55e", "🛒", 2),
        AllocationWithCategory("bills-fixed", 200000, "Bills & Fixed", "#3b82f6", "🏠", 1),
        AllocationWithCategory("fun", 0, "Fun", "#f97316", "🎉", 3),
    ]
