"""Database fixtures for the integration tests"""

import pytest
from dataclasses import dataclass
from datetime import date, datetime, timezone
from sqlalchemy.orm import Session
from budget_engine.infrastructure.database.models import (
    BankTransactionRecord,
    BudgetAllocationRecord,
    BudgetCategoryRecord,
    BudgetPeriodRecord,
    BudgetSaverRecord,
)

FEB_START, FEB_END = date(2026, 2, 13), date(2026, 3, 12)
MAR_START, MAR_END = date(2026, 3, 13), date(2026, 4, 14)


@dataclass
class SeededBudget:
    february: BudgetPeriodRecord
    march: BudgetPeriodRecord
    costco: BankTransactionRecord


def _tx(external_id, description, amount_cents, day, category_id=None, saver_key=None, category_key=None, **kwargs):
    return BankTransactionRecord(
        external_id=external_id,
        description=description,
        amount_cents=amount_cents,
        transaction_date=day,
        category_id=category_id,
        saver_key=saver_key,
        category_key=category_key,
        **kwargs,
    )


def seed_budget(db: Session) -> SeededBudget:
    """
    Two pay periods (Feb and Mar 2026) with savers, categories and transactions.

    March holds $5,000 salary, $640 groceries, $2,000 rent plus a transfer,
    a soft-deleted row and a row dated after the period, none of which count.
    """
    spending = BudgetSaverRecord(
        saver_key="spending", display_name="Spending", emoji="💳",
        monthly_budget_cents=150000, saver_type="spending", sort_order=1, colour="#f97316",
    )
    bills = BudgetSaverRecord(
        saver_key="bills", display_name="Bills", emoji="🏠",
        monthly_budget_cents=250000, saver_type="spending", sort_order=2, colour="#3b82f6",
    )
    holiday = BudgetSaverRecord(
        saver_key="holiday", display_name="Holiday", emoji="🏖️",
        monthly_budget_cents=50000, saver_type="savings_goal", sort_order=3, colour="#14b8a6",
    )
    retired = BudgetSaverRecord(
        saver_key="retired", display_name="Old Bucket", emoji="📦",
        monthly_budget_cents=1000, saver_type="spending", sort_order=4, colour="#64748b", is_active=False,
    )
    db.add_all([spending, bills, holiday, retired])
    db.flush()

    db.add_all(
        [
            BudgetCategoryRecord(
                id="groceries", name="Groceries", icon="🛒", colour="#22c55e", sort_order=2,
                saver_id=spending.id, category_key="groceries", monthly_budget_cents=20000,
            ),
            BudgetCategoryRecord(
                id="bills-fixed", name="Bills & Fixed", icon="🏠", colour="#3b82f6", sort_order=1,
                saver_id=bills.id, category_key="rent", monthly_budget_cents=200000,
            ),
            BudgetCategoryRecord(
                id="income", name="Income", icon="💰", colour="#10b981", sort_order=0, is_income=True,
            ),
        ]
    )

    february = BudgetPeriodRecord(start_date=FEB_START, end_date=FEB_END, expected_income_cents=600000)
    march = BudgetPeriodRecord(start_date=MAR_START, end_date=MAR_END, expected_income_cents=600000)
    db.add_all([february, march])
    db.flush()

    db.add_all(
        [
            BudgetAllocationRecord(budget_period_id=march.id, category_id="groceries", allocated_cents=100000),
            BudgetAllocationRecord(budget_period_id=march.id, category_id="bills-fixed", allocated_cents=200000),
        ]
    )

    grocery = {"category_id": "groceries", "saver_key": "spending", "category_key": "groceries"}
    rent = {"category_id": "bills-fixed", "saver_key": "bills", "category_key": "rent"}
    costco = _tx("mar-costco", "COSTCO", -60000, date(2026, 3, 15), **grocery)
    db.add_all(
        [
            # February history: two $100 grocery shops and rent
            _tx("feb-iga", "IGA", -10000, date(2026, 2, 20), **grocery),
            _tx("feb-aldi", "ALDI", -10000, date(2026, 2, 21), **grocery),
            _tx("feb-rent", "RENT", -200000, date(2026, 2, 16), **rent),
            # March
            _tx("mar-salary", "SALARY", 500000, MAR_START, category_id="income"),
            _tx("mar-woolies", "WOOLWORTHS", -4000, date(2026, 3, 14), **grocery),
            costco,
            _tx("mar-rent", "RENT", -200000, date(2026, 3, 16), **rent),
            _tx("mar-transfer", "TRANSFER TO SAVINGS", -100000, date(2026, 3, 17), is_transfer=True, **grocery),
            _tx(
                "mar-deleted", "DUPLICATE IMPORT", -50000, date(2026, 3, 17),
                deleted_at=datetime(2026, 3, 18, tzinfo=timezone.utc), **grocery,
            ),
            _tx("apr-next", "WOOLWORTHS", -9999, date(2026, 4, 15), **grocery),
        ]
    )
    db.commit()
    return SeededBudget(february=february, march=march, costco=costco)


@pytest.fixture
def seeded(db) -> SeededBudget:
    """Committed two-period budget visible to every session"""
    return seed_budget(db)
