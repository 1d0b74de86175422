"""SQLAlchemy ORM models for budget periods, categories, savers and transactions"""

import uuid
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class BudgetPeriodRecord(Base):
    """One pay cycle"""

    __tablename__ = "budget_periods"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    start_date = Column(Date, nullable=False, unique=True, index=True)
    end_date = Column(Date, nullable=False, index=True)
    expected_income_cents = Column(BigInteger, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    allocations = relationship("BudgetAllocationRecord", back_populates="period", cascade="all, delete-orphan")


class BudgetSaverRecord(Base):
    """Named bucket grouping categories (spending, savings goal or investment)"""

    __tablename__ = "budget_savers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    saver_key = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    emoji = Column(String(10), nullable=False)
    monthly_budget_cents = Column(BigInteger, nullable=False)
    saver_type = Column(Text, nullable=False, default="spending")
    sort_order = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    colour = Column(String(7), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    categories = relationship("BudgetCategoryRecord", back_populates="saver")


class BudgetCategoryRecord(Base):
    """Spend classification; id is a stable slug such as "groceries" """

    __tablename__ = "budget_categories"
    __table_args__ = (UniqueConstraint("saver_id", "category_key"),)

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=False)
    colour = Column(String(7), nullable=False)
    sort_order = Column(Integer, nullable=False)
    is_income = Column(Boolean, nullable=False, default=False)
    saver_id = Column(Uuid(as_uuid=True), ForeignKey("budget_savers.id", ondelete="CASCADE"), nullable=True)
    category_key = Column(String(50), nullable=True)
    monthly_budget_cents = Column(BigInteger, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    saver = relationship("BudgetSaverRecord", back_populates="categories")


class BudgetAllocationRecord(Base):
    """Planned spend ceiling for a category within a period"""

    __tablename__ = "budget_allocations"
    __table_args__ = (UniqueConstraint("budget_period_id", "category_id"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    budget_period_id = Column(
        Uuid(as_uuid=True), ForeignKey("budget_periods.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(String(255), ForeignKey("budget_categories.id"), nullable=False)
    allocated_cents = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    period = relationship("BudgetPeriodRecord", back_populates="allocations")
    category = relationship("BudgetCategoryRecord")


class BankTransactionRecord(Base):
    """Imported bank transaction; negative amounts are spend"""

    __tablename__ = "bank_transactions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    external_id = Column(String(255), nullable=False, unique=True)
    description = Column(String(512), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    category_id = Column(String(255), nullable=True, index=True)
    saver_key = Column(String(50), nullable=True, index=True)
    category_key = Column(String(50), nullable=True, index=True)
    transaction_date = Column(Date, nullable=False, index=True)
    is_transfer = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PaydayConfigRecord(Base):
    """Saved payday rule (single row)"""

    __tablename__ = "payday_config"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    payday_day = Column(Integer, nullable=False)
    adjust_for_weekends = Column(Boolean, nullable=False, default=True)
    income_source_pattern = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
