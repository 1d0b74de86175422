"""Database session management with connection pooling"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from budget_engine.config import settings
from budget_engine.infrastructure.database.source import BudgetDataSource

# Connection pool: trends fan out one read per period, so allow bursts above the base size
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=10,
    max_overflow=20,
    pool_recycle=3600,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_data_source() -> BudgetDataSource:
    """Read-only data source bound to the application session factory"""
    return BudgetDataSource(SessionLocal)
