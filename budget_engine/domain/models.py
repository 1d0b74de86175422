"""Domain models - pure Python dataclasses representing budget entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from budget_engine.domain.exceptions import InvalidConfigurationError, InvalidTemplateError

MIN_PAYDAY_DAY = 1
MAX_PAYDAY_DAY = 28


@dataclass(frozen=True)
class PaydaySettings:
    """Monthly payday rule"""

    payday_day: int = 15
    adjust_for_weekends: bool = True

    def __post_init__(self):
        # bool is an int subclass, reject it explicitly
        if isinstance(self.payday_day, bool) or not isinstance(self.payday_day, int):
            raise InvalidConfigurationError(f"payday_day must be an integer, got {self.payday_day!r}")
        if not MIN_PAYDAY_DAY <= self.payday_day <= MAX_PAYDAY_DAY:
            raise InvalidConfigurationError(
                f"payday_day must be between {MIN_PAYDAY_DAY} and {MAX_PAYDAY_DAY}, got {self.payday_day}"
            )

    @classmethod
    def default(cls) -> "PaydaySettings":
        """System default used when no payday config has been saved"""
        return cls(payday_day=15, adjust_for_weekends=True)


@dataclass(frozen=True)
class PayPeriod:
    """Pay cycle computed from payday settings"""

    start_date: date
    end_date: date
    days_in_period: int


@dataclass
class BudgetPeriod:
    """Persisted pay cycle with its expected income"""

    id: uuid.UUID
    start_date: date
    end_date: date
    expected_income_cents: int


@dataclass
class AllocationWithCategory:
    """Budget allocation joined with its category's display fields"""

    category_id: str
    allocated_cents: int
    category_name: str
    colour: str
    icon: str
    sort_order: int


@dataclass
class PeriodTransaction:
    """Transaction as seen by the engine (transfers and deleted rows already removed)"""

    id: str
    description: str
    amount_cents: int  # negative = spend
    transaction_date: date
    saver_key: Optional[str]
    category_key: Optional[str]


@dataclass
class CategoryAverage:
    """Historical spend statistics for one saver/category pair"""

    saver_key: Optional[str]
    category_key: Optional[str]
    avg_transaction_cents: int
    avg_period_total_cents: int
    budget_cents: int


@dataclass
class PeriodContext:
    """How far through its period the anomaly check is running"""

    progress_percent: int
    days_remaining: int
    total_days: int


@dataclass
class PeriodProgress:
    total_days: int
    days_elapsed: int
    days_remaining: int
    progress_percent: int

    def to_context(self) -> PeriodContext:
        return PeriodContext(
            progress_percent=self.progress_percent,
            days_remaining=self.days_remaining,
            total_days=self.total_days,
        )


@dataclass
class CategoryBreakdown:
    """Spend against allocation for one category"""

    category_id: str
    category_name: str
    colour: str
    icon: str
    budgeted_cents: int
    spent_cents: int
    remaining_cents: int
    percent_used: float
    status: str  # "under" | "warning" | "over"


@dataclass
class IncomeSummary:
    expected_cents: int
    actual_cents: int


@dataclass
class BudgetTotals:
    budgeted_cents: int
    spent_cents: int
    unallocated_cents: int
    savings_cents: int
    savings_rate: float


@dataclass
class BudgetSummary:
    """Whole-period budget breakdown"""

    period_id: uuid.UUID
    start_date: date
    end_date: date
    income: IncomeSummary
    categories: List[CategoryBreakdown]
    totals: BudgetTotals
    days_elapsed: int
    days_remaining: int
    total_days: int


@dataclass
class Anomaly:
    """Rule-flagged irregular spending, never persisted"""

    id: str
    type: str  # "large_transaction" | "category_overspend" | "duplicate_merchant"
    severity: str  # "warning" | "alert"
    saver_key: Optional[str]
    category_key: Optional[str]
    description: str
    amount_cents: int
    comparison_cents: int


@dataclass(frozen=True)
class FixedAllocation:
    """Template entry with an absolute amount"""

    category_id: str
    fixed_cents: int

    def __post_init__(self):
        if self.fixed_cents < 0:
            raise InvalidTemplateError(f"fixed_cents for {self.category_id} must not be negative")


@dataclass(frozen=True)
class PercentageAllocation:
    """Template entry taking a share of income left after fixed entries"""

    category_id: str
    percentage: float

    def __post_init__(self):
        if not 0 <= self.percentage <= 100:
            raise InvalidTemplateError(
                f"percentage for {self.category_id} must be between 0 and 100, got {self.percentage}"
            )


TemplateAllocation = Union[FixedAllocation, PercentageAllocation]


@dataclass(frozen=True)
class BudgetTemplate:
    id: str
    name: str
    description: str
    allocations: List[TemplateAllocation] = field(default_factory=list)


@dataclass
class ResolvedAllocation:
    category_id: str
    allocated_cents: int


@dataclass
class PeriodRef:
    id: uuid.UUID
    start_date: date
    end_date: date


@dataclass
class SaverMetadata:
    """Display fields and budget for a spending saver"""

    saver_key: str
    display_name: str
    emoji: str
    colour: str
    budget_cents: int


@dataclass
class TrendCategory:
    category_id: str
    name: str
    colour: str
    spent_cents: int


@dataclass
class TrendSaver:
    saver_key: str
    display_name: str
    emoji: str
    colour: str
    budget_cents: int
    spent_cents: int


@dataclass
class PeriodTrendRow:
    """One period in a spending trend series"""

    period_id: uuid.UUID
    start_date: date
    end_date: date
    total_spent_cents: int
    total_income_cents: int
    savings_rate: float
    is_projected: bool
    categories: List[TrendCategory]
    savers: List[TrendSaver]


@dataclass
class CategorySpendRow:
    """Spend total and transaction count for one saver/category in one period"""

    saver_key: Optional[str]
    category_key: Optional[str]
    total_cents: int
    tx_count: int
