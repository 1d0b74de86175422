"""Budget templates - percentage and fixed splits of income across categories"""

from typing import Dict, List

from budget_engine.domain.exceptions import TemplateNotFoundError
from budget_engine.domain.models import (
    BudgetTemplate,
    FixedAllocation,
    PercentageAllocation,
    ResolvedAllocation,
)
from budget_engine.utils.date_utils import round_half_up

BAREFOOT_INVESTOR = BudgetTemplate(
    id="barefoot-investor",
    name="Barefoot Investor Buckets",
    description="Bucket system with $1,200 fixed groceries and percentage splits for everything else.",
    allocations=[
        FixedAllocation("groceries", 120000),
        PercentageAllocation("bills-fixed", 60),
        PercentageAllocation("transport", 10),
        PercentageAllocation("eating-out", 8),
        PercentageAllocation("fun", 7),
        PercentageAllocation("shopping", 5),
        PercentageAllocation("health", 10),
    ],
)

# The last 5% of the savings share is left unallocated
FIFTY_THIRTY_TWENTY = BudgetTemplate(
    id="50-30-20",
    name="50/30/20 Rule",
    description="Classic split: 50% needs, 30% wants, 20% savings.",
    allocations=[
        PercentageAllocation("bills-fixed", 35),
        PercentageAllocation("groceries", 15),
        PercentageAllocation("transport", 10),
        PercentageAllocation("eating-out", 10),
        PercentageAllocation("shopping", 10),
        PercentageAllocation("fun", 10),
        PercentageAllocation("health", 5),
    ],
)

FIXED_RENT = BudgetTemplate(
    id="fixed-rent",
    name="Fixed Rent & Groceries",
    description="Fixed rent ($2,129) and groceries ($1,200), with percentage splits for the rest.",
    allocations=[
        FixedAllocation("bills-fixed", 212900),
        FixedAllocation("groceries", 120000),
        PercentageAllocation("eating-out", 8),
        PercentageAllocation("transport", 6),
        PercentageAllocation("fun", 8),
        PercentageAllocation("shopping", 4),
        PercentageAllocation("health", 8),
    ],
)

BUDGET_TEMPLATES: List[BudgetTemplate] = [BAREFOOT_INVESTOR, FIFTY_THIRTY_TWENTY, FIXED_RENT]

_TEMPLATES_BY_ID: Dict[str, BudgetTemplate] = {t.id: t for t in BUDGET_TEMPLATES}


def get_template(template_id: str) -> BudgetTemplate:
    try:
        return _TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(f"Unknown budget template: {template_id}") from None


def apply_template(template: BudgetTemplate, income_cents: int) -> List[ResolvedAllocation]:
    """
    Resolve a template into concrete cent allocations for an income.

    Fixed amounts come off the top; each percentage entry takes its share of
    what is left (floored at 0). Rounding is per entry, so the total may
    differ from income by a few cents. Output order matches the template.

    Example:
        [Fixed(rent, 212900), Percentage(food, 50)] with income 500000
        → rent 212900, food round(287100 * 0.5) = 143550
    """
    total_fixed = sum(a.fixed_cents for a in template.allocations if isinstance(a, FixedAllocation))
    remaining_cents = max(0, income_cents - total_fixed)

    resolved = []
    for allocation in template.allocations:
        if isinstance(allocation, FixedAllocation):
            cents = allocation.fixed_cents
        else:
            cents = int(round_half_up(remaining_cents * allocation.percentage / 100))
        resolved.append(ResolvedAllocation(category_id=allocation.category_id, allocated_cents=cents))

    return resolved
