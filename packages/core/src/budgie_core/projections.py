"""Display-only budget projections.

These computations reuse the cadence converter and the policy tables but
never feed back into the allocation waterfall:

- Recommended per-paycheck allocations from the policy maximums
- A "perfect" 50/30/20 budget of the income left after debt payments
- Enhancement advice: missing essential savings goals, categories far from
  their recommended share, non-essential wants to trim, the impact of
  adding a category, and which categories to look at first
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

import structlog

from .cadence import Amount, PaymentCadence, as_decimal, to_monthly, to_periodic
from .catalog import CategoryStore
from .models import (
    AggregatedTotal,
    AllocationResult,
    BudgetImpact,
    Category,
    CategoryRecommendation,
    CategoryType,
    PerfectBudget,
    RecommendationType,
    resolve_total,
)
from .policy import (
    range_for,
    recommended_percentage,
    recommended_savings_percentage,
    subcategory_share,
)
from .waterfall import months_until_due

logger = structlog.get_logger()

ZERO = Decimal("0")

# 50/30/20: needs and wants split what is left after debts, savings follow
# their own per-goal percentages of income
PERFECT_NEEDS_SHARE = Decimal("0.50")
PERFECT_WANTS_SHARE = Decimal("0.30")

# Allocations further than this from the recommended amount are flagged
ADJUSTMENT_THRESHOLD = Decimal("0.2")

# Wants above this priority number are suggested for reduction
REDUCTION_PRIORITY = 3
REDUCTION_TARGET = Decimal("0.7")


@dataclass(frozen=True)
class EssentialSaving:
    name: str
    emoji: str
    priority: int
    percentage: Decimal
    reason: str


ESSENTIAL_SAVINGS = (
    EssentialSaving(
        name="Emergency Fund",
        emoji="🏦",
        priority=1,
        percentage=Decimal("0.10"),
        reason=(
            "Having 3-6 months of expenses saved is crucial for financial "
            "security. This fund helps protect you from unexpected costs and "
            "provides peace of mind."
        ),
    ),
    EssentialSaving(
        name="Retirement",
        emoji="🏖️",
        priority=1,
        percentage=Decimal("0.15"),
        reason=(
            "Starting retirement savings early is key to long-term financial "
            "success. Experts recommend saving 15% of your income for retirement."
        ),
    ),
    EssentialSaving(
        name="House Down Payment",
        emoji="🏠",
        priority=2,
        percentage=Decimal("0.10"),
        reason=(
            "Saving for a home down payment can help you build equity and "
            "reduce monthly payments. Aim for 20% of your target home price."
        ),
    ),
    EssentialSaving(
        name="Investment",
        emoji="📈",
        priority=2,
        percentage=Decimal("0.08"),
        reason=(
            "Building an investment portfolio helps grow your wealth over time "
            "through compound interest and market returns."
        ),
    ),
)

INCREASE_REASON = "Consider increasing this category"
OVER_ALLOCATED_REASON = "This category might be over-allocated"
REDUCTION_REASON = "Non-essential expense that could be reduced"


def _active(categories: Iterable[Category]) -> list[Category]:
    return [c for c in categories if c.is_active]


# =============================================================================
# RECOMMENDED ALLOCATIONS
# =============================================================================

def recommended_allocations(
    categories: Iterable[Category],
    paycheck_amount: Amount,
    cadence: PaymentCadence,
) -> dict[UUID, Decimal]:
    """
    Per-paycheck amounts if every category were funded at its policy max.

    Args:
        categories: Categories in the budget; inactive ones are ignored
        paycheck_amount: Income per paycheck
        cadence: Pay frequency

    Returns:
        Map of category and subcategory ids to per-paycheck amounts. Debts
        are left out since their payment depends on balance and due date.
    """
    monthly = to_monthly(paycheck_amount, cadence)
    recommended: dict[UUID, Decimal] = {}

    for category in _active(categories):
        if category.type == CategoryType.DEBT:
            continue

        if category.type == CategoryType.SAVING:
            monthly_amount = monthly * recommended_savings_percentage(category.name)
            recommended[category.id] = to_periodic(monthly_amount, cadence)
            continue

        ceiling = monthly * range_for(category).max
        if isinstance(resolve_total(category), AggregatedTotal):
            active_subs = category.active_subcategories
            total = ZERO
            for sub in active_subs:
                share = subcategory_share(category.name, sub.name, len(active_subs))
                amount = to_periodic(ceiling * share, cadence)
                recommended[sub.id] = amount
                total += amount
            recommended[category.id] = total
        else:
            recommended[category.id] = to_periodic(ceiling, cadence)

    logger.debug(
        "recommended_allocations_computed",
        monthly_income=str(monthly),
        cadence=cadence.value,
        entries=len(recommended),
    )
    return recommended


# =============================================================================
# PERFECT BUDGET
# =============================================================================

def perfect_budget(
    categories: Iterable[Category],
    monthly_income: Amount,
    as_of: Optional[date] = None,
) -> PerfectBudget:
    """Idealized split of income for the active categories.

    Debts keep their required monthly payment. Half of what is left is
    split evenly across needs and 30% evenly across wants, each share then
    split evenly across the category's active subcategories. Savings goals
    get their recommended percentage of income.
    """
    income = as_decimal(monthly_income)
    as_of = as_of or date.today()
    active = _active(categories)
    allocations: dict[UUID, Decimal] = {}

    debt_reserved = ZERO
    for debt in (c for c in active if c.type == CategoryType.DEBT):
        payment = ZERO
        if debt.requested_amount is not None and debt.due_date is not None:
            payment = debt.requested_amount / months_until_due(debt.due_date, as_of)
        allocations[debt.id] = payment
        debt_reserved += payment

    remaining = max(income - debt_reserved, ZERO)
    needs_pool = remaining * PERFECT_NEEDS_SHARE
    wants_pool = remaining * PERFECT_WANTS_SHARE

    for category_type, pool in ((CategoryType.NEED, needs_pool), (CategoryType.WANT, wants_pool)):
        group = [c for c in active if c.type == category_type]
        if not group:
            continue
        per_category = pool / len(group)
        for category in group:
            allocations[category.id] = per_category
            subs = category.active_subcategories
            for sub in subs:
                allocations[sub.id] = per_category / len(subs)

    for goal in (c for c in active if c.type == CategoryType.SAVING):
        allocations[goal.id] = income * recommended_savings_percentage(goal.name)

    return PerfectBudget(
        monthly_income=income,
        debt_reserved=debt_reserved,
        needs_pool=needs_pool,
        wants_pool=wants_pool,
        allocations=allocations,
        category_ids=[c.id for c in active],
    )


# =============================================================================
# ENHANCEMENT ADVICE
# =============================================================================

def missing_essential_savings(
    categories: Iterable[Category],
    income: Amount,
) -> list[CategoryRecommendation]:
    """Essential savings goals the budget does not include yet."""
    income = as_decimal(income)
    present = {c.name for c in _active(categories)}
    recommendations = []

    for essential in ESSENTIAL_SAVINGS:
        if essential.name in present:
            continue
        category = Category(
            name=essential.name,
            emoji=essential.emoji,
            type=CategoryType.SAVING,
            priority=essential.priority,
            description=essential.reason,
        )
        recommendations.append(CategoryRecommendation(
            category=category,
            recommendation_type=RecommendationType.ADD,
            recommended_amount=income * essential.percentage,
            reason=essential.reason,
            priority=essential.priority,
        ))
    return recommendations


def category_adjustments(
    categories: Iterable[Category],
    result: AllocationResult,
) -> list[CategoryRecommendation]:
    """Categories whose allocation is more than 20% off the recommended share.

    Debts are left out: their payment follows from balance and due date.
    """
    adjustments = []
    for category in _active(categories):
        if category.type == CategoryType.DEBT:
            continue
        recommended = result.monthly_income * recommended_percentage(category.name)
        if recommended <= 0:
            continue

        current = result.allocation_for(category.id)
        difference = abs(current - recommended) / recommended
        if difference <= ADJUSTMENT_THRESHOLD:
            continue

        adjustments.append(CategoryRecommendation(
            category=category,
            recommendation_type=RecommendationType.ADJUST,
            current_amount=current,
            recommended_amount=recommended,
            reason=INCREASE_REASON if current < recommended else OVER_ALLOCATED_REASON,
            priority=category.priority,
        ))
    return adjustments


def reduction_suggestions(
    categories: Iterable[Category],
    result: AllocationResult,
) -> list[CategoryRecommendation]:
    """Low-priority wants, with a target 30% below their recommended share."""
    suggestions = []
    for category in _active(categories):
        if category.type != CategoryType.WANT or category.priority <= REDUCTION_PRIORITY:
            continue
        recommended = result.monthly_income * recommended_percentage(category.name)
        suggestions.append(CategoryRecommendation(
            category=category,
            recommendation_type=RecommendationType.REDUCE,
            current_amount=result.allocation_for(category.id),
            recommended_amount=recommended * REDUCTION_TARGET,
            reason=REDUCTION_REASON,
            priority=category.priority,
        ))
    return suggestions


def budget_impact(category: Category, result: AllocationResult) -> BudgetImpact:
    """What adding ``category`` at its recommended amount does to the budget."""
    amount = result.monthly_income * recommended_percentage(category.name)
    new_total = result.monthly_income - (result.summary.total_allocated + amount)
    return BudgetImpact(
        change="decrease" if amount > 0 else "unchanged",
        amount=amount,
        new_surplus_or_deficit=new_total,
    )


def prioritize_categories(
    store: CategoryStore,
    result: AllocationResult,
    as_of: Optional[date] = None,
) -> list[Category]:
    """Categories to look at next.

    With a surplus, these are the catalog entries not yet in the budget.
    With a deficit, the active categories ordered by priority, and within a
    priority by how fully funded they are relative to their monthly request
    (best funded first). A dated debt's monthly request is its balance
    spread over the months until it is due.
    """
    if not result.summary.is_deficit:
        return store.inactive_categories()
    as_of = as_of or date.today()

    def funded_ratio(category: Category) -> Decimal:
        requested = category.requested_amount
        if category.type == CategoryType.DEBT and requested and category.due_date is not None:
            requested = requested / months_until_due(category.due_date, as_of)
        requested = requested or Decimal("1")
        return result.allocation_for(category.id) / requested

    return sorted(
        store.active_categories(),
        key=lambda c: (c.priority, -funded_ratio(c)),
    )


__all__ = [
    "ESSENTIAL_SAVINGS",
    "EssentialSaving",
    "recommended_allocations",
    "perfect_budget",
    "missing_essential_savings",
    "category_adjustments",
    "reduction_suggestions",
    "budget_impact",
    "prioritize_categories",
]
