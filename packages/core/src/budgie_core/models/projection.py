"""Models for the display-only budget projections."""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from budgie_core.models.category import Category


class PerfectBudget(BaseModel):
    """An idealized 50/30/20 split of income left after debt payments."""
    monthly_income: Decimal
    debt_reserved: Decimal
    needs_pool: Decimal
    wants_pool: Decimal
    allocations: dict[UUID, Decimal] = Field(default_factory=dict)

    # Category-level ids only, so subcategory entries are not double counted
    category_ids: list[UUID] = Field(default_factory=list)

    @property
    def total_allocated(self) -> Decimal:
        return sum(
            (self.allocations.get(item_id, Decimal("0")) for item_id in self.category_ids),
            Decimal("0"),
        )


class RecommendationType(str, Enum):
    """What the advisor suggests doing with a category."""
    ADD = "add"
    ADJUST = "adjust"
    REDUCE = "reduce"


class CategoryRecommendation(BaseModel):
    """A suggested change to the budget for one category."""
    category: Category
    recommendation_type: RecommendationType
    current_amount: Optional[Decimal] = None
    recommended_amount: Decimal
    reason: str
    priority: int = Field(ge=1, le=5)


class BudgetImpact(BaseModel):
    """Effect of adding a category at its recommended amount."""
    change: str  # "decrease" or "unchanged"
    amount: Decimal
    new_surplus_or_deficit: Decimal
