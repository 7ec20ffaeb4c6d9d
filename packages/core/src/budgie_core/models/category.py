"""Category catalog data models.

A budget is a set of categories of four types (debt, need, want, saving).
Expense categories (needs and wants) may own subcategories; when they do,
the category's total is always the sum of its active subcategories rather
than its own requested amount. That choice is made once per category by
``resolve_total`` instead of being re-derived in every allocation stage.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMERATIONS
# =============================================================================

class CategoryType(str, Enum):
    """Kind of financial obligation a category represents."""
    DEBT = "debt"
    NEED = "need"
    WANT = "want"
    SAVING = "saving"

    @property
    def is_expense(self) -> bool:
        return self in (CategoryType.NEED, CategoryType.WANT)


# =============================================================================
# POLICY RANGE
# =============================================================================

class PolicyRange(BaseModel):
    """Allowed allocation range as a fraction of monthly income."""
    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(ge=0, le=1)
    max: Decimal = Field(ge=0, le=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "PolicyRange":
        if self.min > self.max:
            raise ValueError(f"Policy minimum {self.min} exceeds maximum {self.max}")
        return self


# =============================================================================
# CATEGORY MODELS
# =============================================================================

class Subcategory(BaseModel):
    """A line item owned by exactly one category."""
    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    description: str = ""
    is_active: bool = False
    requested_amount: Optional[Decimal] = Field(default=None, ge=0)
    priority: int = Field(default=3, ge=1, le=5)


class Category(BaseModel):
    """A named financial obligation in the user's budget.

    Attributes:
        type: Fixed for the lifetime of the category in a session
        priority: 1 (essential) through 5 (optional)
        policy_range: Explicit override of the policy table range
        requested_amount: User-entered amount. For debts this is the
            outstanding balance to be repaid by ``due_date``; for other
            categories it is a monthly amount.
        due_date: Debts only; a debt without one is never funded
    """
    model_config = ConfigDict(
        validate_assignment=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Credit Card Debt",
                    "emoji": "💳",
                    "type": "debt",
                    "priority": 1,
                    "requested_amount": "2400",
                    "due_date": "2027-01-15",
                    "is_active": True,
                }
            ]
        },
    )

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)
    emoji: str = ""
    description: str = ""
    type: CategoryType = Field(frozen=True)
    priority: int = Field(default=3, ge=1, le=5)
    policy_range: Optional[PolicyRange] = None
    requested_amount: Optional[Decimal] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    is_active: bool = False
    subcategories: list[Subcategory] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_due_date_only_on_debts(self) -> "Category":
        if self.due_date is not None and self.type != CategoryType.DEBT:
            raise ValueError(f"Only debt categories carry a due date, not {self.type.value}")
        return self

    @property
    def has_subcategories(self) -> bool:
        return len(self.subcategories) > 0

    @property
    def active_subcategories(self) -> list[Subcategory]:
        """Subcategories that take part in computation."""
        return [sub for sub in self.subcategories if sub.is_active]

    def find_subcategory(self, subcategory_id: UUID) -> Optional[Subcategory]:
        return next((s for s in self.subcategories if s.id == subcategory_id), None)


# =============================================================================
# CATEGORY TOTAL VARIANT
# =============================================================================

@dataclass(frozen=True)
class FlatTotal:
    """The category is funded as a single amount."""
    requested_amount: Optional[Decimal]


@dataclass(frozen=True)
class AggregatedTotal:
    """The category total is the sum of these active subcategories."""
    subcategory_ids: tuple[UUID, ...]


CategoryTotal = Union[FlatTotal, AggregatedTotal]


def resolve_total(category: Category) -> CategoryTotal:
    """Decide how an expense category's total is derived.

    A category that owns subcategories is aggregated over the active ones,
    even when none are active (its total is then zero).
    """
    if category.type.is_expense and category.has_subcategories:
        return AggregatedTotal(tuple(sub.id for sub in category.active_subcategories))
    return FlatTotal(category.requested_amount)
