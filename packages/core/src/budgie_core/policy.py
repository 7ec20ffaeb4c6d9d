"""Budget policy tables for the allocation waterfall.

This module contains the static, read-only rules the waterfall applies:

- Type-level limits (debt-to-income ceiling, savings and discretionary
  ranges)
- Per-category allocation ranges as a fraction of monthly income
- Intra-category subcategory shares (fraction of the parent's amount)
- Priority weights used for proportional distribution
- Recommended percentages used by the display projections

Unknown names never raise; every lookup falls back to a documented default.
"""

from decimal import Decimal
from typing import Optional

from .models import Category, PolicyRange


# =============================================================================
# VERSION TRACKING
# =============================================================================

POLICY_TABLE_VERSION = "2024-07"


def get_policy_table_version() -> str:
    """Return current policy table version."""
    return POLICY_TABLE_VERSION


# =============================================================================
# TYPE-LEVEL LIMITS
# =============================================================================
# Fractions of monthly income (debt) or of the income left over after the
# preceding waterfall stage (savings, discretionary).

DEBT_RANGE = PolicyRange(min=Decimal("0"), max=Decimal("0.36"))
SAVINGS_RANGE = PolicyRange(min=Decimal("0.10"), max=Decimal("0.30"))
DISCRETIONARY_RANGE = PolicyRange(min=Decimal("0"), max=Decimal("0.30"))

MAX_DEBT_TO_INCOME = DEBT_RANGE.max

# Emergency fund falls back to this share of income when no amount is requested
EMERGENCY_FUND_DEFAULT_SHARE = Decimal("0.10")

# A want without a requested amount gets this share of what is left
WANT_DEFAULT_SHARE = Decimal("0.05")

# Savings goals may exceed their weighted share by up to 20% when requested
SAVINGS_REQUEST_HEADROOM = Decimal("1.2")

EMERGENCY_FUND_NAME = "Emergency Fund"
HOUSING_NAME = "Housing"


# =============================================================================
# CATEGORY RANGES
# =============================================================================

CATEGORY_RANGES: dict[str, PolicyRange] = {
    "Housing": PolicyRange(min=Decimal("0.25"), max=Decimal("0.28")),
    "Transportation": PolicyRange(min=Decimal("0.10"), max=Decimal("0.12")),
    "Food": PolicyRange(min=Decimal("0.10"), max=Decimal("0.12")),
    "Utilities": PolicyRange(min=Decimal("0.05"), max=Decimal("0.08")),
    "Healthcare": PolicyRange(min=Decimal("0.05"), max=Decimal("0.08")),
    "Personal Care": PolicyRange(min=Decimal("0.02"), max=Decimal("0.03")),
    "Education": PolicyRange(min=Decimal("0.05"), max=Decimal("0.10")),
    "Pets": PolicyRange(min=Decimal("0.01"), max=Decimal("0.03")),
    "Entertainment": PolicyRange(min=Decimal("0.02"), max=Decimal("0.05")),
    "Subscriptions": PolicyRange(min=Decimal("0.01"), max=Decimal("0.02")),
}

DEFAULT_RANGE = PolicyRange(min=Decimal("0.02"), max=Decimal("0.05"))


def limits_for(category_name: str) -> PolicyRange:
    """Get the allocation range for a category.

    Args:
        category_name: Catalog name of the category

    Returns:
        Range as a fraction of monthly income, (0.02, 0.05) if unlisted
    """
    return CATEGORY_RANGES.get(category_name, DEFAULT_RANGE)


def range_for(category: Category) -> PolicyRange:
    """Get the effective range, honouring a per-category override."""
    if category.policy_range is not None:
        return category.policy_range
    return limits_for(category.name)


# =============================================================================
# SUBCATEGORY SHARES
# =============================================================================
# Fraction of the parent category's amount assigned to each subcategory.

SUBCATEGORY_SHARES: dict[str, dict[str, Decimal]] = {
    "Housing": {
        "Mortgage": Decimal("0.70"),
        "Rent": Decimal("0.70"),
        "Utilities": Decimal("0.15"),
        "Home Maintenance": Decimal("0.10"),
        "Property Tax": Decimal("0.03"),
        "Home Insurance": Decimal("0.02"),
    },
    "Transportation": {
        "Car Payment": Decimal("0.50"),
        "Public Transportation": Decimal("0.10"),
        "Ride Share": Decimal("0.05"),
        "Tolls": Decimal("0.05"),
        "Maintenance": Decimal("0.15"),
        "Fuel": Decimal("0.10"),
        "Car Insurance": Decimal("0.05"),
    },
    "Food": {
        "Groceries": Decimal("0.70"),
        "Dining Out": Decimal("0.15"),
        "Snacks": Decimal("0.05"),
        "Meal Delivery": Decimal("0.10"),
    },
    "Healthcare": {
        "Insurance Premiums": Decimal("0.50"),
        "Doctor Visits": Decimal("0.20"),
        "Medications": Decimal("0.15"),
        "Dental Care": Decimal("0.10"),
        "Vision Care": Decimal("0.05"),
    },
    "Utilities": {
        "Electricity": Decimal("0.35"),
        "Water": Decimal("0.15"),
        "Gas": Decimal("0.15"),
        "Internet": Decimal("0.20"),
        "Cable": Decimal("0.10"),
        "Trash": Decimal("0.05"),
    },
    "Pets": {
        "Food": Decimal("0.40"),
        "Vet Visits": Decimal("0.30"),
        "Medications": Decimal("0.15"),
        "Grooming": Decimal("0.05"),
        "Toys": Decimal("0.05"),
        "Pet Insurance": Decimal("0.05"),
    },
    "Subscriptions": {
        "Streaming": Decimal("0.40"),
        "Music": Decimal("0.20"),
        "Magazines": Decimal("0.10"),
        "Apps": Decimal("0.15"),
        "News": Decimal("0.15"),
    },
    "Entertainment": {
        "Movies": Decimal("0.20"),
        "Games": Decimal("0.20"),
        "Concerts": Decimal("0.25"),
        "Sports Events": Decimal("0.20"),
        "Hobbies": Decimal("0.15"),
    },
    "Personal Care": {
        "Haircuts": Decimal("0.30"),
        "Skincare": Decimal("0.20"),
        "Cosmetics": Decimal("0.20"),
        "Spa": Decimal("0.15"),
        "Gym": Decimal("0.15"),
    },
    "Education": {
        "Tuition": Decimal("0.70"),
        "Books & Supplies": Decimal("0.15"),
        "Online Courses": Decimal("0.10"),
        "School Fees": Decimal("0.05"),
    },
}

UNKNOWN_PARENT_SHARE = Decimal("1") / Decimal("3")


def subcategory_share(
    parent_name: str,
    subcategory_name: str,
    sibling_count: Optional[int] = None,
) -> Decimal:
    """Get the fraction of a parent category's amount for a subcategory.

    Args:
        parent_name: Name of the owning category
        subcategory_name: Name of the subcategory
        sibling_count: Number of active subcategories under the parent,
            including this one

    Returns:
        Share of the parent's amount. Unlisted subcategories of a known
        parent split evenly across the active siblings; subcategories of an
        unknown parent get 1/3.
    """
    shares = SUBCATEGORY_SHARES.get(parent_name)
    if shares is None:
        return UNKNOWN_PARENT_SHARE

    share = shares.get(subcategory_name)
    if share is not None:
        return share

    if not sibling_count or sibling_count <= 0:
        return UNKNOWN_PARENT_SHARE
    return Decimal("1") / Decimal(sibling_count)


# =============================================================================
# PRIORITY WEIGHTS
# =============================================================================

PRIORITY_WEIGHTS: dict[int, Decimal] = {
    1: Decimal("1.0"),  # Essential, must fund
    2: Decimal("0.8"),  # High priority
    3: Decimal("0.6"),  # Medium priority
    4: Decimal("0.4"),  # Low priority
    5: Decimal("0.2"),  # Optional
}

DEFAULT_PRIORITY_WEIGHT = Decimal("0.2")


def weight_for(priority: int) -> Decimal:
    """Get the distribution weight for a priority rank."""
    return PRIORITY_WEIGHTS.get(priority, DEFAULT_PRIORITY_WEIGHT)


# =============================================================================
# RECOMMENDED PERCENTAGES (projections only)
# =============================================================================

RECOMMENDED_CATEGORY_PERCENTAGES: dict[str, Decimal] = {
    "Housing": Decimal("0.30"),
    "Transportation": Decimal("0.15"),
    "Food": Decimal("0.12"),
    "Healthcare": Decimal("0.10"),
    "Utilities": Decimal("0.08"),
    "Personal Care": Decimal("0.05"),
    "Entertainment": Decimal("0.05"),
    "Subscriptions": Decimal("0.03"),
    "Education": Decimal("0.05"),
    "Pets": Decimal("0.03"),
    "Emergency Fund": Decimal("0.10"),
    "Retirement": Decimal("0.15"),
}

RECOMMENDED_SAVINGS_PERCENTAGES: dict[str, Decimal] = {
    "Emergency Fund": Decimal("0.10"),
    "Vacation": Decimal("0.05"),
    "New Car": Decimal("0.05"),
    "Home Renovation": Decimal("0.07"),
    "Investment": Decimal("0.10"),
    "Wedding": Decimal("0.05"),
    "Education Fund": Decimal("0.05"),
    "Retirement": Decimal("0.15"),
    "House Down Payment": Decimal("0.10"),
    "College Fund": Decimal("0.10"),
    "Gadgets": Decimal("0.03"),
    "Charity": Decimal("0.05"),
    "Business Investment": Decimal("0.10"),
    "Clothing Fund": Decimal("0.03"),
}

DEFAULT_RECOMMENDED_PERCENTAGE = Decimal("0.05")


def recommended_percentage(category_name: str) -> Decimal:
    """Share of income recommended for a category."""
    return RECOMMENDED_CATEGORY_PERCENTAGES.get(category_name, DEFAULT_RECOMMENDED_PERCENTAGE)


def recommended_savings_percentage(category_name: str) -> Decimal:
    """Share of income recommended for a savings goal."""
    return RECOMMENDED_SAVINGS_PERCENTAGES.get(category_name, DEFAULT_RECOMMENDED_PERCENTAGE)


__all__ = [
    "POLICY_TABLE_VERSION",
    "get_policy_table_version",
    "DEBT_RANGE",
    "SAVINGS_RANGE",
    "DISCRETIONARY_RANGE",
    "MAX_DEBT_TO_INCOME",
    "EMERGENCY_FUND_DEFAULT_SHARE",
    "WANT_DEFAULT_SHARE",
    "SAVINGS_REQUEST_HEADROOM",
    "EMERGENCY_FUND_NAME",
    "HOUSING_NAME",
    "CATEGORY_RANGES",
    "DEFAULT_RANGE",
    "limits_for",
    "range_for",
    "SUBCATEGORY_SHARES",
    "UNKNOWN_PARENT_SHARE",
    "subcategory_share",
    "PRIORITY_WEIGHTS",
    "DEFAULT_PRIORITY_WEIGHT",
    "weight_for",
    "RECOMMENDED_CATEGORY_PERCENTAGES",
    "RECOMMENDED_SAVINGS_PERCENTAGES",
    "DEFAULT_RECOMMENDED_PERCENTAGE",
    "recommended_percentage",
    "recommended_savings_percentage",
]
