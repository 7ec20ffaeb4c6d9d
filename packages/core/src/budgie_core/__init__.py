"""Budgie Core - Paycheck allocation waterfall and budget projections."""

__version__ = "0.1.0"

from .cadence import PaymentCadence, to_monthly, to_periodic
from .catalog import CategoryStore, default_catalog
from .models import AllocationResult, Category, CategoryType, Subcategory
from .session import BudgetSession
from .waterfall import AllocationWaterfall, SurplusPolicy, recalculate

__all__ = [
    "PaymentCadence",
    "to_monthly",
    "to_periodic",
    "CategoryStore",
    "default_catalog",
    "AllocationResult",
    "Category",
    "CategoryType",
    "Subcategory",
    "BudgetSession",
    "AllocationWaterfall",
    "SurplusPolicy",
    "recalculate",
]
