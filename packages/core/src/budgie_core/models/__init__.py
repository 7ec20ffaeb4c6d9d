"""Data models for budgie-core.

This package provides:
- Category catalog records and the category-total variant (category.py)
- Allocation results, summaries, warnings and audit entries (result.py)
- Projection outputs and budget recommendations (projection.py)
"""

from budgie_core.models.category import (
    # Enumerations
    CategoryType,
    # Policy
    PolicyRange,
    # Catalog records
    Subcategory,
    Category,
    # Category totals
    FlatTotal,
    AggregatedTotal,
    CategoryTotal,
    resolve_total,
)

from budgie_core.models.result import (
    AuditEntry,
    WarningKind,
    DataWarning,
    AllocationSummary,
    AllocationResult,
)

from budgie_core.models.projection import (
    PerfectBudget,
    RecommendationType,
    CategoryRecommendation,
    BudgetImpact,
)

__all__ = [
    # Enumerations
    "CategoryType",
    "WarningKind",
    "RecommendationType",
    # Catalog
    "PolicyRange",
    "Subcategory",
    "Category",
    "FlatTotal",
    "AggregatedTotal",
    "CategoryTotal",
    "resolve_total",
    # Results
    "AuditEntry",
    "DataWarning",
    "AllocationSummary",
    "AllocationResult",
    # Projections
    "PerfectBudget",
    "CategoryRecommendation",
    "BudgetImpact",
]
