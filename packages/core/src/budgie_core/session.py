"""Budget session controller.

The session is the one writer in front of a ``CategoryStore``: it keeps the
user's paycheck and cadence, runs the waterfall on a snapshot of the store
and returns the result to the caller. Nothing is broadcast; callers use the
returned ``AllocationResult`` directly.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from .cadence import Amount, PaymentCadence, as_decimal, to_monthly
from .catalog import CategoryStore
from .config import BudgieConfig, load_config
from .exceptions import StaleSnapshotError, ValidationError
from .models import AllocationResult, Category, CategoryRecommendation, PerfectBudget
from .projections import (
    category_adjustments,
    missing_essential_savings,
    perfect_budget,
    prioritize_categories,
    recommended_allocations,
    reduction_suggestions,
)
from .waterfall import AllocationWaterfall

logger = structlog.get_logger()


class BudgetSession:
    """
    Owns the income inputs for a budget and recalculates on demand.

    Example:
        session = BudgetSession(default_catalog())
        session.update_income("2000", PaymentCadence.BI_WEEKLY)
        result = session.recalculate()
    """

    def __init__(self, store: CategoryStore, config: Optional[BudgieConfig] = None):
        self.store = store
        self.config = config or load_config()
        self.cadence: PaymentCadence = self.config.allocation.default_cadence
        self.paycheck_amount = Decimal("0")
        self.last_result: Optional[AllocationResult] = None
        self._waterfall = AllocationWaterfall(self.config.allocation.surplus_policy)

    @property
    def monthly_income(self) -> Decimal:
        return to_monthly(self.paycheck_amount, self.cadence)

    def update_income(self, paycheck_amount: Amount, cadence: Optional[PaymentCadence] = None) -> None:
        """Set the paycheck amount and, optionally, the pay frequency.

        Raises:
            ValidationError: If the amount is negative or not a number
        """
        amount = as_decimal(paycheck_amount)
        if not amount.is_finite() or amount < 0:
            raise ValidationError(
                "Paycheck amount must be a non-negative number",
                field="paycheck_amount",
                value=str(paycheck_amount),
                constraint=">= 0",
            )
        self.paycheck_amount = amount
        if cadence is not None:
            self.cadence = cadence
        # Results computed for the previous income no longer apply
        self.last_result = None
        logger.info(
            "income_updated",
            paycheck_amount=str(amount),
            cadence=self.cadence.value,
            monthly_income=str(self.monthly_income),
        )

    def recalculate(self, as_of: Optional[date] = None) -> AllocationResult:
        """Run the waterfall over the store's active categories.

        Raises:
            StaleSnapshotError: If the store changed while the waterfall ran
        """
        snapshot = self.store.snapshot()
        result = self._waterfall.recalculate(
            snapshot.active_categories(),
            self.monthly_income,
            self.cadence,
            as_of=as_of,
            snapshot_version=snapshot.version,
        )

        if self.store.version != snapshot.version:
            raise StaleSnapshotError(
                "Catalog changed during recalculation",
                snapshot_version=snapshot.version,
                current_version=self.store.version,
            )

        self.last_result = result
        logger.info(
            "budget_recalculated",
            snapshot_version=snapshot.version,
            total_allocated=str(result.summary.total_allocated),
            surplus_or_deficit=str(result.summary.surplus_or_deficit),
            warnings=len(result.warnings),
        )
        return result

    def _current_result(self) -> AllocationResult:
        if self.last_result is None or self.last_result.snapshot_version != self.store.version:
            return self.recalculate()
        return self.last_result

    def recommended(self) -> dict[UUID, Decimal]:
        """Per-paycheck recommended allocations for the active categories."""
        return recommended_allocations(
            self.store.active_categories(), self.paycheck_amount, self.cadence,
        )

    def perfect_budget(self, as_of: Optional[date] = None) -> PerfectBudget:
        return perfect_budget(self.store.active_categories(), self.monthly_income, as_of=as_of)

    def advice(self) -> list[CategoryRecommendation]:
        """Missing essentials, then adjustments, then reduction suggestions."""
        result = self._current_result()
        active = self.store.active_categories()
        return (
            missing_essential_savings(active, self.monthly_income)
            + category_adjustments(active, result)
            + reduction_suggestions(active, result)
        )

    def priorities(self, as_of: Optional[date] = None) -> list[Category]:
        return prioritize_categories(self.store, self._current_result(), as_of=as_of)


__all__ = ["BudgetSession"]
