"""Allocation result models.

An ``AllocationResult`` is rebuilt from scratch on every waterfall run and
carries everything the caller needs: the per-id allocation map, the totals
by type, advisory recommendations, data-completeness warnings and the
audit trail of each step. It holds no timestamps, so two runs over the same
inputs serialize identically.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from budgie_core.cadence import PaymentCadence, to_periodic


class AuditEntry(BaseModel):
    """Audit log entry for calculation transparency."""
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class WarningKind(str, Enum):
    """Data-completeness problems the waterfall recovers from."""
    INVALID_INCOME = "invalid_income"
    MISSING_DUE_DATE = "missing_due_date"
    MISSING_DEBT_AMOUNT = "missing_debt_amount"


class DataWarning(BaseModel):
    """A recoverable input problem surfaced to the caller."""
    kind: WarningKind
    message: str
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None


class AllocationSummary(BaseModel):
    """Totals by category type for one waterfall run.

    ``surplus_or_deficit`` is signed: negative means the allocations exceed
    income even after rebalancing.
    """
    total_debt: Decimal = Decimal("0")
    total_needs: Decimal = Decimal("0")
    total_savings: Decimal = Decimal("0")
    total_wants: Decimal = Decimal("0")
    total_allocated: Decimal = Decimal("0")
    surplus_or_deficit: Decimal = Decimal("0")

    @computed_field
    @property
    def is_deficit(self) -> bool:
        return self.surplus_or_deficit < 0


class AllocationResult(BaseModel):
    """Output of one allocation waterfall run.

    Amounts in ``allocations`` are monthly, on the same basis as
    ``monthly_income``. Use ``periodic_allocations`` for the per-paycheck
    view.
    """
    monthly_income: Decimal
    cadence: PaymentCadence
    allocations: dict[UUID, Decimal] = Field(default_factory=dict)
    summary: AllocationSummary = Field(default_factory=AllocationSummary)
    recommendations: list[str] = Field(default_factory=list)
    warnings: list[DataWarning] = Field(default_factory=list)
    audit_log: list[AuditEntry] = Field(default_factory=list)

    # Surplus that had no eligible target and stayed in surplus_or_deficit
    undistributed_surplus: Decimal = Decimal("0")

    policy_version: str
    snapshot_version: Optional[int] = None

    def allocation_for(self, item_id: UUID) -> Decimal:
        """Allocated monthly amount for a category or subcategory id."""
        return self.allocations.get(item_id, Decimal("0"))

    def periodic_allocations(self) -> dict[UUID, Decimal]:
        """Allocations converted to the income cadence."""
        return {
            item_id: to_periodic(amount, self.cadence)
            for item_id, amount in self.allocations.items()
        }
