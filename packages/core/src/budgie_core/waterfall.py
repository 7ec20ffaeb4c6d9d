"""Allocation waterfall.

Assigns a monthly income to the user's active categories in a fixed order,
each stage drawing on what the previous stage left:

1. Debts, by priority, up to the 36% debt-to-income ceiling
2. Needs, clamped to their policy range of the income left after debts
3. Savings, emergency fund first, then the rest by priority weight
4. Wants, capped at 30% of the income left after savings
5. Reconciliation: a deficit is absorbed by wants and non-essential needs;
   a surplus goes to the emergency fund and the most essential debt

The result is rebuilt in full on every call. All amounts are Decimal and no
rounding is applied.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID

import structlog

from .cadence import Amount, PaymentCadence, as_decimal, to_periodic
from .models import (
    AggregatedTotal,
    AllocationResult,
    AllocationSummary,
    AuditEntry,
    Category,
    CategoryType,
    DataWarning,
    WarningKind,
    resolve_total,
)
from .policy import (
    DISCRETIONARY_RANGE,
    EMERGENCY_FUND_DEFAULT_SHARE,
    EMERGENCY_FUND_NAME,
    HOUSING_NAME,
    MAX_DEBT_TO_INCOME,
    POLICY_TABLE_VERSION,
    SAVINGS_RANGE,
    SAVINGS_REQUEST_HEADROOM,
    WANT_DEFAULT_SHARE,
    range_for,
    subcategory_share,
    weight_for,
)

logger = structlog.get_logger()

ZERO = Decimal("0")

# Surplus split between the emergency fund and the most essential debt
SURPLUS_EMERGENCY_SHARE = Decimal("0.70")
SURPLUS_DEBT_SHARE = Decimal("0.30")

# Maximum cut per category while absorbing a deficit
WANT_MAX_REDUCTION = Decimal("0.50")
NEED_MAX_REDUCTION = Decimal("0.30")

# Needs at or below this priority number are never cut
ESSENTIAL_PRIORITY = 2

EMERGENCY_FUND_MONTHS = 3

DEBT_RATIO_RECOMMENDATION = (
    "Your debt payments are high. Consider debt consolidation or speaking "
    "with a financial advisor."
)
EMERGENCY_FUND_RECOMMENDATION = "Build your emergency fund to cover 3-6 months of expenses."
HOUSING_RECOMMENDATION = (
    "Your housing costs exceed recommended limits. Consider ways to reduce "
    "these expenses."
)


class SurplusPolicy(str, Enum):
    """What happens to a surplus share that has no eligible target.

    RETAIN: the share stays in ``surplus_or_deficit``.
    REDIRECT: the share goes to the other target when one exists.
    """
    RETAIN = "retain"
    REDIRECT = "redirect"


def months_until_due(due_date: date, as_of: date) -> int:
    """Whole calendar months from ``as_of`` to ``due_date``, at least 1.

    A partial month is not counted: 2026-01-15 to 2026-03-14 is one month.
    """
    months = (due_date.year - as_of.year) * 12 + (due_date.month - as_of.month)
    if due_date.day < as_of.day:
        months -= 1
    return max(1, months)


def _by_priority(categories: Iterable[Category]) -> list[Category]:
    # sorted() is stable, so equal priorities keep catalog order
    return sorted(categories, key=lambda c: c.priority)


class AllocationWaterfall:
    """
    Compute per-category allocations for one income figure.

    The waterfall holds no state between calls other than its surplus
    policy. Every step is recorded in the result's audit log and emitted
    through structlog.
    """

    def __init__(self, surplus_policy: SurplusPolicy = SurplusPolicy.RETAIN):
        self.surplus_policy = surplus_policy
        self._audit_log: list[AuditEntry] = []
        self._warnings: list[DataWarning] = []
        self._allocations: dict[UUID, Decimal] = {}

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.info(
            "allocation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def _warn(self, kind: WarningKind, message: str, category: Optional[Category] = None) -> None:
        self._warnings.append(DataWarning(
            kind=kind,
            message=message,
            category_id=category.id if category else None,
            category_name=category.name if category else None,
        ))
        logger.warning(
            kind.value,
            message=message,
            category=category.name if category else None,
        )

    # -------------------------------------------------------------------------
    # Stage 0: income
    # -------------------------------------------------------------------------

    def _validate_income(self, monthly_income: Amount) -> Decimal:
        income = as_decimal(monthly_income)
        if not income.is_finite() or income < 0:
            self._warn(
                WarningKind.INVALID_INCOME,
                f"Monthly income {monthly_income} is not a non-negative number; using 0",
            )
            income = ZERO

        self._log_step(
            step="monthly_income",
            input_value=str(monthly_income),
            output_value=str(income),
            source="User provided",
        )
        return income

    # -------------------------------------------------------------------------
    # Stage 1: debts
    # -------------------------------------------------------------------------

    def _allocate_debts(self, debts: list[Category], income: Decimal, as_of: date) -> Decimal:
        """Fund debts in priority order up to the debt-to-income ceiling."""
        ceiling = income * MAX_DEBT_TO_INCOME
        total = ZERO
        ceiling_reached = False

        for debt in _by_priority(debts):
            self._allocations[debt.id] = ZERO

            if debt.requested_amount is None:
                self._warn(
                    WarningKind.MISSING_DEBT_AMOUNT,
                    f"{debt.name} has no outstanding amount and was not funded",
                    debt,
                )
                continue
            if debt.due_date is None:
                self._warn(
                    WarningKind.MISSING_DUE_DATE,
                    f"{debt.name} has no due date and was not funded",
                    debt,
                )
                continue
            if ceiling_reached:
                self._log_step(
                    step=f"debt_{debt.name}",
                    input_value=f"balance={debt.requested_amount}",
                    output_value="0",
                    source="Debt-to-income ceiling",
                    notes="Ceiling already reached",
                )
                continue

            months = months_until_due(debt.due_date, as_of)
            payment = debt.requested_amount / months
            notes = None
            if total + payment > ceiling:
                payment = ceiling - total
                ceiling_reached = True
                notes = f"Truncated to ceiling {ceiling}"

            self._allocations[debt.id] = payment
            total += payment
            self._log_step(
                step=f"debt_{debt.name}",
                input_value=f"balance={debt.requested_amount}, months={months}",
                output_value=str(payment),
                source="Balance / months until due",
                notes=notes,
            )

        self._log_step(
            step="total_debt",
            input_value=f"{len(debts)} debts, ceiling={ceiling}",
            output_value=str(total),
            source=f"Debt-to-income ceiling {MAX_DEBT_TO_INCOME}",
        )
        return total

    # -------------------------------------------------------------------------
    # Stage 2 and 4: expenses
    # -------------------------------------------------------------------------

    def _allocate_subcategories(
        self,
        category: Category,
        income: Decimal,
        cadence: PaymentCadence,
    ) -> Decimal:
        """Fund each active subcategory and return their sum."""
        active = category.active_subcategories
        ceiling = to_periodic(income * range_for(category).max, cadence)
        total = ZERO

        for sub in active:
            if sub.requested_amount is not None:
                amount = sub.requested_amount
                source = "User provided"
            else:
                share = subcategory_share(category.name, sub.name, len(active))
                amount = ceiling * share
                source = f"Policy max {ceiling} x share {share}"
            self._allocations[sub.id] = amount
            total += amount
            self._log_step(
                step=f"subcategory_{category.name}_{sub.name}",
                input_value=f"requested={sub.requested_amount}",
                output_value=str(amount),
                source=source,
            )

        self._allocations[category.id] = total
        return total

    def _allocate_needs(
        self,
        needs: list[Category],
        remaining: Decimal,
        income: Decimal,
        cadence: PaymentCadence,
    ) -> Decimal:
        total = ZERO
        for need in _by_priority(needs):
            if isinstance(resolve_total(need), AggregatedTotal):
                amount = self._allocate_subcategories(need, income, cadence)
                source = "Sum of active subcategories"
            else:
                limits = range_for(need)
                low = remaining * limits.min
                high = remaining * limits.max
                base = need.requested_amount if need.requested_amount is not None else low
                amount = min(max(weight_for(need.priority) * base, low), high)
                source = f"Policy range {limits.min}-{limits.max} of {remaining}"
                self._allocations[need.id] = amount

            total += amount
            self._log_step(
                step=f"need_{need.name}",
                input_value=f"requested={need.requested_amount}, priority={need.priority}",
                output_value=str(amount),
                source=source,
            )
        return total

    def _allocate_wants(
        self,
        wants: list[Category],
        remaining: Decimal,
        income: Decimal,
        cadence: PaymentCadence,
    ) -> Decimal:
        total = ZERO
        cap = remaining * DISCRETIONARY_RANGE.max
        for want in _by_priority(wants):
            if isinstance(resolve_total(want), AggregatedTotal):
                amount = self._allocate_subcategories(want, income, cadence)
                source = "Sum of active subcategories"
            else:
                requested = want.requested_amount
                if requested is None:
                    requested = remaining * WANT_DEFAULT_SHARE
                amount = min(cap, requested)
                source = f"Discretionary cap {cap}"
                self._allocations[want.id] = amount

            total += amount
            self._log_step(
                step=f"want_{want.name}",
                input_value=f"requested={want.requested_amount}, priority={want.priority}",
                output_value=str(amount),
                source=source,
            )
        return total

    # -------------------------------------------------------------------------
    # Stage 3: savings
    # -------------------------------------------------------------------------

    def _allocate_savings(
        self,
        savings: list[Category],
        remaining: Decimal,
        income: Decimal,
    ) -> Decimal:
        emergency = next((s for s in savings if s.name == EMERGENCY_FUND_NAME), None)
        others = [s for s in savings if s is not emergency]

        emergency_amount = ZERO
        if emergency is not None:
            target = emergency.requested_amount
            if target is None:
                target = income * EMERGENCY_FUND_DEFAULT_SHARE
            emergency_amount = min(remaining * SAVINGS_RANGE.min, target)
            self._allocations[emergency.id] = emergency_amount
            self._log_step(
                step="savings_emergency_fund",
                input_value=f"remaining={remaining}, target={target}",
                output_value=str(emergency_amount),
                source=f"Savings minimum {SAVINGS_RANGE.min}",
            )

        headroom = min(
            remaining * SAVINGS_RANGE.max - emergency_amount,
            remaining - emergency_amount,
        )
        total_weight = sum((weight_for(s.priority) for s in others), ZERO)
        total = emergency_amount

        for goal in others:
            amount = ZERO
            if headroom > 0 and total_weight > 0:
                share = headroom * weight_for(goal.priority) / total_weight
                amount = share
                if goal.requested_amount is not None:
                    amount = min(share * SAVINGS_REQUEST_HEADROOM, goal.requested_amount)
            self._allocations[goal.id] = amount
            total += amount
            self._log_step(
                step=f"savings_{goal.name}",
                input_value=f"headroom={headroom}, priority={goal.priority}",
                output_value=str(amount),
                source="Priority-weighted share of savings headroom",
            )
        return total

    # -------------------------------------------------------------------------
    # Stage 5: reconciliation
    # -------------------------------------------------------------------------

    def _reduce(self, category: Category, reduction: Decimal) -> None:
        """Cut a category, spreading the cut across its subcategories."""
        current = self._allocations[category.id]
        if isinstance(resolve_total(category), AggregatedTotal) and current > 0:
            for sub in category.active_subcategories:
                amount = self._allocations[sub.id]
                self._allocations[sub.id] = amount - reduction * amount / current
        self._allocations[category.id] = current - reduction

    def _rebalance_deficit(
        self,
        deficit: Decimal,
        wants: list[Category],
        needs: list[Category],
    ) -> Decimal:
        """Absorb a deficit from wants, then non-essential needs.

        Returns:
            The part of the deficit that could not be absorbed
        """
        passes = [
            (_by_priority(wants), WANT_MAX_REDUCTION),
            (_by_priority(n for n in needs if n.priority > ESSENTIAL_PRIORITY), NEED_MAX_REDUCTION),
        ]
        for categories, max_fraction in passes:
            for category in categories:
                if deficit <= 0:
                    return ZERO
                current = self._allocations[category.id]
                reduction = min(current * max_fraction, deficit)
                if reduction <= 0:
                    continue
                self._reduce(category, reduction)
                deficit -= reduction
                self._log_step(
                    step=f"rebalance_{category.name}",
                    input_value=str(current),
                    output_value=str(self._allocations[category.id]),
                    source=f"Deficit reduction up to {max_fraction}",
                    notes=f"Deficit left {deficit}",
                )
        return max(deficit, ZERO)

    def _distribute_surplus(
        self,
        surplus: Decimal,
        savings: list[Category],
        debts: list[Category],
        income: Decimal,
        total_debt: Decimal,
    ) -> Decimal:
        """Send surplus to the emergency fund and the most essential debt.

        Returns:
            The part of the surplus that was not distributed
        """
        emergency = next((s for s in savings if s.name == EMERGENCY_FUND_NAME), None)
        debt = next(
            (d for d in _by_priority(debts) if d.due_date is not None and d.requested_amount is not None),
            None,
        )
        debt_headroom = max(income * MAX_DEBT_TO_INCOME - total_debt, ZERO)

        emergency_amount = surplus * SURPLUS_EMERGENCY_SHARE if emergency else ZERO
        debt_amount = min(surplus * SURPLUS_DEBT_SHARE, debt_headroom) if debt else ZERO

        if self.surplus_policy == SurplusPolicy.REDIRECT:
            if emergency is None and debt is not None:
                debt_amount = min(surplus, debt_headroom)
            elif emergency is not None:
                emergency_amount = surplus - debt_amount

        if emergency is not None:
            self._allocations[emergency.id] += emergency_amount
        if debt is not None:
            self._allocations[debt.id] += debt_amount

        undistributed = surplus - emergency_amount - debt_amount
        self._log_step(
            step="surplus_distribution",
            input_value=str(surplus),
            output_value=f"emergency_fund={emergency_amount}, debt={debt_amount}",
            source=f"Surplus split {SURPLUS_EMERGENCY_SHARE}/{SURPLUS_DEBT_SHARE}",
            notes=f"Undistributed {undistributed} ({self.surplus_policy.value})",
        )
        return undistributed

    def _resync_aggregated(self, categories: list[Category]) -> None:
        for category in categories:
            if isinstance(resolve_total(category), AggregatedTotal):
                self._allocations[category.id] = sum(
                    (self._allocations[sub.id] for sub in category.active_subcategories),
                    ZERO,
                )

    def _summarize(self, categories: list[Category], income: Decimal) -> AllocationSummary:
        totals = {t: ZERO for t in CategoryType}
        for category in categories:
            totals[category.type] += self._allocations.get(category.id, ZERO)

        total_allocated = sum(totals.values(), ZERO)
        return AllocationSummary(
            total_debt=totals[CategoryType.DEBT],
            total_needs=totals[CategoryType.NEED],
            total_savings=totals[CategoryType.SAVING],
            total_wants=totals[CategoryType.WANT],
            total_allocated=total_allocated,
            surplus_or_deficit=income - total_allocated,
        )

    def _recommendations(self, categories: list[Category], income: Decimal) -> list[str]:
        recommendations: list[str] = []

        total_debt = sum(
            (self._allocations[c.id] for c in categories if c.type == CategoryType.DEBT),
            ZERO,
        )
        if total_debt > income * MAX_DEBT_TO_INCOME:
            recommendations.append(DEBT_RATIO_RECOMMENDATION)

        emergency = next((c for c in categories if c.name == EMERGENCY_FUND_NAME), None)
        if emergency is not None and self._allocations[emergency.id] < income * EMERGENCY_FUND_MONTHS:
            recommendations.append(EMERGENCY_FUND_RECOMMENDATION)

        housing = next((c for c in categories if c.name == HOUSING_NAME), None)
        if housing is not None and self._allocations[housing.id] > income * range_for(housing).max:
            recommendations.append(HOUSING_RECOMMENDATION)

        return recommendations

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def recalculate(
        self,
        active_categories: Iterable[Category],
        monthly_income: Amount,
        cadence: PaymentCadence,
        as_of: Optional[date] = None,
        snapshot_version: Optional[int] = None,
    ) -> AllocationResult:
        """
        Run the full waterfall.

        Args:
            active_categories: Categories in the user's budget; inactive
                ones are ignored
            monthly_income: Income per month, after cadence conversion
            cadence: Pay frequency, used for subcategory defaults and the
                per-paycheck view
            as_of: Date debts are counted from (default: today)
            snapshot_version: Catalog version the categories came from

        Returns:
            AllocationResult with allocations, totals, warnings and audit log
        """
        self._audit_log = []
        self._warnings = []
        self._allocations = {}
        as_of = as_of or date.today()

        categories = [c for c in active_categories if c.is_active]
        debts = [c for c in categories if c.type == CategoryType.DEBT]
        needs = [c for c in categories if c.type == CategoryType.NEED]
        savings = [c for c in categories if c.type == CategoryType.SAVING]
        wants = [c for c in categories if c.type == CategoryType.WANT]

        income = self._validate_income(monthly_income)

        # Step 1: Debts
        total_debt = self._allocate_debts(debts, income, as_of)
        remaining = max(income - total_debt, ZERO)

        # Step 2: Needs
        total_needs = self._allocate_needs(needs, remaining, income, cadence)
        self._log_step(
            step="total_needs",
            input_value=f"{len(needs)} needs, remaining={remaining}",
            output_value=str(total_needs),
            source="Category policy ranges",
        )
        remaining = max(remaining - total_needs, ZERO)

        # Step 3: Savings
        total_savings = self._allocate_savings(savings, remaining, income)
        self._log_step(
            step="total_savings",
            input_value=f"{len(savings)} goals, remaining={remaining}",
            output_value=str(total_savings),
            source=f"Savings range {SAVINGS_RANGE.min}-{SAVINGS_RANGE.max}",
        )
        remaining = max(remaining - total_savings, ZERO)

        # Step 4: Wants
        total_wants = self._allocate_wants(wants, remaining, income, cadence)
        self._log_step(
            step="total_wants",
            input_value=f"{len(wants)} wants, remaining={remaining}",
            output_value=str(total_wants),
            source=f"Discretionary range {DISCRETIONARY_RANGE.min}-{DISCRETIONARY_RANGE.max}",
        )

        # Step 5: Reconciliation
        surplus = income - (total_debt + total_needs + total_savings + total_wants)
        undistributed = ZERO
        if surplus < 0:
            unabsorbed = self._rebalance_deficit(-surplus, wants, needs)
            if unabsorbed > 0:
                logger.warning("deficit_persists", deficit=str(unabsorbed))
        else:
            undistributed = self._distribute_surplus(surplus, savings, debts, income, total_debt)
        self._resync_aggregated(needs + wants)

        summary = self._summarize(categories, income)
        self._log_step(
            step="surplus_or_deficit",
            input_value=f"{income} - {summary.total_allocated}",
            output_value=str(summary.surplus_or_deficit),
            source="Reconciliation",
        )

        return AllocationResult(
            monthly_income=income,
            cadence=cadence,
            allocations=dict(self._allocations),
            summary=summary,
            recommendations=self._recommendations(categories, income),
            warnings=list(self._warnings),
            audit_log=list(self._audit_log),
            undistributed_surplus=undistributed,
            policy_version=POLICY_TABLE_VERSION,
            snapshot_version=snapshot_version,
        )


def recalculate(
    active_categories: Iterable[Category],
    monthly_income: Amount,
    cadence: PaymentCadence,
    as_of: Optional[date] = None,
    surplus_policy: SurplusPolicy = SurplusPolicy.RETAIN,
) -> AllocationResult:
    """Run the waterfall once with a fresh engine."""
    return AllocationWaterfall(surplus_policy).recalculate(
        active_categories, monthly_income, cadence, as_of=as_of,
    )


__all__ = [
    "SurplusPolicy",
    "AllocationWaterfall",
    "months_until_due",
    "recalculate",
]
