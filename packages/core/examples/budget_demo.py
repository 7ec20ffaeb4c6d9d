#!/usr/bin/env python3
"""
Budget Allocation Demonstration

This script walks through a complete budgeting session:
1. Pick categories from the default catalog
2. Enter a bi-weekly paycheck and run the allocation waterfall
3. Print the allocations, totals and advice

Run: python examples/budget_demo.py
"""

from datetime import date, timedelta
from decimal import Decimal

from budgie_core import BudgetSession, CategoryStore, PaymentCadence, default_catalog
from budgie_core.config import load_config
from budgie_core.logging_config import configure_logging


def create_sample_budget() -> CategoryStore:
    """Activate a typical mix of debts, needs, wants and savings."""
    store = default_catalog()

    for name in ("Housing", "Food", "Transportation", "Entertainment", "Emergency Fund", "Retirement"):
        store.set_active(store.find_by_name(name).id)

    card = store.find_by_name("Credit Card Debt")
    store.set_active(card.id)
    store.set_requested_amount(card.id, "3600")
    store.set_due_date(card.id, date.today() + timedelta(days=365))

    # No due date: the waterfall reports it and allocates nothing
    loan = store.find_by_name("Student Loan")
    store.set_active(loan.id)
    store.set_requested_amount(loan.id, "12000")

    retirement = store.find_by_name("Retirement")
    store.set_requested_amount(retirement.id, "300")

    return store


def main():
    """Run the budget allocation demonstration."""
    config = load_config(log_level="WARNING")
    configure_logging(config)

    print("=" * 70)
    print("BUDGIE CORE - Budget Allocation Demo")
    print("=" * 70)
    print()

    # Step 1: Build the catalog
    print("Step 1: Selecting categories...")
    store = create_sample_budget()
    for category in store.active_categories():
        print(f"  - {category.emoji} {category.name} ({category.type.value}, priority {category.priority})")
    print()

    # Step 2: Run the waterfall
    print("Step 2: Running the allocation waterfall...")
    session = BudgetSession(store, config)
    session.update_income(Decimal("2000"), PaymentCadence.BI_WEEKLY)
    result = session.recalculate()
    print(f"  - Paycheck: ${session.paycheck_amount:,.2f} ({session.cadence.label})")
    print(f"  - Monthly Income: ${result.monthly_income:,.2f}")
    print()

    print("-" * 70)
    print(f"{'Category':<32}{'Monthly':>18}{'Per Paycheck':>18}")
    print("-" * 70)
    periodic = result.periodic_allocations()
    for category in store.active_categories():
        amount = result.allocation_for(category.id)
        print(f"{category.name:<32}{amount:>18,.2f}{periodic.get(category.id, Decimal('0')):>18,.2f}")
        for sub in category.subcategories:
            if sub.id in result.allocations:
                print(f"  {sub.name:<30}{result.allocations[sub.id]:>18,.2f}")
    print()

    # Step 3: Summary
    summary = result.summary
    print("Step 3: Summary")
    print(f"  - Debt:    ${summary.total_debt:,.2f}")
    print(f"  - Needs:   ${summary.total_needs:,.2f}")
    print(f"  - Savings: ${summary.total_savings:,.2f}")
    print(f"  - Wants:   ${summary.total_wants:,.2f}")
    label = "Deficit" if summary.is_deficit else "Surplus"
    print(f"  - {label}: ${abs(summary.surplus_or_deficit):,.2f}")
    print()

    if result.warnings:
        print("Warnings:")
        for warning in result.warnings:
            print(f"  - [{warning.kind.value}] {warning.message}")
        print()

    if result.recommendations:
        print("Recommendations:")
        for recommendation in result.recommendations:
            print(f"  - {recommendation}")
        print()

    advice = session.advice()
    if advice:
        print("Advice:")
        for item in advice:
            print(
                f"  - {item.recommendation_type.value.upper()} {item.category.name}: "
                f"${item.recommended_amount:,.2f} ({item.reason})"
            )
        print()

    print("=" * 70)
    print("Demo complete!")
    print("=" * 70)


if __name__ == "__main__":
    main()
