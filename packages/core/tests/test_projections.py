"""Tests for the display-only budget projections."""

from datetime import date
from decimal import Decimal

import pytest

from budgie_core.cadence import PaymentCadence, to_periodic
from budgie_core.catalog import CategoryStore, default_catalog
from budgie_core.models import (
    AllocationResult,
    AllocationSummary,
    Category,
    CategoryType,
    RecommendationType,
    Subcategory,
)
from budgie_core.projections import (
    INCREASE_REASON,
    OVER_ALLOCATED_REASON,
    REDUCTION_REASON,
    budget_impact,
    category_adjustments,
    missing_essential_savings,
    perfect_budget,
    prioritize_categories,
    recommended_allocations,
    reduction_suggestions,
)

AS_OF = date(2026, 1, 15)


def make_result(income: str, allocations: dict, surplus: str = "0") -> AllocationResult:
    total = sum(allocations.values(), Decimal("0"))
    return AllocationResult(
        monthly_income=Decimal(income),
        cadence=PaymentCadence.MONTHLY,
        allocations=allocations,
        summary=AllocationSummary(
            total_allocated=total,
            surplus_or_deficit=Decimal(surplus),
        ),
        policy_version="test",
    )


@pytest.fixture
def food() -> Category:
    return Category(
        name="Food",
        type=CategoryType.NEED,
        priority=2,
        is_active=True,
        subcategories=[
            Subcategory(name="Groceries", is_active=True),
            Subcategory(name="Dining Out", is_active=True),
            Subcategory(name="Snacks"),
        ],
    )


class TestRecommendedAllocations:
    """Test suite for recommended per-paycheck allocations."""

    def test_subcategories_use_policy_max_and_share(self, food: Category):
        """Subcategories get policy max x share, converted to the paycheck."""
        result = recommended_allocations([food], Decimal("2000"), PaymentCadence.BI_WEEKLY)

        groceries, dining, snacks = food.subcategories
        ceiling = Decimal("4000") * Decimal("0.12")
        assert result[groceries.id] == to_periodic(ceiling * Decimal("0.70"), PaymentCadence.BI_WEEKLY)
        assert result[dining.id] == to_periodic(ceiling * Decimal("0.15"), PaymentCadence.BI_WEEKLY)
        assert snacks.id not in result
        assert result[food.id] == result[groceries.id] + result[dining.id]

    def test_flat_need_uses_policy_max(self):
        housing = Category(name="Housing", type=CategoryType.NEED, is_active=True)
        result = recommended_allocations([housing], Decimal("5000"), PaymentCadence.MONTHLY)

        assert result[housing.id] == Decimal("1400")

    def test_savings_use_recommended_percentage(self):
        retirement = Category(name="Retirement", type=CategoryType.SAVING, is_active=True)
        result = recommended_allocations([retirement], Decimal("1000"), PaymentCadence.WEEKLY)

        assert result[retirement.id] == to_periodic(Decimal("4000") * Decimal("0.15"), PaymentCadence.WEEKLY)

    def test_debts_and_inactive_skipped(self):
        debt = Category(name="Tax Debt", type=CategoryType.DEBT, is_active=True)
        inactive = Category(name="Food", type=CategoryType.NEED)

        result = recommended_allocations([debt, inactive], Decimal("1000"), PaymentCadence.MONTHLY)

        assert result == {}


class TestPerfectBudget:
    """Test suite for the 50/30/20 perfect budget."""

    def test_split_after_debt(self, food: Category):
        debt = Category(
            name="Credit Card Debt",
            type=CategoryType.DEBT,
            requested_amount=Decimal("2400"),
            due_date=date(2027, 1, 15),
            is_active=True,
        )
        housing = Category(name="Housing", type=CategoryType.NEED, is_active=True)
        movies = Category(name="Movies", type=CategoryType.WANT, is_active=True)
        fund = Category(name="Emergency Fund", type=CategoryType.SAVING, is_active=True)

        budget = perfect_budget([debt, housing, food, movies, fund], Decimal("5200"), as_of=AS_OF)

        assert budget.debt_reserved == Decimal("200")
        assert budget.needs_pool == Decimal("2500")
        assert budget.wants_pool == Decimal("1500")
        assert budget.allocations[housing.id] == Decimal("1250")
        assert budget.allocations[food.id] == Decimal("1250")
        assert budget.allocations[food.subcategories[0].id] == Decimal("625")
        assert food.subcategories[2].id not in budget.allocations
        assert budget.allocations[movies.id] == Decimal("1500")
        assert budget.allocations[fund.id] == Decimal("520")

    def test_total_counts_categories_only(self, food: Category):
        """Subcategory entries are not double counted in the total."""
        budget = perfect_budget([food], Decimal("1000"), as_of=AS_OF)

        assert budget.total_allocated == Decimal("500")

    def test_undated_debt_reserves_nothing(self):
        debt = Category(
            name="Tax Debt", type=CategoryType.DEBT,
            requested_amount=Decimal("900"), is_active=True,
        )
        budget = perfect_budget([debt], Decimal("1000"), as_of=AS_OF)

        assert budget.debt_reserved == Decimal("0")
        assert budget.needs_pool == Decimal("500")


class TestEnhancementAdvice:
    """Test suite for the enhancement advisor."""

    def test_missing_essential_savings(self):
        retirement = Category(name="Retirement", type=CategoryType.SAVING, is_active=True)
        missing = missing_essential_savings([retirement], Decimal("4000"))

        names = [r.category.name for r in missing]
        assert names == ["Emergency Fund", "House Down Payment", "Investment"]
        assert all(r.recommendation_type == RecommendationType.ADD for r in missing)
        assert missing[0].recommended_amount == Decimal("400")
        assert missing[2].recommended_amount == Decimal("320")
        assert missing[0].category.type == CategoryType.SAVING

    def test_category_adjustments(self):
        """Allocations more than 20% off the recommended share are flagged."""
        housing = Category(name="Housing", type=CategoryType.NEED, priority=1, is_active=True)
        food = Category(name="Food", type=CategoryType.NEED, priority=2, is_active=True)
        pets = Category(name="Pets", type=CategoryType.NEED, priority=4, is_active=True)
        result = make_result("5000", {
            housing.id: Decimal("1000"),  # recommended 1500
            food.id: Decimal("600"),      # recommended 600
            pets.id: Decimal("400"),      # recommended 150
        })

        adjustments = category_adjustments([housing, food, pets], result)

        assert [a.category.name for a in adjustments] == ["Housing", "Pets"]
        assert adjustments[0].reason == INCREASE_REASON
        assert adjustments[1].reason == OVER_ALLOCATED_REASON
        assert adjustments[0].current_amount == Decimal("1000")
        assert adjustments[0].recommended_amount == Decimal("1500")

    def test_adjustments_skip_debts_and_zero_income(self):
        debt = Category(name="Tax Debt", type=CategoryType.DEBT, is_active=True)
        food = Category(name="Food", type=CategoryType.NEED, is_active=True)

        assert category_adjustments([debt], make_result("5000", {debt.id: Decimal("10")})) == []
        assert category_adjustments([food], make_result("0", {food.id: Decimal("0")})) == []

    def test_reduction_suggestions(self):
        """Only wants with priority above 3 are suggested for reduction."""
        entertainment = Category(name="Entertainment", type=CategoryType.WANT, priority=5, is_active=True)
        concerts = Category(name="Concerts", type=CategoryType.WANT, priority=3, is_active=True)
        result = make_result("4000", {entertainment.id: Decimal("300"), concerts.id: Decimal("100")})

        suggestions = reduction_suggestions([entertainment, concerts], result)

        assert len(suggestions) == 1
        assert suggestions[0].category.id == entertainment.id
        assert suggestions[0].recommendation_type == RecommendationType.REDUCE
        assert suggestions[0].recommended_amount == Decimal("140")
        assert suggestions[0].reason == REDUCTION_REASON

    def test_budget_impact(self):
        food = Category(name="Food", type=CategoryType.NEED)
        result = make_result("5000", {food.id: Decimal("4000")}, surplus="1000")

        impact = budget_impact(Category(name="Housing", type=CategoryType.NEED), result)

        assert impact.change == "decrease"
        assert impact.amount == Decimal("1500")
        assert impact.new_surplus_or_deficit == Decimal("-500")

    def test_budget_impact_without_income(self):
        """Nothing is added when there is no income to take a share of."""
        impact = budget_impact(
            Category(name="Housing", type=CategoryType.NEED),
            make_result("0", {}),
        )

        assert impact.change == "unchanged"
        assert impact.amount == Decimal("0")


class TestPrioritizeCategories:
    """Test suite for prioritize_categories."""

    @pytest.fixture
    def store(self) -> CategoryStore:
        return default_catalog()

    def test_surplus_suggests_unselected(self, store: CategoryStore):
        housing = store.find_by_name("Housing")
        store.set_active(housing.id)

        suggestions = prioritize_categories(store, make_result("5000", {}, surplus="100"))

        assert housing not in suggestions
        assert len(suggestions) == len(store) - 1

    def test_deficit_orders_by_priority_then_funding(self, store: CategoryStore):
        loan = store.find_by_name("Student Loan")
        card = store.find_by_name("Credit Card Debt")
        pets = store.find_by_name("Pets")
        for category in (loan, card, pets):
            store.set_active(category.id)
        store.set_requested_amount(loan.id, "1000")
        store.set_requested_amount(card.id, "1000")

        result = make_result("1000", {
            loan.id: Decimal("100"),
            card.id: Decimal("500"),
            pets.id: Decimal("50"),
        }, surplus="-10")

        ordered = prioritize_categories(store, result)

        assert [c.name for c in ordered] == ["Credit Card Debt", "Student Loan", "Pets"]

    def test_debt_funding_uses_monthly_payment(self, store: CategoryStore):
        """A dated debt is compared on its monthly payment, not its balance."""
        loan = store.find_by_name("Student Loan")
        card = store.find_by_name("Credit Card Debt")
        for category in (loan, card):
            store.set_active(category.id)
        store.set_requested_amount(loan.id, "1000")
        store.set_due_date(loan.id, date(2026, 2, 15))   # 1 month: 1000/month
        store.set_requested_amount(card.id, "12000")
        store.set_due_date(card.id, date(2027, 1, 15))   # 12 months: 1000/month

        result = make_result("1000", {
            loan.id: Decimal("500"),
            card.id: Decimal("900"),
        }, surplus="-400")

        ordered = prioritize_categories(store, result, as_of=AS_OF)

        assert [c.name for c in ordered] == ["Credit Card Debt", "Student Loan"]
