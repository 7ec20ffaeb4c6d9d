"""Category store and seed catalog.

The store is an explicit object owned by the composition root (usually a
``BudgetSession``). It is the single writer for the user's category
selections; the waterfall never reads it directly but receives a
version-stamped, deep-copied ``CatalogSnapshot`` instead.
"""

from datetime import date
from typing import Any, Iterable, Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .cadence import Amount, as_decimal
from .exceptions import CategoryNotFoundError, ValidationError
from .models import Category, CategoryType, Subcategory

logger = structlog.get_logger()


class CatalogSnapshot(BaseModel):
    """Immutable view of the catalog at one store version."""
    version: int
    categories: list[Category] = Field(default_factory=list)

    def active_categories(self) -> list[Category]:
        return [c for c in self.categories if c.is_active]


class CategoryStore:
    """Mutable, ordered collection of budget categories.

    Catalog order is insertion order and is the tie-breaker wherever the
    waterfall sorts by priority. Every successful mutation bumps
    ``version``.
    """

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        self._categories: dict[UUID, Category] = {}
        self.version = 0
        for category in categories or []:
            self._categories[category.id] = category

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self):
        return iter(self._categories.values())

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._categories

    def _touch(self, event: str, **kwargs: Any) -> None:
        self.version += 1
        logger.debug(event, version=self.version, **kwargs)

    def _assign(self, target: BaseModel, field: str, value: Any) -> None:
        try:
            setattr(target, field, value)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid value for {field}",
                field=field,
                value=value,
                constraint=e.errors()[0]["msg"],
            ) from e

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def add_category(self, category: Category) -> Category:
        if category.id in self._categories:
            raise ValidationError(
                f"Category {category.name!r} is already in the catalog",
                field="id",
                value=str(category.id),
                constraint="ids are unique",
            )
        self._categories[category.id] = category
        self._touch("category_added", category=category.name)
        return category

    def remove_category(self, category_id: UUID) -> Category:
        category = self.get(category_id)
        del self._categories[category_id]
        self._touch("category_removed", category=category.name)
        return category

    def get(self, category_id: UUID) -> Category:
        try:
            return self._categories[category_id]
        except KeyError:
            raise CategoryNotFoundError(
                f"Category {category_id} not found",
                category_id=category_id,
            ) from None

    def find_by_name(
        self,
        name: str,
        category_type: Optional[CategoryType] = None,
    ) -> Optional[Category]:
        """First category with this name, optionally restricted to a type."""
        for category in self._categories.values():
            if category.name != name:
                continue
            if category_type is None or category.type == category_type:
                return category
        return None

    def update_category(self, category_id: UUID, **changes: Any) -> Category:
        """Replace fields of a category, revalidating the whole record.

        Raises:
            ValidationError: If the change would alter the category type or
                id, or produces an invalid category
        """
        current = self.get(category_id)
        for frozen in ("id", "type"):
            if frozen in changes and changes[frozen] != getattr(current, frozen):
                raise ValidationError(
                    f"Category {frozen} cannot change within a session",
                    field=frozen,
                    value=changes[frozen],
                    constraint=f"{frozen} is immutable once created",
                )

        try:
            updated = Category.model_validate({**current.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid update for category {current.name!r}",
                constraint=e.errors()[0]["msg"],
                details={"changes": sorted(changes)},
            ) from e

        self._categories[category_id] = updated
        self._touch("category_updated", category=updated.name, fields=sorted(changes))
        return updated

    def set_active(self, category_id: UUID, is_active: bool = True) -> None:
        category = self.get(category_id)
        category.is_active = is_active
        self._touch("category_activation_changed", category=category.name, is_active=is_active)

    def set_requested_amount(self, category_id: UUID, amount: Optional[Amount]) -> None:
        category = self.get(category_id)
        value = None if amount is None else as_decimal(amount)
        self._assign(category, "requested_amount", value)
        self._touch("category_amount_changed", category=category.name, amount=str(value))

    def set_due_date(self, category_id: UUID, due_date: Optional[date]) -> None:
        category = self.get(category_id)
        if due_date is not None and category.type != CategoryType.DEBT:
            raise ValidationError(
                f"{category.name} is not a debt and cannot carry a due date",
                field="due_date",
                value=due_date.isoformat(),
                constraint="due dates apply to debts only",
            )
        category.due_date = due_date
        self._touch("category_due_date_changed", category=category.name)

    # -------------------------------------------------------------------------
    # Subcategories
    # -------------------------------------------------------------------------

    def _get_subcategory(self, category_id: UUID, subcategory_id: UUID) -> tuple[Category, Subcategory]:
        category = self.get(category_id)
        sub = category.find_subcategory(subcategory_id)
        if sub is None:
            raise CategoryNotFoundError(
                f"Subcategory {subcategory_id} not found in {category.name}",
                category_id=category_id,
                subcategory_id=subcategory_id,
            )
        return category, sub

    def add_subcategory(self, category_id: UUID, subcategory: Subcategory) -> Subcategory:
        category = self.get(category_id)
        if category.find_subcategory(subcategory.id) is not None:
            raise ValidationError(
                f"Subcategory {subcategory.name!r} already belongs to {category.name}",
                field="id",
                value=str(subcategory.id),
                constraint="ids are unique",
            )
        category.subcategories.append(subcategory)
        self._touch("subcategory_added", category=category.name, subcategory=subcategory.name)
        return subcategory

    def remove_subcategory(self, category_id: UUID, subcategory_id: UUID) -> Subcategory:
        category, sub = self._get_subcategory(category_id, subcategory_id)
        category.subcategories = [s for s in category.subcategories if s.id != subcategory_id]
        self._touch("subcategory_removed", category=category.name, subcategory=sub.name)
        return sub

    def set_subcategory_active(
        self,
        category_id: UUID,
        subcategory_id: UUID,
        is_active: bool = True,
    ) -> None:
        category, sub = self._get_subcategory(category_id, subcategory_id)
        sub.is_active = is_active
        self._touch(
            "subcategory_activation_changed",
            category=category.name,
            subcategory=sub.name,
            is_active=is_active,
        )

    def set_subcategory_amount(
        self,
        category_id: UUID,
        subcategory_id: UUID,
        amount: Optional[Amount],
    ) -> None:
        category, sub = self._get_subcategory(category_id, subcategory_id)
        value = None if amount is None else as_decimal(amount)
        self._assign(sub, "requested_amount", value)
        self._touch(
            "subcategory_amount_changed",
            category=category.name,
            subcategory=sub.name,
            amount=str(value),
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        return [
            c for c in self._categories.values()
            if category_type is None or c.type == category_type
        ]

    def active_categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        return [c for c in self.categories(category_type) if c.is_active]

    def inactive_categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        return [c for c in self.categories(category_type) if not c.is_active]

    def snapshot(self) -> CatalogSnapshot:
        """Deep copy of the catalog stamped with the current version."""
        return CatalogSnapshot(
            version=self.version,
            categories=[c.model_copy(deep=True) for c in self._categories.values()],
        )


# =============================================================================
# SEED CATALOG
# =============================================================================
# (name, emoji, priority, description)

_SEED_DEBTS = [
    ("Student Loan", "🎓", 1, "Money borrowed to pay for education"),
    ("Medical Debt", "🏥", 1, "Unpaid hospital and medical bills"),
    ("Credit Card Debt", "💳", 1, "Outstanding credit card balance"),
    ("Personal Loan", "💰", 2, "Bank loan taken for personal expenses"),
    ("Small Business Loan", "🏢", 2, "Loan to start or grow a business"),
    ("Tax Debt", "💸", 1, "Unpaid taxes owed to the government"),
    ("Consolidation Loan", "🔗", 3, "Loan combining several debts into one"),
    ("Payday Loan", "🏦", 4, "Short-term loan against the next paycheck"),
    ("Alimony", "💼", 2, "Support payments to a former spouse"),
]

# (name, emoji, type, priority, description, [(subcategory, priority), ...])
_SEED_EXPENSES = [
    ("Housing", "🏠", CategoryType.NEED, 1, "Rent or mortgage and home costs", [
        ("Mortgage", 1), ("Rent", 1), ("Utilities", 1),
        ("Home Maintenance", 1), ("Property Tax", 1), ("Home Insurance", 1),
    ]),
    ("Transportation", "🚗", CategoryType.NEED, 2, "Getting around", [
        ("Car Payment", 2), ("Public Transportation", 2), ("Ride Share", 2),
        ("Tolls", 2), ("Maintenance", 2), ("Fuel", 2), ("Car Insurance", 2),
    ]),
    ("Food", "🍽️", CategoryType.NEED, 2, "Groceries and eating out", [
        ("Groceries", 1), ("Dining Out", 4), ("Snacks", 4), ("Meal Delivery", 4),
    ]),
    ("Healthcare", "🩺", CategoryType.NEED, 2, "Medical care and insurance", [
        ("Insurance Premiums", 1), ("Doctor Visits", 1), ("Medications", 1),
        ("Dental Care", 1), ("Vision Care", 1),
    ]),
    ("Utilities", "🔦", CategoryType.NEED, 2, "Household services", [
        ("Electricity", 2), ("Water", 2), ("Gas", 2),
        ("Internet", 2), ("Cable", 2), ("Trash", 2),
    ]),
    ("Pets", "🐶", CategoryType.NEED, 4, "Pet food and care", [
        ("Food", 3), ("Vet Visits", 3), ("Medications", 1),
        ("Grooming", 3), ("Toys", 3), ("Pet Insurance", 3),
    ]),
    ("Subscriptions", "📺", CategoryType.WANT, 5, "Recurring digital services", [
        ("Streaming", 5), ("Music", 5), ("Magazines", 5), ("Apps", 5), ("News", 5),
    ]),
    ("Entertainment", "🎮", CategoryType.WANT, 5, "Fun and leisure", [
        ("Movies", 5), ("Games", 5), ("Concerts", 5), ("Sports Events", 5), ("Hobbies", 5),
    ]),
    ("Personal Care", "💅", CategoryType.NEED, 4, "Grooming and wellness", [
        ("Haircuts", 4), ("Skincare", 4), ("Cosmetics", 4), ("Spa", 4), ("Gym", 4),
    ]),
    ("Education", "📚", CategoryType.NEED, 3, "Tuition and learning", [
        ("Tuition", 3), ("Books & Supplies", 3), ("Online Courses", 3), ("School Fees", 3),
    ]),
]

_SEED_SAVINGS = [
    ("Emergency Fund", "💰", 1, "Cushion for unexpected expenses"),
    ("Vacation", "✈️", 4, "Saving for travel"),
    ("New Car", "🚗", 3, "Saving toward a vehicle"),
    ("Home Renovation", "🔨", 3, "Saving for home improvements"),
    ("Investment", "📈", 2, "Money set aside to invest"),
    ("Wedding", "💍", 3, "Saving for a wedding"),
    ("Education Fund", "🎓", 2, "Saving for future education"),
    ("Retirement", "🏖️", 1, "Long-term retirement savings"),
    ("House Down Payment", "🏠", 2, "Saving toward buying a home"),
    ("College Fund", "🎓", 3, "Saving for a child's college"),
    ("Gadgets", "📱", 4, "Saving for electronics"),
    ("Charity", "🎁", 4, "Money set aside for giving"),
    ("Business Investment", "🏢", 3, "Saving to fund a business"),
    ("Clothing Fund", "👗", 4, "Saving for clothes"),
]


def seed_categories() -> list[Category]:
    """Fresh copies of the built-in catalog, all inactive."""
    categories: list[Category] = []
    for name, emoji, priority, description in _SEED_DEBTS:
        categories.append(Category(
            name=name, emoji=emoji, type=CategoryType.DEBT,
            priority=priority, description=description,
        ))
    for name, emoji, category_type, priority, description, subs in _SEED_EXPENSES:
        categories.append(Category(
            name=name, emoji=emoji, type=category_type,
            priority=priority, description=description,
            subcategories=[Subcategory(name=sub, priority=p) for sub, p in subs],
        ))
    for name, emoji, priority, description in _SEED_SAVINGS:
        categories.append(Category(
            name=name, emoji=emoji, type=CategoryType.SAVING,
            priority=priority, description=description,
        ))
    return categories


def default_catalog() -> CategoryStore:
    """A store pre-populated with the built-in catalog."""
    return CategoryStore(seed_categories())


__all__ = [
    "CatalogSnapshot",
    "CategoryStore",
    "seed_categories",
    "default_catalog",
]
