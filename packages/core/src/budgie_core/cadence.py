"""Payment cadence conversions.

Income arrives per paycheck; the waterfall works on a monthly basis. The
forward conversion uses whole paychecks per month (weekly x4, bi-weekly x2)
while the inverse uses calendar-accurate divisors (52/12 ~ 4.33,
26/12 ~ 2.167). The two are deliberately not reciprocals: converting a
monthly figure back to a paycheck spreads it over the real number of
paychecks in an average month, which is slightly more than the whole
number assumed when the income was projected forward.
"""

from decimal import Decimal
from enum import Enum
from typing import Union

Amount = Union[Decimal, int, float, str]


def as_decimal(value: Amount) -> Decimal:
    """Coerce a numeric input to Decimal without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class PaymentCadence(str, Enum):
    """Frequency at which income is received."""
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str) -> "PaymentCadence":
        """Parse an enum value or a display label such as "Bi-Weekly"."""
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        return cls(normalized)

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def monthly_multiplier(self) -> Decimal:
        """Paychecks assumed per month when projecting to a monthly figure."""
        return _MONTHLY_MULTIPLIERS[self]

    @property
    def periodic_divisor(self) -> Decimal:
        """Calendar-accurate paychecks per month used for the inverse."""
        return _PERIODIC_DIVISORS[self]

    @property
    def paychecks_per_month(self) -> Decimal:
        return _MONTHLY_MULTIPLIERS[self]

    @property
    def paychecks_per_year(self) -> int:
        return _PAYCHECKS_PER_YEAR[self]


_LABELS = {
    PaymentCadence.WEEKLY: "Weekly",
    PaymentCadence.BI_WEEKLY: "Bi-Weekly",
    PaymentCadence.SEMI_MONTHLY: "Semi-Monthly",
    PaymentCadence.MONTHLY: "Monthly",
}

_MONTHLY_MULTIPLIERS = {
    PaymentCadence.WEEKLY: Decimal("4"),
    PaymentCadence.BI_WEEKLY: Decimal("2"),
    PaymentCadence.SEMI_MONTHLY: Decimal("2"),
    PaymentCadence.MONTHLY: Decimal("1"),
}

_PERIODIC_DIVISORS = {
    PaymentCadence.WEEKLY: Decimal("4.33"),
    PaymentCadence.BI_WEEKLY: Decimal("2.167"),
    PaymentCadence.SEMI_MONTHLY: Decimal("2.0"),
    PaymentCadence.MONTHLY: Decimal("1"),
}

_PAYCHECKS_PER_YEAR = {
    PaymentCadence.WEEKLY: 52,
    PaymentCadence.BI_WEEKLY: 26,
    PaymentCadence.SEMI_MONTHLY: 24,
    PaymentCadence.MONTHLY: 12,
}


def to_monthly(amount: Amount, cadence: PaymentCadence) -> Decimal:
    """Convert a per-paycheck amount to its monthly equivalent.

    Args:
        amount: Amount received per paycheck
        cadence: How often the paycheck arrives

    Returns:
        Monthly amount (weekly x4, bi-weekly x2, semi-monthly x2, monthly x1)
    """
    return as_decimal(amount) * cadence.monthly_multiplier


def to_periodic(monthly_amount: Amount, cadence: PaymentCadence) -> Decimal:
    """Convert a monthly amount to a per-paycheck amount.

    Args:
        monthly_amount: Amount per month
        cadence: How often the paycheck arrives

    Returns:
        Per-paycheck amount (weekly /4.33, bi-weekly /2.167,
        semi-monthly /2.0, monthly x1)
    """
    return as_decimal(monthly_amount) / cadence.periodic_divisor


def to_annual(amount: Amount, cadence: PaymentCadence) -> Decimal:
    """Convert a per-paycheck amount to its annual equivalent."""
    return as_decimal(amount) * cadence.paychecks_per_year


__all__ = [
    "Amount",
    "PaymentCadence",
    "as_decimal",
    "to_monthly",
    "to_periodic",
    "to_annual",
]
