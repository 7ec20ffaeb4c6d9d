"""Tests for payment cadence conversions."""

from decimal import Decimal

import pytest

from budgie_core.cadence import (
    PaymentCadence,
    as_decimal,
    to_annual,
    to_monthly,
    to_periodic,
)


class TestToMonthly:
    """Test suite for the per-paycheck to monthly conversion."""

    @pytest.mark.parametrize(
        "cadence,expected",
        [
            (PaymentCadence.WEEKLY, Decimal("4000")),
            (PaymentCadence.BI_WEEKLY, Decimal("2000")),
            (PaymentCadence.SEMI_MONTHLY, Decimal("2000")),
            (PaymentCadence.MONTHLY, Decimal("1000")),
        ],
    )
    def test_whole_paycheck_multipliers(self, cadence, expected):
        """Forward conversion should use whole paychecks per month."""
        assert to_monthly(Decimal("1000"), cadence) == expected

    def test_accepts_plain_numbers(self):
        """Int, float and str amounts should all be coerced to Decimal."""
        assert to_monthly(2000, PaymentCadence.BI_WEEKLY) == Decimal("4000")
        assert to_monthly("2000", PaymentCadence.BI_WEEKLY) == Decimal("4000")
        assert to_monthly(0.1, PaymentCadence.MONTHLY) == Decimal("0.1")


class TestToPeriodic:
    """Test suite for the monthly to per-paycheck conversion."""

    def test_bi_weekly_uses_calendar_divisor(self):
        """A bi-weekly paycheck of 2000 projects to 4000 but converts back to 4000/2.167."""
        monthly = to_monthly(Decimal("2000"), PaymentCadence.BI_WEEKLY)
        periodic = to_periodic(monthly, PaymentCadence.BI_WEEKLY)

        assert monthly == Decimal("4000")
        assert periodic == Decimal("4000") / Decimal("2.167")
        assert Decimal("1845.8") < periodic < Decimal("1845.9")

    def test_weekly_round_trip_is_not_exact(self):
        """Weekly divides by 4.33, so a round trip comes back below the paycheck."""
        monthly = to_monthly(Decimal("1000"), PaymentCadence.WEEKLY)
        assert to_periodic(monthly, PaymentCadence.WEEKLY) < Decimal("1000")

    def test_semi_monthly_and_monthly_round_trip(self):
        """Semi-monthly and monthly conversions are exact inverses."""
        for cadence in (PaymentCadence.SEMI_MONTHLY, PaymentCadence.MONTHLY):
            assert to_periodic(to_monthly(Decimal("1500"), cadence), cadence) == Decimal("1500")


class TestPaymentCadence:
    """Test suite for the cadence enumeration."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Weekly", PaymentCadence.WEEKLY),
            ("Bi-Weekly", PaymentCadence.BI_WEEKLY),
            ("Semi-Monthly", PaymentCadence.SEMI_MONTHLY),
            ("monthly", PaymentCadence.MONTHLY),
            ("bi_weekly", PaymentCadence.BI_WEEKLY),
        ],
    )
    def test_parse_labels(self, label, expected):
        """parse() should accept display labels and enum values."""
        assert PaymentCadence.parse(label) == expected

    def test_parse_rejects_unknown(self):
        """Unknown cadences are a ValueError."""
        with pytest.raises(ValueError):
            PaymentCadence.parse("fortnightly")

    def test_label_round_trip(self):
        """Every label should parse back to its cadence."""
        for cadence in PaymentCadence:
            assert PaymentCadence.parse(cadence.label) == cadence

    def test_paychecks_per_year(self):
        """Annual paycheck counts follow the calendar."""
        assert PaymentCadence.WEEKLY.paychecks_per_year == 52
        assert PaymentCadence.BI_WEEKLY.paychecks_per_year == 26
        assert PaymentCadence.SEMI_MONTHLY.paychecks_per_year == 24
        assert PaymentCadence.MONTHLY.paychecks_per_year == 12

    def test_to_annual(self):
        """Annual equivalent is the paycheck times paychecks per year."""
        assert to_annual(Decimal("2000"), PaymentCadence.BI_WEEKLY) == Decimal("52000")
        assert to_annual(Decimal("5000"), PaymentCadence.MONTHLY) == Decimal("60000")


def test_as_decimal_avoids_float_artefacts():
    """Floats should be converted through their repr."""
    assert as_decimal(0.1) == Decimal("0.1")
    assert as_decimal(Decimal("2.50")) == Decimal("2.50")
