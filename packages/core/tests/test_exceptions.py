"""Tests for the exception hierarchy."""

from uuid import uuid4

import pytest

from budgie_core.exceptions import (
    BudgieError,
    CategoryNotFoundError,
    ConfigurationError,
    StaleSnapshotError,
    ValidationError,
)


class TestBudgieError:
    """Test suite for the base exception."""

    def test_message_and_defaults(self):
        error = BudgieError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.details == {}
        assert error.recoverable is False

    def test_repr(self):
        error = BudgieError("Oops", details={"code": 1})
        assert repr(error) == "BudgieError(message='Oops', details={'code': 1}, recoverable=False)"

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad"),
            CategoryNotFoundError("missing"),
            StaleSnapshotError("stale", snapshot_version=1, current_version=2),
            ConfigurationError("config"),
        ],
    )
    def test_hierarchy(self, error):
        """Every error can be caught as BudgieError."""
        with pytest.raises(BudgieError):
            raise error


class TestSubclasses:
    """Test suite for the details each subclass records."""

    def test_validation_error_details(self):
        error = ValidationError("bad type", field="type", value="want", constraint="immutable")

        assert error.recoverable is True
        assert error.details == {"field": "type", "value": "want", "constraint": "immutable"}

    def test_category_not_found_details(self):
        category_id = uuid4()
        error = CategoryNotFoundError("missing", category_id=category_id)

        assert error.category_id == category_id
        assert error.details == {"category_id": str(category_id)}

    def test_stale_snapshot_details(self):
        error = StaleSnapshotError("stale", snapshot_version=3, current_version=5)

        assert error.details == {"snapshot_version": 3, "current_version": 5}
        assert error.recoverable is True

    def test_configuration_error_details(self):
        error = ConfigurationError(
            "bad policy",
            config_key="BUDGIE_ALLOCATION_SURPLUS_POLICY",
            expected="retain or redirect",
            actual="discard",
        )

        assert error.recoverable is False
        assert error.details["config_key"] == "BUDGIE_ALLOCATION_SURPLUS_POLICY"
        assert error.details["actual"] == "discard"
