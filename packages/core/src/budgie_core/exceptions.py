"""Custom exceptions for the Budgie allocation engine.

This module provides a hierarchy of exception classes for the parts of the
engine that can be misused by a caller: the category store, the budget
session and configuration loading. The allocation waterfall itself recovers
locally from incomplete data and reports it as warnings instead of raising.

All exceptions inherit from BudgieError, making it easy to catch all
application-specific errors.

Example:
    try:
        store.set_active(category_id, True)
    except CategoryNotFoundError as e:
        logger.warning("unknown_category", category_id=e.category_id)
    except BudgieError as e:
        logger.error("store_update_failed", error=str(e))
"""

from typing import Any, Optional


class BudgieError(Exception):
    """Base exception for all Budgie errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise BudgieError("Something went wrong", details={"code": 500})
        BudgieError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize BudgieError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or user correction. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(BudgieError):
    """Error raised when a change to budget data violates a model rule.

    Raised by the category store for changes that pydantic cannot express
    as a field constraint, such as changing the type of an existing
    category within a session.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Category type cannot change",
        ...     field="type",
        ...     value="want",
        ...     constraint="type is immutable once created",
        ... )
        ValidationError: Category type cannot change
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class CategoryNotFoundError(BudgieError):
    """Error raised when a category or subcategory id is not in the store.

    Attributes:
        category_id: The id that could not be resolved.
        subcategory_id: The subcategory id, when the lookup was for one.
    """

    def __init__(
        self,
        message: str,
        *,
        category_id: Optional[Any] = None,
        subcategory_id: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.category_id = category_id
        self.subcategory_id = subcategory_id

        if category_id is not None:
            self.details["category_id"] = str(category_id)
        if subcategory_id is not None:
            self.details["subcategory_id"] = str(subcategory_id)


class StaleSnapshotError(BudgieError):
    """Error raised when the catalog changed while a recalculation ran.

    The session hands the waterfall a version-stamped snapshot. If the
    store's version moved on before the result is published, the result no
    longer describes the catalog and the caller has to recalculate.

    Attributes:
        snapshot_version: Version the recalculation started from.
        current_version: Version of the store when the result was ready.
    """

    def __init__(
        self,
        message: str,
        *,
        snapshot_version: int,
        current_version: int,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.snapshot_version = snapshot_version
        self.current_version = current_version
        self.details["snapshot_version"] = snapshot_version
        self.details["current_version"] = current_version


class ConfigurationError(BudgieError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid surplus policy",
        ...     config_key="BUDGIE_ALLOCATION_SURPLUS_POLICY",
        ...     expected="retain or redirect",
        ... )
        ConfigurationError: Invalid surplus policy
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "BudgieError",
    "ValidationError",
    "CategoryNotFoundError",
    "StaleSnapshotError",
    "ConfigurationError",
]
