"""Exception hierarchy for Landlord Ledger.

All application errors inherit from LandlordLedgerError, which carries an
error code and HTTP status so the API layer can render any of them with a
single handler. An empty ledger is never an error: reports over a period
with no activity return zero-valued statements.
"""

from typing import Any
from uuid import UUID


class LandlordLedgerError(Exception):
    """Base exception for all Landlord Ledger errors."""

    error_code: str = "LANDLORD_LEDGER_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(LandlordLedgerError):
    """Base exception for lookups that match nothing in the caller's scope."""

    error_code = "NOT_FOUND"
    status_code = 404


class PropertyNotFoundError(NotFoundError):
    """Raised when a property does not exist or belongs to another user."""

    error_code = "PROPERTY_NOT_FOUND"

    def __init__(self, property_id: UUID | str, user_id: UUID | str) -> None:
        super().__init__(
            f"Property not found: {property_id}",
            context={"property_id": str(property_id), "user_id": str(user_id)},
        )


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(LandlordLedgerError):
    """Base exception for malformed input. Nothing is computed on failure."""

    error_code = "VALIDATION_ERROR"
    status_code = 422


class InvalidPeriodError(ValidationError):
    """Raised when period bounds are reversed or cannot be parsed."""

    error_code = "INVALID_PERIOD"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(
            message, context={k: str(v) for k, v in context.items()}
        )


class InvalidReportKindError(ValidationError):
    """Raised when an unknown report kind is requested."""

    error_code = "INVALID_REPORT_KIND"

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Invalid report type: {kind}",
            context={"kind": kind},
        )


class InvalidAnalyticsKindError(ValidationError):
    """Raised when an unknown analytics kind is requested."""

    error_code = "INVALID_ANALYTICS_KIND"

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Invalid analytics type: {kind}",
            context={"kind": kind},
        )


class InvalidTrendWindowError(ValidationError):
    """Raised when a trailing window token is not one of 3months/6months/1year."""

    error_code = "INVALID_TREND_WINDOW"

    def __init__(self, token: str) -> None:
        super().__init__(
            f"Invalid trend window: {token}",
            context={"period": token},
        )


class InvalidPlanError(ValidationError):
    """Raised when a subscription plan name is not recognised."""

    error_code = "INVALID_PLAN"

    def __init__(self, plan: str) -> None:
        super().__init__(
            f"Invalid subscription plan: {plan}",
            context={"plan": plan},
        )


class InvalidTransactionTypeError(ValidationError):
    """Raised when a transaction type is neither INCOME nor EXPENSE."""

    error_code = "INVALID_TRANSACTION_TYPE"

    def __init__(self, transaction_type: str) -> None:
        super().__init__(
            f"Invalid transaction type: {transaction_type}",
            context={"type": transaction_type},
        )


class MissingPropertyError(ValidationError):
    """Raised when a property-level report is requested without a property."""

    error_code = "PROPERTY_REQUIRED"

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Property ID required for {kind}",
            context={"kind": kind},
        )


# =============================================================================
# Usage Limit Errors
# =============================================================================


class UsageLimitExceededError(LandlordLedgerError):
    """Raised when a create would exceed the subscription plan's quota."""

    error_code = "USAGE_LIMIT_EXCEEDED"
    status_code = 403

    def __init__(self, resource: str, plan: str, current: int, maximum: int) -> None:
        super().__init__(
            f"You've reached the maximum number of {resource} ({maximum}) "
            f"for your {plan} plan. Please upgrade to add more {resource}.",
            context={
                "resource": resource,
                "plan": plan,
                "current": current,
                "max": maximum,
            },
        )


# =============================================================================
# Ledger Store Errors
# =============================================================================


class LedgerStoreError(LandlordLedgerError):
    """Raised when the ledger store fails. Never retried by the engine."""

    error_code = "LEDGER_STORE_ERROR"
    status_code = 502

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(
            f"Ledger store failure during {operation}: {message}",
            context={"operation": operation},
        )
