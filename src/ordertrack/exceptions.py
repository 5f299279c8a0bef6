"""Library exceptions for the ordertrack package."""


class OrderTrackError(Exception):
    """Base exception for ordertrack library."""

    pass


class ValidationError(OrderTrackError):
    """
    Raised when raw input cannot be turned into a value type.

    The message is the human-readable text callers and tests match on;
    ``str(error)`` returns it unchanged.

    Attributes:
        field: Name of the offending input field (e.g. 'email', 'currency')
        message: Human-readable description of the problem
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class CurrencyMismatchError(ValidationError):
    """Raised when Money arithmetic mixes two currencies."""

    def __init__(self, operation: str, left: str, right: str) -> None:
        self.left = left
        self.right = right
        super().__init__(
            "currency",
            f"Cannot {operation} different currencies: {left} and {right}",
        )


class NegativeResultError(ValidationError):
    """Raised when a Money subtraction would drop below zero."""

    def __init__(self) -> None:
        super().__init__("amount", "Subtraction would result in negative amount")


class NegativeFactorError(ValidationError):
    """Raised when Money is multiplied by a negative factor."""

    def __init__(self) -> None:
        super().__init__("factor", "Factor cannot be negative")


class BusinessRuleViolation(OrderTrackError):
    """
    Raised when an aggregate invariant or state-machine guard is broken.

    Attributes:
        rule_name: Machine-readable name of the violated rule
            (e.g. 'MinimumOrderAmount', 'OrderCancellationRule')
        message: Human-readable description
    """

    def __init__(self, message: str, rule_name: str | None = None) -> None:
        self.rule_name = rule_name
        self.message = message
        super().__init__(message)


class InfrastructureError(OrderTrackError):
    """
    Raised when a repository or store operation fails.

    Wraps the underlying driver error so callers only ever see
    ordertrack exceptions at the repository boundary.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class InvalidOutcomeStateError(OrderTrackError):
    """Raised when an Outcome is built or read in an inconsistent way."""

    pass


class OperationCancelledError(OrderTrackError):
    """Raised at a repository boundary when the caller cancelled the operation."""

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        where = f" during {operation}" if operation else ""
        super().__init__(f"Operation cancelled{where}")


__all__ = [
    "BusinessRuleViolation",
    "CurrencyMismatchError",
    "InfrastructureError",
    "InvalidOutcomeStateError",
    "NegativeFactorError",
    "NegativeResultError",
    "OperationCancelledError",
    "OrderTrackError",
    "ValidationError",
]
