"""
Shared building blocks for self-validating value types.

Every value type validates in ``__post_init__`` and raises
:class:`~ordertrack.exceptions.ValidationError` on bad input. Each one
also offers a ``try_create`` classmethod that runs the same checks and
returns a :class:`TryCreate` triple instead of raising, for callers that
assemble many values in a row and want to collect the first problem.
"""

from typing import Generic, NamedTuple, TypeVar

from ordertrack.exceptions import ValidationError

TValue = TypeVar("TValue")

# (field, message) describing why raw input is not a valid value
Problem = tuple[str, str]


class TryCreate(NamedTuple, Generic[TValue]):
    """
    Result of a non-raising value construction.

    Attributes:
        ok: Whether construction succeeded
        value: The constructed value (None when ok is False)
        error: Human-readable error ("" when ok is True)

    Example:
        >>> ok, email, error = EmailAddress.try_create("User@Example.com")
        >>> assert ok and email.value == "user@example.com" and error == ""
    """

    ok: bool
    value: TValue | None
    error: str

    @classmethod
    def succeeded(cls, value: TValue) -> "TryCreate[TValue]":
        """Create a successful result wrapping value."""
        return cls(True, value, "")

    @classmethod
    def failed(cls, problem: Problem) -> "TryCreate[TValue]":
        """Create a failed result from a (field, message) problem."""
        return cls(False, None, problem[1])


def raise_for(problem: Problem | None) -> None:
    """Raise a ValidationError for problem, if there is one."""
    if problem is not None:
        field, message = problem
        raise ValidationError(field, message)


__all__ = [
    "Problem",
    "TryCreate",
    "TValue",
    "raise_for",
]
