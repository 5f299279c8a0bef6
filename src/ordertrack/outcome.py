"""
Success/failure envelope returned by every handler.

Aggregates and value types raise; handlers catch at their boundary and
return an :class:`Outcome`. Callers branch on ``is_success`` or chain
operations with ``map``/``bind``/``ensure`` without ever raising for an
expected failure.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, cast

from ordertrack.exceptions import InvalidOutcomeStateError
from ordertrack.types import T, U


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of an operation: either a value or a non-empty error message.

    Use the ``success``/``failure`` factories rather than the constructor.
    A success never carries an error and a failure always carries one;
    reading ``value`` from a failure raises InvalidOutcomeStateError.

    Attributes:
        is_success: Whether the operation succeeded
        error: Error message ("" on success)

    Example:
        >>> outcome = Outcome.success(2).map(lambda x: x * 10)
        >>> outcome.value
        20
        >>> failed = Outcome.failure("Customer not found").map(lambda x: x * 10)
        >>> failed.error
        'Customer not found'
    """

    is_success: bool
    _value: T | None = field(default=None, repr=False)
    error: str = ""

    def __post_init__(self) -> None:
        """Validate the success/error pairing."""
        if self.is_success and self.error:
            raise InvalidOutcomeStateError("Success outcome cannot have an error message")
        if not self.is_success and not self.error:
            raise InvalidOutcomeStateError("Failure outcome must have an error message")

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        """Create a successful outcome carrying value."""
        return cls(is_success=True, _value=value)

    @classmethod
    def failure(cls, error: str) -> "Outcome[T]":
        """Create a failed outcome; error must be non-empty."""
        return cls(is_success=False, error=error)

    @classmethod
    def combine(cls, *outcomes: "Outcome[Any]") -> "Outcome[None]":
        """
        Merge several outcomes into one.

        Succeeds when every input succeeded; otherwise fails with all
        error messages joined by ``"; "`` in input order.
        """
        errors = [outcome.error for outcome in outcomes if outcome.is_failure]
        if errors:
            return Outcome.failure("; ".join(errors))
        return Outcome.success(None)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        """
        The success value.

        Raises:
            InvalidOutcomeStateError: If this outcome is a failure
        """
        if not self.is_success:
            raise InvalidOutcomeStateError("Cannot access value of a failure outcome")
        return cast(T, self._value)

    def map(self, mapper: Callable[[T], U]) -> "Outcome[U]":
        """Transform the value of a success; a failure passes through untouched."""
        if self.is_failure:
            return Outcome.failure(self.error)
        return Outcome.success(mapper(self.value))

    async def map_async(self, mapper: Callable[[T], Awaitable[U]]) -> "Outcome[U]":
        """Like :meth:`map` with an async mapper."""
        if self.is_failure:
            return Outcome.failure(self.error)
        return Outcome.success(await mapper(self.value))

    def bind(self, func: Callable[[T], "Outcome[U]"]) -> "Outcome[U]":
        """Chain an operation that itself returns an Outcome."""
        if self.is_failure:
            return Outcome.failure(self.error)
        return func(self.value)

    async def bind_async(self, func: Callable[[T], Awaitable["Outcome[U]"]]) -> "Outcome[U]":
        """Like :meth:`bind` with an async function."""
        if self.is_failure:
            return Outcome.failure(self.error)
        return await func(self.value)

    def ensure(self, predicate: Callable[[T], bool], error: str) -> "Outcome[T]":
        """Turn a success into a failure with error when predicate rejects its value."""
        if self.is_failure:
            return self
        return self if predicate(self.value) else Outcome.failure(error)

    def get_value_or_default(self, default: T | None = None) -> T | None:
        """Return the value on success, default otherwise."""
        return self.value if self.is_success else default

    def __repr__(self) -> str:
        if self.is_success:
            return f"Outcome.success({self._value!r})"
        return f"Outcome.failure({self.error!r})"


__all__ = ["Outcome"]
