"""
Money value type: a non-negative decimal amount in a three-letter currency.

The stored amount keeps full precision. Only the display form produced by
``str()`` is rounded to two decimal places.
"""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from ordertrack.exceptions import (
    CurrencyMismatchError,
    NegativeFactorError,
    NegativeResultError,
    ValidationError,
)
from ordertrack.values.base import Problem, TryCreate, raise_for

_CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")
_CENT = Decimal("0.01")

AmountLike = Decimal | int | float | str


def _to_decimal(value: Any) -> Decimal | None:
    """Convert an amount-like value to Decimal, or None if it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None
    return result if result.is_finite() else None


def _money_problem(amount: Any, currency: Any) -> Problem | None:
    decimal_amount = _to_decimal(amount)
    if decimal_amount is None:
        return ("amount", f"Invalid amount: {amount}")
    if decimal_amount < 0:
        return ("amount", "Amount cannot be negative")
    if not isinstance(currency, str) or not currency.strip():
        return ("currency", "Currency cannot be empty")
    if not _CURRENCY_PATTERN.match(currency):
        return ("currency", f"Invalid currency code: {currency}")
    return None


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary amount with currency.

    Two Money values are equal when both amount and currency match.
    Lowercase currency codes are normalized to uppercase.

    Attributes:
        amount: Non-negative amount (full precision)
        currency: Three-letter uppercase currency code

    Example:
        >>> total = Money(100, "usd").add(Money("50", "USD"))
        >>> assert total == Money(150, "USD")
        >>> str(Money("1234.567", "USD"))
        '1234.57 USD'
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        raise_for(_money_problem(self.amount, self.currency))
        amount = _to_decimal(self.amount)
        assert amount is not None
        # "-0" is stored as plain zero
        object.__setattr__(self, "amount", amount.copy_abs() if amount == 0 else amount)
        object.__setattr__(self, "currency", self.currency.upper())

    @classmethod
    def try_create(cls, amount: AmountLike, currency: str) -> TryCreate["Money"]:
        """Build Money without raising; see :class:`TryCreate`."""
        problem = _money_problem(amount, currency)
        if problem is not None:
            return TryCreate.failed(problem)
        return TryCreate.succeeded(cls(amount, currency))  # type: ignore[arg-type]

    @classmethod
    def zero(cls, currency: str) -> "Money":
        """Return a zero amount in currency."""
        return cls(Decimal("0"), currency)

    @classmethod
    def parse(cls, text: str) -> "Money":
        """
        Parse the canonical ``"{amount} {CURRENCY}"`` form produced by ``str()``.

        Raises:
            ValidationError: If text is not in that form or holds invalid parts
        """
        parts = text.split() if isinstance(text, str) else []
        if len(parts) != 2:
            raise ValidationError("money", f"Invalid money format: {text}")
        return cls(parts[0], parts[1])  # type: ignore[arg-type]

    def add(self, other: "Money") -> "Money":
        """
        Add two amounts of the same currency.

        Raises:
            CurrencyMismatchError: If the currencies differ
        """
        if self.currency != other.currency:
            raise CurrencyMismatchError("add", self.currency, other.currency)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        """
        Subtract other from this amount.

        Raises:
            CurrencyMismatchError: If the currencies differ
            NegativeResultError: If other is larger than this amount
        """
        if self.currency != other.currency:
            raise CurrencyMismatchError("subtract", self.currency, other.currency)
        result = self.amount - other.amount
        if result < 0:
            raise NegativeResultError()
        return Money(result, self.currency)

    def multiply(self, factor: AmountLike) -> "Money":
        """
        Scale this amount by a non-negative factor.

        Raises:
            NegativeFactorError: If factor is negative
            ValidationError: If factor is not a number
        """
        decimal_factor = _to_decimal(factor)
        if decimal_factor is None:
            raise ValidationError("factor", f"Invalid factor: {factor}")
        if decimal_factor < 0:
            raise NegativeFactorError()
        return Money(self.amount * decimal_factor, self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: AmountLike) -> "Money":
        return self.multiply(factor)

    def __str__(self) -> str:
        with localcontext() as ctx:
            # quantize needs room for every integer digit plus the cents
            ctx.prec = max(ctx.prec, self.amount.adjusted() + 3)
            rounded = self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)
        return f"{rounded} {self.currency}"


__all__ = [
    "AmountLike",
    "Money",
]
