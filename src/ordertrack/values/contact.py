"""Contact value types owned by the Customer aggregate: postal address and phone."""

import re
from dataclasses import dataclass
from typing import Any

from ordertrack.values.base import Problem, TryCreate, raise_for

_NON_DIGITS = re.compile(r"\D")


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _address_problem(
    street: Any, city: Any, state: Any, postal_code: Any, country: Any
) -> Problem | None:
    for field, label, value in (
        ("street", "Street", street),
        ("city", "City", city),
        ("state", "State", state),
        ("postal_code", "Postal code", postal_code),
        ("country", "Country", country),
    ):
        if _blank(value):
            return (field, f"{label} cannot be empty")
    if len(postal_code.strip()) < 3:
        return ("postal_code", "Postal code too short")
    return None


@dataclass(frozen=True)
class Address:
    """
    Physical postal address. All parts are trimmed on construction.

    Example:
        >>> Address("1 Main St", "Springfield", "IL", "62701", "USA").full_address
        '1 Main St\\nSpringfield, IL 62701\\nUSA'
    """

    street: str
    city: str
    state: str
    postal_code: str
    country: str
    apartment: str | None = None

    def __post_init__(self) -> None:
        raise_for(
            _address_problem(self.street, self.city, self.state, self.postal_code, self.country)
        )
        for name in ("street", "city", "state", "postal_code", "country"):
            object.__setattr__(self, name, getattr(self, name).strip())
        if self.apartment is not None:
            object.__setattr__(self, "apartment", self.apartment.strip() or None)

    @classmethod
    def try_create(
        cls,
        street: str,
        city: str,
        state: str,
        postal_code: str,
        country: str,
        apartment: str | None = None,
    ) -> TryCreate["Address"]:
        """Build an Address without raising; see :class:`TryCreate`."""
        problem = _address_problem(street, city, state, postal_code, country)
        if problem is not None:
            return TryCreate.failed(problem)
        return TryCreate.succeeded(cls(street, city, state, postal_code, country, apartment))

    @property
    def full_address(self) -> str:
        lines = [self.street]
        if self.apartment:
            lines.append(f"Apt {self.apartment}")
        lines.append(f"{self.city}, {self.state} {self.postal_code}")
        lines.append(self.country)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, str | None]:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "apartment": self.apartment,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Address":
        return cls(
            street=data["street"],
            city=data["city"],
            state=data["state"],
            postal_code=data["postal_code"],
            country=data["country"],
            apartment=data.get("apartment"),
        )

    def __str__(self) -> str:
        return self.full_address


def _phone_problem(value: Any, country_code: Any) -> Problem | None:
    if _blank(value):
        return ("phone", "Phone number cannot be empty")
    if _blank(country_code):
        return ("country_code", "Country code cannot be empty")
    if not country_code.strip().startswith("+"):
        return ("country_code", "Country code must start with +")
    if not _NON_DIGITS.sub("", country_code):
        return ("country_code", "Country code must contain digits")
    digits = _NON_DIGITS.sub("", value)
    if len(digits) < 10:
        return ("phone", "Phone number must have at least 10 digits")
    if len(digits) > 15:
        return ("phone", "Phone number cannot have more than 15 digits")
    return None


@dataclass(frozen=True)
class PhoneNumber:
    """
    Phone number with international country code (default ``+1``).

    The number may contain separators; 10 to 15 digits are required.
    """

    value: str
    country_code: str = "+1"

    def __post_init__(self) -> None:
        raise_for(_phone_problem(self.value, self.country_code))
        object.__setattr__(self, "value", self.value.strip())
        object.__setattr__(self, "country_code", self.country_code.strip())

    @classmethod
    def try_create(cls, value: str, country_code: str = "+1") -> TryCreate["PhoneNumber"]:
        """Build a PhoneNumber without raising; see :class:`TryCreate`."""
        problem = _phone_problem(value, country_code)
        if problem is not None:
            return TryCreate.failed(problem)
        return TryCreate.succeeded(cls(value, country_code))

    @property
    def digits_only(self) -> str:
        return _NON_DIGITS.sub("", self.value)

    @property
    def formatted(self) -> str:
        """``(xxx) xxx-xxxx`` for ten-digit +1 numbers, ``"{code} {value}"`` otherwise."""
        digits = self.digits_only
        if len(digits) == 10 and self.country_code == "+1":
            return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
        return f"{self.country_code} {self.value}"

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value, "country_code": self.country_code}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhoneNumber":
        return cls(value=data["value"], country_code=data.get("country_code", "+1"))

    def __str__(self) -> str:
        return self.formatted


__all__ = [
    "Address",
    "PhoneNumber",
]
