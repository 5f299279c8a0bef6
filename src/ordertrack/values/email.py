"""Email address value type, stored lowercase."""

import re
from dataclasses import dataclass
from typing import Any

from ordertrack.values.base import Problem, TryCreate, raise_for

_EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def _email_problem(value: Any) -> Problem | None:
    if not isinstance(value, str) or not value.strip():
        return ("email", "Email cannot be empty")
    invalid = ("email", f"Invalid email format: {value}")
    if not _EMAIL_PATTERN.match(value) or ".." in value:
        return invalid
    local_part, domain = value.split("@")
    if local_part.startswith(".") or local_part.endswith("."):
        return invalid
    if domain.startswith((".", "-")):
        return invalid
    return None


@dataclass(frozen=True)
class EmailAddress:
    """
    Immutable, validated email address.

    Accepts letters, digits and ``. _ % + -`` in the local part and a
    dotted domain whose last label has at least two letters. The value is
    lowercased, so equality is case-insensitive by construction.

    Attributes:
        value: The normalized (lowercase) address

    Example:
        >>> email = EmailAddress("User@EXAMPLE.COM")
        >>> email.value, email.local_part, email.domain
        ('user@example.com', 'user', 'example.com')
    """

    value: str

    def __post_init__(self) -> None:
        raise_for(_email_problem(self.value))
        object.__setattr__(self, "value", self.value.lower())

    @classmethod
    def try_create(cls, value: str) -> TryCreate["EmailAddress"]:
        """Build an EmailAddress without raising; see :class:`TryCreate`."""
        problem = _email_problem(value)
        if problem is not None:
            return TryCreate.failed(problem)
        return TryCreate.succeeded(cls(value))

    @classmethod
    def parse(cls, text: str) -> "EmailAddress":
        """Parse the canonical form produced by ``str()``."""
        return cls(text)

    @property
    def local_part(self) -> str:
        """The part before the ``@``."""
        return self.value.split("@")[0]

    @property
    def domain(self) -> str:
        """The part after the ``@``."""
        return self.value.split("@")[1]

    def __str__(self) -> str:
        return self.value


__all__ = ["EmailAddress"]
