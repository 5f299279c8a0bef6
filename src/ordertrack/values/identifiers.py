"""Strongly typed identifiers wrapping a UUID."""

from dataclasses import dataclass
from typing import Any, ClassVar, Self
from uuid import UUID, uuid4

from ordertrack.values.base import Problem, TryCreate, raise_for


@dataclass(frozen=True)
class EntityId:
    """
    Opaque identifier wrapping a 128-bit UUID.

    Subclasses set ``label`` for error messages. Identifiers of different
    subclasses never compare equal, even when they wrap the same UUID.
    Strings in canonical UUID form are accepted and parsed.

    Attributes:
        value: The wrapped UUID (never the nil UUID)
    """

    label: ClassVar[str] = "Entity"

    value: UUID

    def __post_init__(self) -> None:
        raise_for(self._problem(self.value))
        if not isinstance(self.value, UUID):
            object.__setattr__(self, "value", UUID(str(self.value)))

    @classmethod
    def _problem(cls, value: Any) -> Problem | None:
        field = f"{cls.label.lower()}_id"
        if isinstance(value, str):
            try:
                value = UUID(value)
            except ValueError:
                return (field, f"Invalid {cls.label.lower()} ID: {value}")
        if not isinstance(value, UUID):
            return (field, f"Invalid {cls.label.lower()} ID: {value!r}")
        if value.int == 0:
            return (field, f"{cls.label} ID cannot be empty")
        return None

    @classmethod
    def new(cls) -> Self:
        """Generate a fresh, globally unique identifier."""
        return cls(uuid4())

    @classmethod
    def try_create(cls, value: UUID | str) -> TryCreate[Self]:
        """Build an identifier without raising; see :class:`TryCreate`."""
        problem = cls._problem(value)
        if problem is not None:
            return TryCreate.failed(problem)
        return TryCreate.succeeded(cls(value))  # type: ignore[arg-type]

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse the canonical form produced by ``str()``."""
        return cls(text)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class CustomerId(EntityId):
    """Identifier of a Customer aggregate."""

    label: ClassVar[str] = "Customer"


@dataclass(frozen=True)
class OrderId(EntityId):
    """Identifier of an Order aggregate."""

    label: ClassVar[str] = "Order"


__all__ = [
    "CustomerId",
    "EntityId",
    "OrderId",
]
