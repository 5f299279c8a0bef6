"""
Base class for domain events.

Events are immutable records of notable state changes. Aggregates record
them while they mutate; a handler drains them after a successful persist
and hands them to an external publisher.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DomainEvent(BaseModel):
    """
    Base class for all domain events with automatic event_type derivation.

    The event_type field defaults to the class name, so concrete events
    only declare their payload. Subclasses set ``aggregate_type`` as a
    class-level default.

    Attributes:
        event_id: Unique identifier for this event instance
        event_type: Type name of the event (the class name)
        occurred_at: When the event was created (UTC)
        aggregate_id: ID of the aggregate that recorded the event
        aggregate_type: Type of aggregate ('Customer' or 'Order')

    Example:
        >>> class OrderCreated(DomainEvent):
        ...     aggregate_type: str = "Order"
        ...     order_id: UUID
        ...
        >>> order_id = uuid4()
        >>> event = OrderCreated(aggregate_id=order_id, order_id=order_id)
        >>> assert event.event_type == "OrderCreated"
    """

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier",
    )
    event_type: str = Field(
        default="",
        description="Type of event (auto-derived from class name if not set)",
    )
    occurred_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When event occurred (UTC)",
    )
    aggregate_id: UUID = Field(
        ...,
        description="ID of the aggregate this event belongs to",
    )
    aggregate_type: str = Field(
        ...,
        description="Type of aggregate (e.g., 'Order')",
    )

    @model_validator(mode="before")
    @classmethod
    def _ensure_event_type(cls, data: Any) -> Any:
        """Fill event_type with the class name when it is missing."""
        if isinstance(data, dict) and not data.get("event_type"):
            data = {**data, "event_type": cls.__name__}
        return data

    def to_dict(self) -> dict[str, Any]:
        """
        Convert event to a JSON-compatible dictionary.

        UUIDs, datetimes and Decimals become strings.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create event from dictionary.

        Raises:
            pydantic.ValidationError: If data doesn't match event schema
        """
        return cls.model_validate(data)

    def __str__(self) -> str:
        return f"{self.event_type}(event_id={self.event_id}, aggregate_id={self.aggregate_id})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"event_id={self.event_id!r}, "
            f"event_type={self.event_type!r}, "
            f"aggregate_id={self.aggregate_id!r}, "
            f"aggregate_type={self.aggregate_type!r}, "
            f"occurred_at={self.occurred_at!r})"
        )


__all__ = ["DomainEvent"]
