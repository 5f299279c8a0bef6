"""Events recorded by the Customer aggregate."""

from uuid import UUID

from pydantic import Field

from ordertrack.events.base import DomainEvent


class CustomerCreated(DomainEvent):
    """A customer record was created."""

    aggregate_type: str = "Customer"

    customer_id: UUID
    customer_name: str
    customer_email: str


class CustomerDeactivated(DomainEvent):
    """A customer was deactivated; deactivation is terminal."""

    aggregate_type: str = "Customer"

    customer_id: UUID
    reason: str = Field(..., min_length=1)


__all__ = [
    "CustomerCreated",
    "CustomerDeactivated",
]
