"""Self-validating value types for the ordertrack library."""

from ordertrack.values.base import TryCreate
from ordertrack.values.contact import Address, PhoneNumber
from ordertrack.values.email import EmailAddress
from ordertrack.values.identifiers import CustomerId, EntityId, OrderId
from ordertrack.values.money import AmountLike, Money
from ordertrack.values.status import OrderStatus

__all__ = [
    "Address",
    "AmountLike",
    "CustomerId",
    "EmailAddress",
    "EntityId",
    "Money",
    "OrderId",
    "OrderStatus",
    "PhoneNumber",
    "TryCreate",
]
