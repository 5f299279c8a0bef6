"""Domain events recorded by the Customer and Order aggregates."""

from ordertrack.events.base import DomainEvent
from ordertrack.events.customer import CustomerCreated, CustomerDeactivated
from ordertrack.events.order import OrderCancelled, OrderCreated, OrderStatusChanged

__all__ = [
    "CustomerCreated",
    "CustomerDeactivated",
    "DomainEvent",
    "OrderCancelled",
    "OrderCreated",
    "OrderStatusChanged",
]
