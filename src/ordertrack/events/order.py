"""Events recorded by the Order aggregate."""

from decimal import Decimal
from uuid import UUID

from ordertrack.events.base import DomainEvent
from ordertrack.values.status import OrderStatus


class OrderCreated(DomainEvent):
    """An order was placed and starts out Pending."""

    aggregate_type: str = "Order"

    order_id: UUID
    customer_id: UUID
    total_amount: Decimal
    currency: str


class OrderStatusChanged(DomainEvent):
    """An order moved forward through confirm, ship or deliver."""

    aggregate_type: str = "Order"

    order_id: UUID
    customer_id: UUID
    old_status: OrderStatus
    new_status: OrderStatus


class OrderCancelled(DomainEvent):
    """An order was cancelled from Pending or Confirmed."""

    aggregate_type: str = "Order"

    order_id: UUID
    customer_id: UUID
    previous_status: OrderStatus
    reason: str


__all__ = [
    "OrderCancelled",
    "OrderCreated",
    "OrderStatusChanged",
]
