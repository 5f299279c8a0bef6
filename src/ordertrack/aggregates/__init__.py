"""Customer and Order aggregates and the capabilities they share."""

from ordertrack.aggregates.base import EventRecorder, identity_equality
from ordertrack.aggregates.customer import Customer
from ordertrack.aggregates.order import Order

__all__ = [
    "Customer",
    "EventRecorder",
    "Order",
    "identity_equality",
]
