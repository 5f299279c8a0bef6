"""Order lifecycle states."""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Closed set of order states.

    ``Pending -> Confirmed -> Shipped -> Delivered``, with ``Cancelled``
    reachable from ``Pending`` or ``Confirmed``. Values are the display
    names used in business-rule messages.
    """

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible from this state."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def __str__(self) -> str:
        return self.value


__all__ = ["OrderStatus"]
