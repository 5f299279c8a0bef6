"""
Order aggregate and its status state machine.

    Pending -> Confirmed -> Shipped -> Delivered
    Pending | Confirmed -> Cancelled

Every successful transition bumps ``updated_at`` and records exactly one
event. An illegal transition raises :class:`BusinessRuleViolation` naming
the rule and the current status, and leaves the order untouched.
"""

from datetime import datetime
from typing import Any

from ordertrack.aggregates.base import EventRecorder, identity_equality, parse_timestamp, utcnow
from ordertrack.events.base import DomainEvent
from ordertrack.events.order import OrderCancelled, OrderCreated, OrderStatusChanged
from ordertrack.exceptions import BusinessRuleViolation
from ordertrack.types import AttributeMap, ensure_attribute_map
from ordertrack.values.identifiers import CustomerId, OrderId
from ordertrack.values.money import Money
from ordertrack.values.status import OrderStatus

DEFAULT_CANCELLATION_REASON = "Customer request"

_CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})

# operation -> (required status, next status, rule name, message template)
_TRANSITIONS: dict[str, tuple[OrderStatus, OrderStatus, str, str]] = {
    "confirm": (
        OrderStatus.PENDING,
        OrderStatus.CONFIRMED,
        "OrderConfirmationRule",
        "Only pending orders can be confirmed. Current status: {status}",
    ),
    "ship": (
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        "OrderShippingRule",
        "Only confirmed orders can be shipped. Current status: {status}",
    ),
    "deliver": (
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        "OrderDeliveryRule",
        "Only shipped orders can be delivered. Current status: {status}",
    ),
}


@identity_equality()
class Order:
    """
    Order aggregate root.

    Invariant: ``total_amount.amount > 0`` (rule ``MinimumOrderAmount``),
    enforced by the constructor so it also holds for orders rebuilt
    from storage.

    Example:
        >>> order = Order.create(OrderId.new(), customer_id, Money(100, "USD"))
        >>> order.confirm()
        >>> order.ship()
        >>> order.status
        <OrderStatus.SHIPPED: 'Shipped'>
        >>> len(order.pending_events)
        3
    """

    def __init__(
        self,
        id: OrderId,
        customer_id: CustomerId,
        total_amount: Money,
        status: OrderStatus = OrderStatus.PENDING,
        details: AttributeMap | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> None:
        if total_amount.amount <= 0:
            raise BusinessRuleViolation(
                "Order total amount must be greater than zero", "MinimumOrderAmount"
            )
        self._id = id
        self._customer_id = customer_id
        self._total_amount = total_amount
        self._status = OrderStatus(status)
        self._details = ensure_attribute_map(details, "details")
        self._created_at = created_at or utcnow()
        self._updated_at = updated_at or self._created_at
        self._events = EventRecorder()

    @classmethod
    def create(
        cls,
        id: OrderId,
        customer_id: CustomerId,
        total_amount: Money,
        details: AttributeMap | None = None,
    ) -> "Order":
        """
        Place a new Pending order and record ``OrderCreated``.

        Raises:
            BusinessRuleViolation: If the total amount is not positive
            ValidationError: If details are not serializable data
        """
        order = cls(id, customer_id, total_amount, OrderStatus.PENDING, details)
        order._events.record(
            OrderCreated(
                aggregate_id=id.value,
                order_id=id.value,
                customer_id=customer_id.value,
                total_amount=total_amount.amount,
                currency=total_amount.currency,
            )
        )
        return order

    @property
    def id(self) -> OrderId:
        return self._id

    @property
    def customer_id(self) -> CustomerId:
        return self._customer_id

    @property
    def total_amount(self) -> Money:
        return self._total_amount

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def details(self) -> AttributeMap:
        """A copy of the detail map; mutating it does not affect the order."""
        return ensure_attribute_map(self._details, "details")

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def can_be_cancelled(self) -> bool:
        """Whether :meth:`cancel` would succeed. Never raises."""
        return self._status in _CANCELLABLE

    def confirm(self) -> None:
        """Pending -> Confirmed."""
        self._advance("confirm")

    def ship(self) -> None:
        """Confirmed -> Shipped."""
        self._advance("ship")

    def deliver(self) -> None:
        """Shipped -> Delivered."""
        self._advance("deliver")

    def cancel(self, reason: str = DEFAULT_CANCELLATION_REASON) -> None:
        """
        Cancel a Pending or Confirmed order and record ``OrderCancelled``.

        Raises:
            BusinessRuleViolation: If the order is Shipped, Delivered or
                already Cancelled (rule ``OrderCancellationRule``)
        """
        if not self.can_be_cancelled():
            raise BusinessRuleViolation(
                f"Order in {self._status.value} status cannot be cancelled",
                "OrderCancellationRule",
            )
        previous = self._status
        self._status = OrderStatus.CANCELLED
        self._updated_at = utcnow()
        self._events.record(
            OrderCancelled(
                aggregate_id=self._id.value,
                order_id=self._id.value,
                customer_id=self._customer_id.value,
                previous_status=previous,
                reason=reason or DEFAULT_CANCELLATION_REASON,
            )
        )

    def _advance(self, operation: str) -> None:
        required, target, rule, template = _TRANSITIONS[operation]
        if self._status is not required:
            raise BusinessRuleViolation(template.format(status=self._status.value), rule)
        previous = self._status
        self._status = target
        self._updated_at = utcnow()
        self._events.record(
            OrderStatusChanged(
                aggregate_id=self._id.value,
                order_id=self._id.value,
                customer_id=self._customer_id.value,
                old_status=previous,
                new_status=target,
            )
        )

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return self._events.pending_events

    @property
    def has_pending_events(self) -> bool:
        return self._events.has_pending_events

    def drain_events(self) -> list[DomainEvent]:
        """Hand over every pending event, oldest first, and clear them."""
        return self._events.drain_events()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary. The amount is kept as an exact string."""
        return {
            "id": str(self._id),
            "customer_id": str(self._customer_id),
            "total_amount": str(self._total_amount.amount),
            "currency": self._total_amount.currency,
            "status": self._status.value,
            "details": self.details,
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """Rebuild an order from :meth:`to_dict` output, re-checking every invariant."""
        return cls(
            OrderId(data["id"]),
            CustomerId(data["customer_id"]),
            Money(data["total_amount"], data["currency"]),
            status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
            details=data.get("details"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    def __repr__(self) -> str:
        return (
            f"Order(id={self._id}, customer_id={self._customer_id}, "
            f"total_amount={self._total_amount}, status={self._status.value})"
        )


__all__ = [
    "DEFAULT_CANCELLATION_REASON",
    "Order",
]
