"""Command handlers for the Order aggregate and its state machine."""

import logging
from typing import ClassVar

from ordertrack.aggregates.order import DEFAULT_CANCELLATION_REASON, Order
from ordertrack.bus.interface import EventPublisher
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.config import OrderTrackConfig
from ordertrack.handlers.base import BaseHandler, handler_boundary, not_found
from ordertrack.handlers.requests import (
    CancelOrderCommand,
    ConfirmOrderCommand,
    CreateOrderCommand,
    DeliverOrderCommand,
    ShipOrderCommand,
)
from ordertrack.observability import Tracer
from ordertrack.outcome import Outcome
from ordertrack.repositories.interface import CustomerRepository, OrderRepository
from ordertrack.values.identifiers import CustomerId, OrderId
from ordertrack.values.money import Money

logger = logging.getLogger(__name__)


class CreateOrderHandler(BaseHandler):
    """
    Place a Pending order for an existing, active customer.

    When the command leaves ``currency`` unset, the configured default
    currency is used.
    """

    def __init__(
        self,
        customers: CustomerRepository,
        orders: OrderRepository,
        publisher: EventPublisher | None = None,
        config: OrderTrackConfig | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(publisher, tracer, enable_tracing)
        self._customers = customers
        self._orders = orders
        self._config = config or OrderTrackConfig()

    @handler_boundary("Error creating order")
    async def handle(
        self,
        command: CreateOrderCommand,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Order]:
        ok, customer_id, error = CustomerId.try_create(command.customer_id)
        if not ok or customer_id is None:
            return Outcome.failure(error)

        currency = (
            command.currency
            if "currency" in command.model_fields_set
            else self._config.default_currency
        )
        ok, total_amount, error = Money.try_create(command.total_amount, currency)
        if not ok or total_amount is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "create order")
        customer = await self._customers.find_by_id(customer_id, cancellation)
        if customer is None:
            return not_found("Customer", customer_id)
        if not customer.is_active:
            logger.warning(
                "Rejected order for inactive customer %s",
                customer_id,
                extra={"customer_id": str(customer_id)},
            )
            return Outcome.failure("Cannot create order for inactive customer")

        order = Order.create(OrderId.new(), customer_id, total_amount, command.details)

        check_cancelled(cancellation, "create order")
        saved = await self._orders.save(order, cancellation)
        await self._publish_events(order)

        logger.info(
            "Created order %s for customer %s (%s)",
            order.id,
            customer_id,
            total_amount,
            extra={"order_id": str(order.id), "customer_id": str(customer_id)},
        )
        return Outcome.success(saved)


class _OrderTransitionHandler(BaseHandler):
    """Load an order, apply one state-machine operation, save and publish."""

    operation: ClassVar[str]

    def __init__(
        self,
        orders: OrderRepository,
        publisher: EventPublisher | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(publisher, tracer, enable_tracing)
        self._orders = orders

    def _apply(self, order: Order, command: object) -> None:
        getattr(order, self.operation)()

    @handler_boundary("Error updating order")
    async def handle(
        self,
        command: ConfirmOrderCommand | ShipOrderCommand | DeliverOrderCommand | CancelOrderCommand,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Order]:
        ok, order_id, error = OrderId.try_create(command.order_id)
        if not ok or order_id is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, f"{self.operation} order")
        order = await self._orders.find_by_id(order_id, cancellation)
        if order is None:
            return not_found("Order", order_id)

        previous = order.status
        self._apply(order, command)

        check_cancelled(cancellation, f"{self.operation} order")
        saved = await self._orders.save(order, cancellation)
        await self._publish_events(order)

        logger.info(
            "Order %s moved from %s to %s",
            order_id,
            previous.value,
            order.status.value,
            extra={
                "order_id": str(order_id),
                "old_status": previous.value,
                "new_status": order.status.value,
            },
        )
        return Outcome.success(saved)


class ConfirmOrderHandler(_OrderTransitionHandler):
    """Pending -> Confirmed."""

    operation = "confirm"


class ShipOrderHandler(_OrderTransitionHandler):
    """Confirmed -> Shipped."""

    operation = "ship"


class DeliverOrderHandler(_OrderTransitionHandler):
    """Shipped -> Delivered."""

    operation = "deliver"


class CancelOrderHandler(_OrderTransitionHandler):
    """Pending or Confirmed -> Cancelled, with a reason."""

    operation = "cancel"

    def _apply(self, order: Order, command: object) -> None:
        order.cancel(getattr(command, "reason", DEFAULT_CANCELLATION_REASON))


__all__ = [
    "CancelOrderHandler",
    "ConfirmOrderHandler",
    "CreateOrderHandler",
    "DeliverOrderHandler",
    "ShipOrderHandler",
]
