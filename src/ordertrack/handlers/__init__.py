"""
Command and query handlers.

Every handler is a class with
``async handle(request, cancellation=None) -> Outcome[T]``.

Example:
    >>> customers = InMemoryCustomerRepository()
    >>> orders = InMemoryOrderRepository()
    >>> bus = InMemoryEventBus()
    >>> created = await CreateCustomerHandler(customers, bus).handle(
    ...     CreateCustomerCommand(name="Ada", email="ada@example.com")
    ... )
    >>> order = await CreateOrderHandler(customers, orders, bus).handle(
    ...     CreateOrderCommand(customer_id=str(created.value.id), total_amount="150.00")
    ... )
"""

from ordertrack.handlers.base import BaseHandler, handler_boundary, not_found
from ordertrack.handlers.customers import CreateCustomerHandler, DeactivateCustomerHandler
from ordertrack.handlers.orders import (
    CancelOrderHandler,
    ConfirmOrderHandler,
    CreateOrderHandler,
    DeliverOrderHandler,
    ShipOrderHandler,
)
from ordertrack.handlers.queries import (
    GetCustomerHandler,
    GetCustomerOrdersHandler,
    GetOrderHandler,
    ListCustomersHandler,
    ListOrdersHandler,
    SearchCustomersHandler,
)
from ordertrack.handlers.requests import (
    CancelOrderCommand,
    ConfirmOrderCommand,
    CreateCustomerCommand,
    CreateOrderCommand,
    DeactivateCustomerCommand,
    DeliverOrderCommand,
    GetCustomerOrdersQuery,
    GetCustomerQuery,
    GetOrderQuery,
    ListCustomersQuery,
    ListOrdersQuery,
    SearchCustomersQuery,
    ShipOrderCommand,
)

__all__ = [
    # Boundary
    "BaseHandler",
    "handler_boundary",
    "not_found",
    # Commands
    "CancelOrderCommand",
    "ConfirmOrderCommand",
    "CreateCustomerCommand",
    "CreateOrderCommand",
    "DeactivateCustomerCommand",
    "DeliverOrderCommand",
    "ShipOrderCommand",
    # Queries
    "GetCustomerOrdersQuery",
    "GetCustomerQuery",
    "GetOrderQuery",
    "ListCustomersQuery",
    "ListOrdersQuery",
    "SearchCustomersQuery",
    # Handlers
    "CancelOrderHandler",
    "ConfirmOrderHandler",
    "CreateCustomerHandler",
    "CreateOrderHandler",
    "DeactivateCustomerHandler",
    "DeliverOrderHandler",
    "GetCustomerHandler",
    "GetCustomerOrdersHandler",
    "GetOrderHandler",
    "ListCustomersHandler",
    "ListOrdersHandler",
    "SearchCustomersHandler",
    "ShipOrderHandler",
]
