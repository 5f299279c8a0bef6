"""Query handlers. None of them mutate state or publish events."""

import logging

from ordertrack.aggregates.customer import Customer
from ordertrack.aggregates.order import Order
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.config import OrderTrackConfig
from ordertrack.exceptions import ValidationError
from ordertrack.handlers.base import BaseHandler, handler_boundary, not_found
from ordertrack.handlers.requests import (
    GetCustomerOrdersQuery,
    GetCustomerQuery,
    GetOrderQuery,
    ListCustomersQuery,
    ListOrdersQuery,
    SearchCustomersQuery,
)
from ordertrack.observability import Tracer
from ordertrack.outcome import Outcome
from ordertrack.repositories.interface import (
    CustomerFilters,
    CustomerRepository,
    OrderRepository,
    validate_page,
)
from ordertrack.values.identifiers import CustomerId, OrderId

logger = logging.getLogger(__name__)


class _CustomerQueryHandler(BaseHandler):
    def __init__(
        self,
        customers: CustomerRepository,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(None, tracer, enable_tracing)
        self._customers = customers


class _OrderQueryHandler(BaseHandler):
    def __init__(
        self,
        orders: OrderRepository,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(None, tracer, enable_tracing)
        self._orders = orders


class GetCustomerHandler(_CustomerQueryHandler):
    @handler_boundary("Error retrieving customer")
    async def handle(
        self,
        query: GetCustomerQuery,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Customer]:
        ok, customer_id, error = CustomerId.try_create(query.customer_id)
        if not ok or customer_id is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "get customer")
        customer = await self._customers.find_by_id(customer_id, cancellation)
        if customer is None:
            return not_found("Customer", customer_id)

        logger.info("Retrieved customer %s", customer_id)
        return Outcome.success(customer)


class ListCustomersHandler(_CustomerQueryHandler):
    @handler_boundary("Error listing customers")
    async def handle(
        self,
        query: ListCustomersQuery | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[list[Customer]]:
        check_cancelled(cancellation, "list customers")
        customers = await self._customers.list_all(cancellation)
        logger.info("Retrieved %d customers", len(customers))
        return Outcome.success(customers)


class SearchCustomersHandler(_CustomerQueryHandler):
    """
    Paged, filtered customer search.

    ``limit`` defaults to ``config.default_search_limit`` and must lie in
    ``1..config.max_search_limit``; ``offset`` must not be negative.
    """

    def __init__(
        self,
        customers: CustomerRepository,
        config: OrderTrackConfig | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(customers, tracer, enable_tracing)
        self._config = config or OrderTrackConfig()

    @handler_boundary("Error searching customers")
    async def handle(
        self,
        query: SearchCustomersQuery,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[list[Customer]]:
        limit = query.limit if query.limit is not None else self._config.default_search_limit
        try:
            validate_page(limit, query.offset, self._config.max_search_limit)
        except ValidationError as e:
            return Outcome.failure(e.message)
        filters = CustomerFilters(
            name_contains=query.name_contains,
            email_contains=query.email_contains,
            is_active=query.is_active,
        )

        check_cancelled(cancellation, "search customers")
        customers = await self._customers.search(filters, limit, query.offset, cancellation)
        logger.info(
            "Customer search returned %d result(s)",
            len(customers),
            extra={"limit": limit, "offset": query.offset},
        )
        return Outcome.success(customers)


class GetOrderHandler(_OrderQueryHandler):
    @handler_boundary("Error retrieving order")
    async def handle(
        self,
        query: GetOrderQuery,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Order]:
        ok, order_id, error = OrderId.try_create(query.order_id)
        if not ok or order_id is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "get order")
        order = await self._orders.find_by_id(order_id, cancellation)
        if order is None:
            return not_found("Order", order_id)

        logger.info("Retrieved order %s", order_id)
        return Outcome.success(order)


class GetCustomerOrdersHandler(_OrderQueryHandler):
    """Orders of one customer, newest first. An unknown customer has no orders."""

    @handler_boundary("Error retrieving customer orders")
    async def handle(
        self,
        query: GetCustomerOrdersQuery,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[list[Order]]:
        ok, customer_id, error = CustomerId.try_create(query.customer_id)
        if not ok or customer_id is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "get customer orders")
        orders = await self._orders.find_by_customer(customer_id, cancellation)
        logger.info("Retrieved %d orders for customer %s", len(orders), customer_id)
        return Outcome.success(orders)


class ListOrdersHandler(_OrderQueryHandler):
    @handler_boundary("Error listing orders")
    async def handle(
        self,
        query: ListOrdersQuery | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[list[Order]]:
        check_cancelled(cancellation, "list orders")
        orders = await self._orders.list_all(cancellation)
        logger.info("Retrieved %d orders", len(orders))
        return Outcome.success(orders)


__all__ = [
    "GetCustomerHandler",
    "GetCustomerOrdersHandler",
    "GetOrderHandler",
    "ListCustomersHandler",
    "ListOrdersHandler",
    "SearchCustomersHandler",
]
