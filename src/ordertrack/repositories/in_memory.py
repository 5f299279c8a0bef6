"""
In-memory implementation of the customer and order repositories.

Provides simple, fast repositories for testing and development. All data
is stored in memory and lost when the process terminates.
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from ordertrack.aggregates.customer import Customer
from ordertrack.aggregates.order import Order
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.exceptions import InfrastructureError
from ordertrack.observability import Tracer, create_tracer
from ordertrack.observability.attributes import (
    ATTR_CUSTOMER_ID,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
    ATTR_QUERY_LIMIT,
    ATTR_QUERY_OFFSET,
    ATTR_RESULT_COUNT,
)
from ordertrack.repositories.interface import (
    DEFAULT_SEARCH_LIMIT,
    CustomerFilters,
    validate_page,
)
from ordertrack.values.email import EmailAddress
from ordertrack.values.identifiers import CustomerId, OrderId

logger = logging.getLogger(__name__)


class InMemoryCustomerRepository:
    """
    In-memory implementation of CustomerRepository.

    Customers are kept as ``to_dict()`` snapshots keyed by UUID and
    rebuilt on every read, so callers never share state with the store.
    Guarded by an asyncio.Lock.

    Example:
        >>> repo = InMemoryCustomerRepository()
        >>> await repo.save(customer)
        >>> loaded = await repo.find_by_id(customer.id)
        >>> assert loaded == customer and loaded is not customer

    Note:
        - Use `clear()` method for test teardown
        - Search performance is O(n) - acceptable for testing but not production
    """

    def __init__(
        self,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the in-memory repository.

        Args:
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._customers: dict[UUID, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(
        self,
        customer_id: CustomerId,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        check_cancelled(cancellation, "customer_repository.find_by_id")
        with self._tracer.span(
            "ordertrack.customer_repository.find_by_id",
            {ATTR_CUSTOMER_ID: str(customer_id)},
        ):
            async with self._lock:
                snapshot = self._customers.get(customer_id.value)
                return Customer.from_dict(snapshot) if snapshot else None

    async def find_by_email(
        self,
        email: EmailAddress,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        check_cancelled(cancellation, "customer_repository.find_by_email")
        with self._tracer.span("ordertrack.customer_repository.find_by_email"):
            async with self._lock:
                for snapshot in self._customers.values():
                    if snapshot["email"] == email.value:
                        return Customer.from_dict(snapshot)
                return None

    async def save(
        self,
        customer: Customer,
        cancellation: CancellationToken | None = None,
    ) -> Customer:
        """
        Save or update a customer (upsert by id).

        Raises:
            InfrastructureError: If a different customer already uses the email
        """
        check_cancelled(cancellation, "customer_repository.save")
        with self._tracer.span(
            "ordertrack.customer_repository.save",
            {ATTR_CUSTOMER_ID: str(customer.id)},
        ):
            async with self._lock:
                snapshot = customer.to_dict()
                for existing_id, existing in self._customers.items():
                    if existing_id != customer.id.value and existing["email"] == snapshot["email"]:
                        raise InfrastructureError(
                            f"Customer with email {snapshot['email']} already exists"
                        )
                self._customers[customer.id.value] = snapshot
                logger.debug(
                    "Saved customer %s",
                    customer.id,
                    extra={"customer_id": str(customer.id)},
                )
                return customer

    async def list_all(
        self,
        cancellation: CancellationToken | None = None,
    ) -> list[Customer]:
        check_cancelled(cancellation, "customer_repository.list_all")
        with self._tracer.span("ordertrack.customer_repository.list_all") as span:
            async with self._lock:
                customers = self._sorted_by_name(self._customers.values())
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(customers))
            return customers

    async def search(
        self,
        filters: CustomerFilters,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        cancellation: CancellationToken | None = None,
    ) -> list[Customer]:
        """Return one page of matching customers, ordered by name."""
        check_cancelled(cancellation, "customer_repository.search")
        validate_page(limit, offset)
        with self._tracer.span(
            "ordertrack.customer_repository.search",
            {ATTR_QUERY_LIMIT: limit, ATTR_QUERY_OFFSET: offset},
        ) as span:
            async with self._lock:
                customers = self._sorted_by_name(self._customers.values())
            matching = [customer for customer in customers if filters.matches(customer)]
            page = matching[offset : offset + limit]
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(page))
            return page

    @staticmethod
    def _sorted_by_name(snapshots: Any) -> list[Customer]:
        customers = [Customer.from_dict(snapshot) for snapshot in snapshots]
        return sorted(customers, key=lambda customer: (customer.name, str(customer.id)))

    async def clear(self) -> None:
        """Remove all customers. Useful for test teardown."""
        async with self._lock:
            self._customers.clear()

    def __len__(self) -> int:
        return len(self._customers)


class InMemoryOrderRepository:
    """
    In-memory implementation of OrderRepository.

    Orders are kept as ``to_dict()`` snapshots keyed by UUID and rebuilt
    on every read. Listings are newest first by ``created_at``.
    """

    def __init__(
        self,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._orders: dict[UUID, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(
        self,
        order_id: OrderId,
        cancellation: CancellationToken | None = None,
    ) -> Order | None:
        check_cancelled(cancellation, "order_repository.find_by_id")
        with self._tracer.span(
            "ordertrack.order_repository.find_by_id",
            {ATTR_ORDER_ID: str(order_id)},
        ):
            async with self._lock:
                snapshot = self._orders.get(order_id.value)
                return Order.from_dict(snapshot) if snapshot else None

    async def save(
        self,
        order: Order,
        cancellation: CancellationToken | None = None,
    ) -> Order:
        """Save or update an order (upsert by id)."""
        check_cancelled(cancellation, "order_repository.save")
        with self._tracer.span(
            "ordertrack.order_repository.save",
            {
                ATTR_ORDER_ID: str(order.id),
                ATTR_ORDER_STATUS: order.status.value,
            },
        ):
            async with self._lock:
                self._orders[order.id.value] = order.to_dict()
                logger.debug(
                    "Saved order %s (%s)",
                    order.id,
                    order.status.value,
                    extra={"order_id": str(order.id), "status": order.status.value},
                )
                return order

    async def find_by_customer(
        self,
        customer_id: CustomerId,
        cancellation: CancellationToken | None = None,
    ) -> list[Order]:
        check_cancelled(cancellation, "order_repository.find_by_customer")
        with self._tracer.span(
            "ordertrack.order_repository.find_by_customer",
            {ATTR_CUSTOMER_ID: str(customer_id)},
        ) as span:
            async with self._lock:
                snapshots = [
                    snapshot
                    for snapshot in self._orders.values()
                    if snapshot["customer_id"] == str(customer_id)
                ]
                orders = self._newest_first(snapshots)
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(orders))
            return orders

    async def list_all(
        self,
        cancellation: CancellationToken | None = None,
    ) -> list[Order]:
        check_cancelled(cancellation, "order_repository.list_all")
        with self._tracer.span("ordertrack.order_repository.list_all") as span:
            async with self._lock:
                orders = self._newest_first(self._orders.values())
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(orders))
            return orders

    @staticmethod
    def _newest_first(snapshots: Any) -> list[Order]:
        orders = [Order.from_dict(snapshot) for snapshot in snapshots]
        return sorted(orders, key=lambda order: order.created_at, reverse=True)

    async def clear(self) -> None:
        """Remove all orders. Useful for test teardown."""
        async with self._lock:
            self._orders.clear()

    def __len__(self) -> int:
        return len(self._orders)


__all__ = [
    "InMemoryCustomerRepository",
    "InMemoryOrderRepository",
]
