"""
Repository contracts consumed by the handlers.

Implementations own storage lifetime. Every method is async, accepts an
optional :class:`~ordertrack.cancellation.CancellationToken` checked on
entry, and wraps driver failures in
:class:`~ordertrack.exceptions.InfrastructureError`.

``save`` is an idempotent upsert by identity: saving the same aggregate
twice leaves one record. Implementations store a snapshot, so an
aggregate returned by a ``find_*`` call never shares state with the
store or with other loaded copies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ordertrack.exceptions import ValidationError

if TYPE_CHECKING:
    from ordertrack.aggregates.customer import Customer
    from ordertrack.aggregates.order import Order
    from ordertrack.cancellation import CancellationToken
    from ordertrack.values.email import EmailAddress
    from ordertrack.values.identifiers import CustomerId, OrderId

DEFAULT_SEARCH_LIMIT = 50


@dataclass(frozen=True)
class CustomerFilters:
    """
    Criteria for :meth:`CustomerRepository.search`.

    Unset criteria match everything. Substring criteria are
    case-insensitive.

    Attributes:
        name_contains: Substring the customer name must contain
        email_contains: Substring the email address must contain
        is_active: Required active flag
    """

    name_contains: str | None = None
    email_contains: str | None = None
    is_active: bool | None = None

    def matches(self, customer: Customer) -> bool:
        """Check a customer against every set criterion."""
        if self.name_contains and self.name_contains.lower() not in customer.name.lower():
            return False
        if self.email_contains and self.email_contains.lower() not in customer.email.value:
            return False
        if self.is_active is not None and customer.is_active is not self.is_active:
            return False
        return True


def validate_page(limit: int, offset: int, max_limit: int | None = None) -> None:
    """
    Check search paging bounds.

    Raises:
        ValidationError: If limit is below 1 or above max_limit, or
            offset is negative
    """
    if max_limit is not None and not 1 <= limit <= max_limit:
        raise ValidationError("limit", f"Limit must be between 1 and {max_limit}")
    if limit < 1:
        raise ValidationError("limit", "Limit must be at least 1")
    if offset < 0:
        raise ValidationError("offset", "Offset cannot be negative")


@runtime_checkable
class CustomerRepository(Protocol):
    """
    Persistence contract for Customer aggregates.

    Example:
        >>> repo: CustomerRepository = InMemoryCustomerRepository()
        >>> await repo.save(customer)
        >>> loaded = await repo.find_by_email(EmailAddress("ada@example.com"))
    """

    async def find_by_id(
        self,
        customer_id: CustomerId,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        """Return the customer with this id, or None."""
        ...

    async def find_by_email(
        self,
        email: EmailAddress,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        """Return the customer with this (normalized) email, or None."""
        ...

    async def save(
        self,
        customer: Customer,
        cancellation: CancellationToken | None = None,
    ) -> Customer:
        """
        Insert or update the customer by id.

        Raises:
            InfrastructureError: If another customer already has this email,
                or the store fails
        """
        ...

    async def list_all(
        self,
        cancellation: CancellationToken | None = None,
    ) -> list[Customer]:
        """Return every customer ordered by name."""
        ...

    async def search(
        self,
        filters: CustomerFilters,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        cancellation: CancellationToken | None = None,
    ) -> list[Customer]:
        """
        Return one page of customers matching filters, ordered by name.

        Raises:
            ValidationError: If limit < 1 or offset < 0
        """
        ...


@runtime_checkable
class OrderRepository(Protocol):
    """Persistence contract for Order aggregates."""

    async def find_by_id(
        self,
        order_id: OrderId,
        cancellation: CancellationToken | None = None,
    ) -> Order | None:
        """Return the order with this id, or None."""
        ...

    async def save(
        self,
        order: Order,
        cancellation: CancellationToken | None = None,
    ) -> Order:
        """Insert or update the order by id."""
        ...

    async def find_by_customer(
        self,
        customer_id: CustomerId,
        cancellation: CancellationToken | None = None,
    ) -> list[Order]:
        """Return the customer's orders, newest first."""
        ...

    async def list_all(
        self,
        cancellation: CancellationToken | None = None,
    ) -> list[Order]:
        """Return every order, newest first."""
        ...


__all__ = [
    "DEFAULT_SEARCH_LIMIT",
    "CustomerFilters",
    "CustomerRepository",
    "OrderRepository",
    "validate_page",
]
