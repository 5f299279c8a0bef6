"""
Contract tests run against every repository implementation.

Each test receives a customer and an order repository from the
``repos`` fixture, parametrized over the in-memory and SQLite backends,
so both must behave identically.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

from ordertrack.aggregates import Customer, Order
from ordertrack.cancellation import CancellationToken
from ordertrack.config import OrderTrackConfig
from ordertrack.exceptions import InfrastructureError, OperationCancelledError, ValidationError
from ordertrack.repositories import (
    CustomerFilters,
    CustomerRepository,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    OrderRepository,
    SQLiteStore,
)
from ordertrack.values import (
    Address,
    CustomerId,
    EmailAddress,
    Money,
    OrderId,
    OrderStatus,
    PhoneNumber,
)


@dataclass
class Repos:
    customers: CustomerRepository
    orders: OrderRepository


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def repos(request: pytest.FixtureRequest) -> AsyncGenerator[Repos, None]:
    if request.param == "memory":
        yield Repos(
            InMemoryCustomerRepository(enable_tracing=False),
            InMemoryOrderRepository(enable_tracing=False),
        )
        return

    store = SQLiteStore(OrderTrackConfig(enable_tracing=False))
    await store.initialize()
    yield Repos(store.customers(), store.orders())
    await store.close()


def new_customer(name: str, email: str, **kwargs: object) -> Customer:
    return Customer.create(CustomerId.new(), name, EmailAddress(email), **kwargs)  # type: ignore[arg-type]


def new_order(
    customer_id: CustomerId,
    amount: str = "10.00",
    created_at: datetime | None = None,
) -> Order:
    return Order(
        OrderId.new(),
        customer_id,
        Money(Decimal(amount), "USD"),
        created_at=created_at,
    )


# =============================================================================
# Customers
# =============================================================================


class TestCustomerRepositoryContract:
    """Behaviour every CustomerRepository must provide."""

    @pytest.mark.asyncio
    async def test_implements_protocol(self, repos: Repos) -> None:
        assert isinstance(repos.customers, CustomerRepository)
        assert isinstance(repos.orders, OrderRepository)

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, repos: Repos) -> None:
        assert await repos.customers.find_by_id(CustomerId.new()) is None
        assert await repos.customers.find_by_email(EmailAddress("nobody@example.com")) is None

    @pytest.mark.asyncio
    async def test_save_and_find_round_trip(self, repos: Repos) -> None:
        customer = new_customer(
            "Ada Lovelace",
            "ada@example.com",
            address=Address("1 Main St", "Springfield", "IL", "62701", "USA", "2"),
            phone_number=PhoneNumber("555-123-4567"),
            preferences={"newsletter": True, "tags": ["vip"], "limits": {"daily": 2.5}},
        )

        saved = await repos.customers.save(customer)
        loaded = await repos.customers.find_by_id(customer.id)

        assert saved is customer
        assert loaded is not None
        assert loaded is not customer
        assert loaded.to_dict() == customer.to_dict()
        assert loaded.has_pending_events is False

    @pytest.mark.asyncio
    async def test_find_by_email_is_case_insensitive(self, repos: Repos) -> None:
        customer = new_customer("Ada", "Ada@Example.com")
        await repos.customers.save(customer)

        loaded = await repos.customers.find_by_email(EmailAddress("ADA@example.COM"))

        assert loaded == customer

    @pytest.mark.asyncio
    async def test_save_is_idempotent_upsert(self, repos: Repos) -> None:
        customer = new_customer("Ada", "ada@example.com")

        await repos.customers.save(customer)
        await repos.customers.save(customer)
        customer.deactivate()
        await repos.customers.save(customer)

        all_customers = await repos.customers.list_all()
        assert len(all_customers) == 1
        assert all_customers[0].is_active is False

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, repos: Repos) -> None:
        await repos.customers.save(new_customer("Ada", "ada@example.com"))

        with pytest.raises(InfrastructureError) as exc_info:
            await repos.customers.save(new_customer("Other Ada", "ada@example.com"))

        assert exc_info.value.message == "Customer with email ada@example.com already exists"
        assert len(await repos.customers.list_all()) == 1

    @pytest.mark.asyncio
    async def test_loaded_copies_are_independent(self, repos: Repos) -> None:
        customer = new_customer("Ada", "ada@example.com")
        await repos.customers.save(customer)

        first = await repos.customers.find_by_id(customer.id)
        second = await repos.customers.find_by_id(customer.id)
        assert first is not None and second is not None
        first.deactivate()

        assert second.is_active is True
        reloaded = await repos.customers.find_by_id(customer.id)
        assert reloaded is not None and reloaded.is_active is True

    @pytest.mark.asyncio
    async def test_list_all_ordered_by_name(self, repos: Repos) -> None:
        for name, email in [("Charlie", "c@example.com"), ("Alice", "a@example.com"),
                            ("Bob", "b@example.com")]:
            await repos.customers.save(new_customer(name, email))

        names = [customer.name for customer in await repos.customers.list_all()]

        assert names == ["Alice", "Bob", "Charlie"]

    @pytest.mark.asyncio
    async def test_search_filters(self, repos: Repos) -> None:
        alice = new_customer("Alice Smith", "alice@acme.com")
        bob = new_customer("Bob Smith", "bob@example.com")
        carol = new_customer("Carol Jones", "carol@acme.com")
        carol.deactivate()
        for customer in (alice, bob, carol):
            await repos.customers.save(customer)

        by_name = await repos.customers.search(CustomerFilters(name_contains="SMITH"))
        by_email = await repos.customers.search(CustomerFilters(email_contains="ACME"))
        inactive = await repos.customers.search(CustomerFilters(is_active=False))
        combined = await repos.customers.search(
            CustomerFilters(email_contains="acme", is_active=True)
        )
        everything = await repos.customers.search(CustomerFilters())

        assert [c.name for c in by_name] == ["Alice Smith", "Bob Smith"]
        assert [c.name for c in by_email] == ["Alice Smith", "Carol Jones"]
        assert [c.name for c in inactive] == ["Carol Jones"]
        assert [c.name for c in combined] == ["Alice Smith"]
        assert len(everything) == 3

    @pytest.mark.asyncio
    async def test_search_paging(self, repos: Repos) -> None:
        for index in range(5):
            await repos.customers.save(new_customer(f"Customer {index}", f"c{index}@example.com"))

        first_page = await repos.customers.search(CustomerFilters(), limit=2, offset=0)
        second_page = await repos.customers.search(CustomerFilters(), limit=2, offset=2)
        past_end = await repos.customers.search(CustomerFilters(), limit=2, offset=10)

        assert [c.name for c in first_page] == ["Customer 0", "Customer 1"]
        assert [c.name for c in second_page] == ["Customer 2", "Customer 3"]
        assert past_end == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "limit,offset,message",
        [
            (0, 0, "Limit must be at least 1"),
            (10, -1, "Offset cannot be negative"),
        ],
    )
    async def test_search_rejects_bad_paging(
        self, repos: Repos, limit: int, offset: int, message: str
    ) -> None:
        with pytest.raises(ValidationError, match=message):
            await repos.customers.search(CustomerFilters(), limit=limit, offset=offset)

    @pytest.mark.asyncio
    async def test_cancelled_token_stops_before_write(self, repos: Repos) -> None:
        token = CancellationToken()
        token.cancel()
        customer = new_customer("Ada", "ada@example.com")

        with pytest.raises(OperationCancelledError):
            await repos.customers.save(customer, token)

        assert await repos.customers.list_all() == []

    @pytest.mark.asyncio
    async def test_cancelled_token_stops_reads(self, repos: Repos) -> None:
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            await repos.customers.find_by_id(CustomerId.new(), token)
        with pytest.raises(OperationCancelledError):
            await repos.customers.search(CustomerFilters(), cancellation=token)


# =============================================================================
# Orders
# =============================================================================


class TestOrderRepositoryContract:
    """Behaviour every OrderRepository must provide."""

    @pytest.mark.asyncio
    async def test_save_and_find_round_trip(self, repos: Repos) -> None:
        order = Order.create(
            OrderId.new(),
            CustomerId.new(),
            Money(Decimal("1234.567"), "EUR"),
            {"items": [{"sku": "A1", "qty": 2}], "gift": False},
        )

        saved = await repos.orders.save(order)
        loaded = await repos.orders.find_by_id(order.id)

        assert saved is order
        assert loaded is not None and loaded is not order
        assert loaded.to_dict() == order.to_dict()
        assert loaded.total_amount.amount == Decimal("1234.567")

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, repos: Repos) -> None:
        assert await repos.orders.find_by_id(OrderId.new()) is None

    @pytest.mark.asyncio
    async def test_save_is_idempotent_upsert(self, repos: Repos) -> None:
        order = new_order(CustomerId.new())
        await repos.orders.save(order)
        order.confirm()
        await repos.orders.save(order)
        await repos.orders.save(order)

        orders = await repos.orders.list_all()

        assert len(orders) == 1
        assert orders[0].status is OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_find_by_customer_newest_first(self, repos: Repos) -> None:
        customer_id = CustomerId.new()
        base = datetime(2024, 5, 1, 12, tzinfo=UTC)
        oldest = new_order(customer_id, created_at=base)
        newest = new_order(customer_id, created_at=base + timedelta(days=2))
        middle = new_order(customer_id, created_at=base + timedelta(days=1))
        unrelated = new_order(CustomerId.new(), created_at=base + timedelta(days=3))
        for order in (oldest, newest, middle, unrelated):
            await repos.orders.save(order)

        orders = await repos.orders.find_by_customer(customer_id)

        assert [o.id for o in orders] == [newest.id, middle.id, oldest.id]

    @pytest.mark.asyncio
    async def test_find_by_customer_without_orders(self, repos: Repos) -> None:
        assert await repos.orders.find_by_customer(CustomerId.new()) == []

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, repos: Repos) -> None:
        base = datetime(2024, 5, 1, 12, tzinfo=UTC)
        first = new_order(CustomerId.new(), created_at=base)
        second = new_order(CustomerId.new(), created_at=base + timedelta(hours=1))
        await repos.orders.save(first)
        await repos.orders.save(second)

        assert [o.id for o in await repos.orders.list_all()] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_cancelled_token_stops_before_write(self, repos: Repos) -> None:
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            await repos.orders.save(new_order(CustomerId.new()), token)

        assert await repos.orders.list_all() == []


# =============================================================================
# Concurrent writes
# =============================================================================


class TestConcurrentWrites:
    """Interleaved saves from independent requests."""

    @pytest.mark.asyncio
    async def test_failed_save_does_not_undo_concurrent_save(self, repos: Repos) -> None:
        await repos.customers.save(new_customer("Ada Lovelace", "ada@example.com"))
        duplicate = new_customer("Ada Impostor", "ada@example.com")
        good = new_customer("Grace Hopper", "grace@example.com")

        results = await asyncio.gather(
            repos.customers.save(duplicate),
            repos.customers.save(good),
            return_exceptions=True,
        )

        assert isinstance(results[0], InfrastructureError)
        assert results[1] is good
        assert await repos.customers.find_by_id(good.id) is not None
        assert await repos.customers.find_by_id(duplicate.id) is None

    @pytest.mark.asyncio
    async def test_every_reported_success_is_persisted(self, repos: Repos) -> None:
        taken = new_customer("Taken", "taken@example.com")
        await repos.customers.save(taken)
        emails = ["taken@example.com" if i % 3 == 0 else f"c{i}@example.com" for i in range(9)]
        customers = [new_customer(f"Customer {i}", email) for i, email in enumerate(emails)]
        orders = [new_order(taken.id, amount=f"{i + 1}.00") for i in range(5)]

        results = await asyncio.gather(
            *(repos.customers.save(c) for c in customers),
            *(repos.orders.save(o) for o in orders),
            return_exceptions=True,
        )

        customer_results = results[: len(customers)]
        failures = [r for r in customer_results if isinstance(r, BaseException)]
        assert len(failures) == 3
        assert all(isinstance(r, InfrastructureError) for r in failures)
        for saved in customer_results:
            if isinstance(saved, Customer):
                assert await repos.customers.find_by_id(saved.id) is not None
        for saved in results[len(customers) :]:
            assert isinstance(saved, Order)
            assert await repos.orders.find_by_id(saved.id) is not None
        assert len(await repos.customers.list_all()) == 7
        assert len(await repos.orders.find_by_customer(taken.id)) == 5
