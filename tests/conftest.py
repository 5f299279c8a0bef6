"""
Shared pytest fixtures for the ordertrack tests.

This module provides:
- Repository fixtures (in-memory customer and order repositories)
- Event bus fixture (in-memory bus recording every published event)
- SQLite fixtures (initialized in-memory store and its repositories)
- Aggregate fixtures (an active customer and a pending order)

Components are built with tracing disabled; tests that assert on spans
pass a MockTracer explicitly.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio

from ordertrack.aggregates import Customer, Order
from ordertrack.bus import InMemoryEventBus
from ordertrack.config import OrderTrackConfig
from ordertrack.repositories import (
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    SQLiteCustomerRepository,
    SQLiteOrderRepository,
    SQLiteStore,
)
from ordertrack.values import CustomerId, EmailAddress, Money, OrderId

# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def config() -> OrderTrackConfig:
    """Default configuration with tracing disabled."""
    return OrderTrackConfig(enable_tracing=False)


# =============================================================================
# In-Memory Fixtures
# =============================================================================


@pytest.fixture
def customer_repo() -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository(enable_tracing=False)


@pytest.fixture
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository(enable_tracing=False)


@pytest.fixture
def bus() -> InMemoryEventBus:
    return InMemoryEventBus(enable_tracing=False)


# =============================================================================
# SQLite Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def sqlite_store(config: OrderTrackConfig) -> AsyncGenerator[SQLiteStore, None]:
    """
    Provide an initialized SQLiteStore on a fresh in-memory database.

    The connection is closed after the test.
    """
    store = SQLiteStore(config)
    await store.initialize()

    yield store

    await store.close()


@pytest.fixture
def sqlite_customer_repo(sqlite_store: SQLiteStore) -> SQLiteCustomerRepository:
    return sqlite_store.customers()


@pytest.fixture
def sqlite_order_repo(sqlite_store: SQLiteStore) -> SQLiteOrderRepository:
    return sqlite_store.orders()


# =============================================================================
# Aggregate Fixtures
# =============================================================================


@pytest.fixture
def customer() -> Customer:
    """A freshly created active customer with its CustomerCreated event drained."""
    created = Customer.create(
        CustomerId.new(),
        "Ada Lovelace",
        EmailAddress("ada@example.com"),
        preferences={"newsletter": True},
    )
    created.drain_events()
    return created


@pytest.fixture
def order(customer: Customer) -> Order:
    """A Pending order for the customer fixture, with its OrderCreated event drained."""
    placed = Order.create(
        OrderId.new(),
        customer.id,
        Money(Decimal("150.00"), "USD"),
        details={"channel": "web"},
    )
    placed.drain_events()
    return placed
