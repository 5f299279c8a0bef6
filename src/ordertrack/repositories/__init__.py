"""
Repository contracts and reference implementations.

- In-memory repositories for tests and prototyping
- SQLite repositories (aiosqlite) for embedded persistence
"""

from ordertrack.repositories.in_memory import (
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
)
from ordertrack.repositories.interface import (
    DEFAULT_SEARCH_LIMIT,
    CustomerFilters,
    CustomerRepository,
    OrderRepository,
    validate_page,
)
from ordertrack.repositories.sqlite import (
    SQLiteCustomerRepository,
    SQLiteOrderRepository,
    SQLiteStore,
)

__all__ = [
    # Contracts
    "DEFAULT_SEARCH_LIMIT",
    "CustomerFilters",
    "CustomerRepository",
    "OrderRepository",
    "validate_page",
    # In-memory
    "InMemoryCustomerRepository",
    "InMemoryOrderRepository",
    # SQLite
    "SQLiteCustomerRepository",
    "SQLiteOrderRepository",
    "SQLiteStore",
]
