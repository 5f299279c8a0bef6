"""
SQLite implementation of the customer and order repositories.

Lightweight embedded persistence with async support via aiosqlite.
:class:`SQLiteStore` owns the connection and schema; the repositories
share its connection and a lock that serialises every statement and
transaction issued on it.

SQLite-specific adaptations:
- UUIDs stored as TEXT (36-character hyphenated format)
- Datetimes stored as TEXT (ISO 8601, normalized to UTC)
- Amounts stored as TEXT so Decimal precision survives the round-trip
- Address, phone number, preferences and details stored as JSON TEXT
- Uses UPSERT with ON CONFLICT syntax (SQLite 3.24+)
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator, Iterator, Sequence
from datetime import UTC, datetime
from typing import Any

import aiosqlite

from ordertrack.aggregates.customer import Customer
from ordertrack.aggregates.order import Order
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.config import OrderTrackConfig
from ordertrack.exceptions import InfrastructureError
from ordertrack.observability import Tracer, create_tracer
from ordertrack.observability.attributes import (
    ATTR_CUSTOMER_ID,
    ATTR_DB_NAME,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
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

SCHEMA = """
CREATE TABLE IF NOT EXISTS customers (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    address TEXT,
    phone_number TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    preferences TEXT NOT NULL DEFAULT '{}',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_customers_name ON customers (name);

CREATE TABLE IF NOT EXISTS orders (
    id TEXT PRIMARY KEY,
    customer_id TEXT NOT NULL,
    total_amount TEXT NOT NULL,
    currency TEXT NOT NULL,
    status TEXT NOT NULL,
    details TEXT NOT NULL DEFAULT '{}',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_orders_customer_id ON orders (customer_id);
CREATE INDEX IF NOT EXISTS idx_orders_created_at ON orders (created_at);
"""

_CUSTOMER_COLUMNS = (
    "id",
    "name",
    "email",
    "address",
    "phone_number",
    "is_active",
    "preferences",
    "created_at",
    "updated_at",
)

_ORDER_COLUMNS = (
    "id",
    "customer_id",
    "total_amount",
    "currency",
    "status",
    "details",
    "created_at",
    "updated_at",
)


def _timestamp(value: str) -> str:
    """Normalize an ISO timestamp to UTC with fixed precision so TEXT ordering is chronological."""
    return datetime.fromisoformat(value).astimezone(UTC).isoformat(timespec="microseconds")


def _row_dict(columns: Sequence[str], row: Sequence[Any]) -> dict[str, Any]:
    return dict(zip(columns, tuple(row), strict=True))


@contextlib.contextmanager
def _wrap_errors(operation: str) -> Iterator[None]:
    """Re-raise driver errors as InfrastructureError."""
    try:
        yield
    except aiosqlite.Error as e:
        logger.error("SQLite error during %s: %s", operation, e)
        raise InfrastructureError(f"Database error during {operation}: {e}", cause=e) from e


class SQLiteStore:
    """
    Owner of the SQLite connection and schema.

    Example:
        >>> async with SQLiteStore(OrderTrackConfig(database="orders.db")) as store:
        ...     await store.initialize()
        ...     customers = store.customers()
        ...     orders = store.orders()
        ...     await customers.save(customer)
    """

    def __init__(
        self,
        config: OrderTrackConfig | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """
        Initialize the store. No connection is opened until first use.

        Args:
            config: Connection settings (defaults to an in-memory database)
            tracer: Optional tracer shared with the repositories
        """
        self._config = config or OrderTrackConfig()
        self._tracer = tracer or create_tracer(__name__, self._config.enable_tracing)
        self._connection: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def config(self) -> OrderTrackConfig:
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def __aenter__(self) -> SQLiteStore:
        await self._connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def _connect(self) -> None:
        """
        Open the database connection and configure settings.

        This is called automatically by __aenter__ and initialize().
        """
        if self._connection is not None:
            return

        database = self._config.database
        with _wrap_errors("connect"):
            self._connection = await aiosqlite.connect(database)

            # Set busy timeout
            await self._connection.execute(f"PRAGMA busy_timeout = {self._config.busy_timeout_ms}")

            # Enable WAL mode if requested (better concurrency)
            if self._config.wal_mode and not self._config.is_memory_database:
                await self._connection.execute("PRAGMA journal_mode = WAL")

        logger.debug(
            "Connected to SQLite database: %s (wal_mode=%s, busy_timeout=%d)",
            database,
            self._config.wal_mode,
            self._config.busy_timeout_ms,
        )

    async def close(self) -> None:
        """Close the database connection. Safe to call multiple times."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.debug("Closed SQLite database connection: %s", self._config.database)

    async def initialize(self) -> None:
        """
        Create the customers and orders tables if they don't exist.

        Idempotent: safe to call multiple times.
        """
        await self._connect()
        connection = self.connection
        with self._tracer.span(
            "ordertrack.sqlite_store.initialize",
            {ATTR_DB_SYSTEM: "sqlite", ATTR_DB_NAME: self._config.database},
        ):
            async with self._lock:
                with _wrap_errors("initialize"):
                    await connection.executescript(SCHEMA)
                    await connection.commit()
        logger.info("Initialized ordertrack schema: %s", self._config.database)

    @property
    def connection(self) -> aiosqlite.Connection:
        """
        The active connection.

        Raises:
            RuntimeError: If not connected
        """
        if self._connection is None:
            raise RuntimeError(
                "Not connected to database. Use 'async with store:' or call 'initialize()' first."
            )
        return self._connection

    def customers(self) -> SQLiteCustomerRepository:
        """Customer repository sharing this store's connection and lock."""
        return SQLiteCustomerRepository(self.connection, tracer=self._tracer, lock=self._lock)

    def orders(self) -> SQLiteOrderRepository:
        """Order repository sharing this store's connection and lock."""
        return SQLiteOrderRepository(self.connection, tracer=self._tracer, lock=self._lock)


class _SQLiteRepository:
    """Connection, tracing and transaction plumbing shared by both repositories."""

    def __init__(
        self,
        connection: aiosqlite.Connection,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
        lock: asyncio.Lock | None = None,
    ) -> None:
        """
        Args:
            connection: aiosqlite database connection with the schema applied
            tracer: Optional tracer for tracing (if not provided, one will be created)
            enable_tracing: Whether to enable OpenTelemetry tracing (default True)
            lock: Lock shared by every repository on this connection. A
                rollback on a shared connection undoes all uncommitted work,
                so statements from different repositories must not interleave.
        """
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._connection = connection
        self._lock = lock or asyncio.Lock()

    def _span(self, name: str, operation: str, **attributes: Any) -> Any:
        return self._tracer.span(
            f"ordertrack.{name}",
            {ATTR_DB_SYSTEM: "sqlite", ATTR_DB_OPERATION: operation, **attributes},
        )

    async def _fetch(self, query: str, params: Sequence[Any], operation: str) -> list[Any]:
        async with self._lock:
            with _wrap_errors(operation):
                cursor = await self._connection.execute(query, tuple(params))
                rows = await cursor.fetchall()
                await cursor.close()
                return list(rows)

    @contextlib.asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run a write under the connection lock.

        Commit on success; roll back and wrap driver errors on failure. The
        lock is held until the commit or rollback completes.
        """
        async with self._lock:
            try:
                yield self._connection
                await self._connection.commit()
            except aiosqlite.Error as e:
                await self._connection.rollback()
                if isinstance(e, aiosqlite.IntegrityError):
                    raise
                logger.error("SQLite error during %s: %s", operation, e)
                raise InfrastructureError(
                    f"Database error during {operation}: {e}", cause=e
                ) from e


class SQLiteCustomerRepository(_SQLiteRepository):
    """
    SQLite implementation of CustomerRepository.

    The ``email`` column is UNIQUE; saving a second customer with a taken
    email raises InfrastructureError.
    """

    async def find_by_id(
        self,
        customer_id: CustomerId,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        check_cancelled(cancellation, "customer_repository.find_by_id")
        with self._span(
            "customer_repository.find_by_id", "SELECT", **{ATTR_CUSTOMER_ID: str(customer_id)}
        ):
            rows = await self._fetch(
                f"SELECT {', '.join(_CUSTOMER_COLUMNS)} FROM customers WHERE id = ?",
                (str(customer_id),),
                "find customer by id",
            )
            return self._to_customer(rows[0]) if rows else None

    async def find_by_email(
        self,
        email: EmailAddress,
        cancellation: CancellationToken | None = None,
    ) -> Customer | None:
        check_cancelled(cancellation, "customer_repository.find_by_email")
        with self._span("customer_repository.find_by_email", "SELECT"):
            rows = await self._fetch(
                f"SELECT {', '.join(_CUSTOMER_COLUMNS)} FROM customers WHERE email = ?",
                (email.value,),
                "find customer by email",
            )
            return self._to_customer(rows[0]) if rows else None

    async def save(
        self,
        customer: Customer,
        cancellation: CancellationToken | None = None,
    ) -> Customer:
        """
        Save or update a customer (upsert by id).

        Raises:
            InfrastructureError: If another customer already has the email,
                or the database fails
        """
        check_cancelled(cancellation, "customer_repository.save")
        data = customer.to_dict()
        params = (
            data["id"],
            data["name"],
            data["email"],
            json.dumps(data["address"]) if data["address"] else None,
            json.dumps(data["phone_number"]) if data["phone_number"] else None,
            1 if data["is_active"] else 0,
            json.dumps(data["preferences"]),
            _timestamp(data["created_at"]),
            _timestamp(data["updated_at"]),
        )
        with self._span(
            "customer_repository.save", "UPSERT", **{ATTR_CUSTOMER_ID: str(customer.id)}
        ):
            try:
                async with self._transaction("save customer") as conn:
                    await conn.execute(
                        """
                        INSERT INTO customers (
                            id, name, email, address, phone_number,
                            is_active, preferences, created_at, updated_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT (id) DO UPDATE SET
                            name = excluded.name,
                            email = excluded.email,
                            address = excluded.address,
                            phone_number = excluded.phone_number,
                            is_active = excluded.is_active,
                            preferences = excluded.preferences,
                            updated_at = excluded.updated_at
                        """,
                        params,
                    )
            except aiosqlite.IntegrityError as e:
                if "email" in str(e).lower():
                    raise InfrastructureError(
                        f"Customer with email {data['email']} already exists", cause=e
                    ) from e
                raise InfrastructureError(
                    f"Database error during save customer: {e}", cause=e
                ) from e

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
        with self._span("customer_repository.list_all", "SELECT") as span:
            rows = await self._fetch(
                f"SELECT {', '.join(_CUSTOMER_COLUMNS)} FROM customers ORDER BY name, id",
                (),
                "list customers",
            )
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(rows))
            return [self._to_customer(row) for row in rows]

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

        conditions: list[str] = []
        params: list[Any] = []
        if filters.name_contains:
            conditions.append("instr(lower(name), ?) > 0")
            params.append(filters.name_contains.lower())
        if filters.email_contains:
            conditions.append("instr(email, ?) > 0")
            params.append(filters.email_contains.lower())
        if filters.is_active is not None:
            conditions.append("is_active = ?")
            params.append(1 if filters.is_active else 0)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        with self._span(
            "customer_repository.search",
            "SELECT",
            **{ATTR_QUERY_LIMIT: limit, ATTR_QUERY_OFFSET: offset},
        ) as span:
            rows = await self._fetch(
                f"""
                SELECT {', '.join(_CUSTOMER_COLUMNS)}
                FROM customers
                {where}
                ORDER BY name, id
                LIMIT ? OFFSET ?
                """,  # nosec B608 - conditions built from fixed fragments
                (*params, limit, offset),
                "search customers",
            )
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(rows))
            logger.debug(
                "Customer search returned %d rows", len(rows), extra={"result_count": len(rows)}
            )
            return [self._to_customer(row) for row in rows]

    @staticmethod
    def _to_customer(row: Sequence[Any]) -> Customer:
        data = _row_dict(_CUSTOMER_COLUMNS, row)
        data["address"] = json.loads(data["address"]) if data["address"] else None
        data["phone_number"] = json.loads(data["phone_number"]) if data["phone_number"] else None
        data["is_active"] = bool(data["is_active"])
        data["preferences"] = json.loads(data["preferences"] or "{}")
        return Customer.from_dict(data)


class SQLiteOrderRepository(_SQLiteRepository):
    """SQLite implementation of OrderRepository."""

    async def find_by_id(
        self,
        order_id: OrderId,
        cancellation: CancellationToken | None = None,
    ) -> Order | None:
        check_cancelled(cancellation, "order_repository.find_by_id")
        with self._span("order_repository.find_by_id", "SELECT", **{ATTR_ORDER_ID: str(order_id)}):
            rows = await self._fetch(
                f"SELECT {', '.join(_ORDER_COLUMNS)} FROM orders WHERE id = ?",
                (str(order_id),),
                "find order by id",
            )
            return self._to_order(rows[0]) if rows else None

    async def save(
        self,
        order: Order,
        cancellation: CancellationToken | None = None,
    ) -> Order:
        """Save or update an order (upsert by id)."""
        check_cancelled(cancellation, "order_repository.save")
        data = order.to_dict()
        params = (
            data["id"],
            data["customer_id"],
            data["total_amount"],
            data["currency"],
            data["status"],
            json.dumps(data["details"]),
            _timestamp(data["created_at"]),
            _timestamp(data["updated_at"]),
        )
        with self._span(
            "order_repository.save",
            "UPSERT",
            **{ATTR_ORDER_ID: str(order.id), ATTR_ORDER_STATUS: order.status.value},
        ):
            try:
                async with self._transaction("save order") as conn:
                    await conn.execute(
                        """
                        INSERT INTO orders (
                            id, customer_id, total_amount, currency,
                            status, details, created_at, updated_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT (id) DO UPDATE SET
                            customer_id = excluded.customer_id,
                            total_amount = excluded.total_amount,
                            currency = excluded.currency,
                            status = excluded.status,
                            details = excluded.details,
                            updated_at = excluded.updated_at
                        """,
                        params,
                    )
            except aiosqlite.IntegrityError as e:
                raise InfrastructureError(f"Database error during save order: {e}", cause=e) from e

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
        with self._span(
            "order_repository.find_by_customer",
            "SELECT",
            **{ATTR_CUSTOMER_ID: str(customer_id)},
        ) as span:
            rows = await self._fetch(
                f"""
                SELECT {', '.join(_ORDER_COLUMNS)}
                FROM orders
                WHERE customer_id = ?
                ORDER BY created_at DESC, id
                """,
                (str(customer_id),),
                "find orders by customer",
            )
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(rows))
            return [self._to_order(row) for row in rows]

    async def list_all(
        self,
        cancellation: CancellationToken | None = None,
    ) -> list[Order]:
        check_cancelled(cancellation, "order_repository.list_all")
        with self._span("order_repository.list_all", "SELECT") as span:
            rows = await self._fetch(
                f"SELECT {', '.join(_ORDER_COLUMNS)} FROM orders ORDER BY created_at DESC, id",
                (),
                "list orders",
            )
            if span:
                span.set_attribute(ATTR_RESULT_COUNT, len(rows))
            return [self._to_order(row) for row in rows]

    @staticmethod
    def _to_order(row: Sequence[Any]) -> Order:
        data = _row_dict(_ORDER_COLUMNS, row)
        data["details"] = json.loads(data["details"] or "{}")
        return Order.from_dict(data)


__all__ = [
    "SCHEMA",
    "SQLiteCustomerRepository",
    "SQLiteOrderRepository",
    "SQLiteStore",
]
