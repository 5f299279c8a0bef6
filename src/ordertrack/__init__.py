"""
ordertrack - Business rules and consistency layer for customer/order tracking.

This library provides:
- Self-validating value types (Money, EmailAddress, identifiers, contact details)
- Customer and Order aggregates with recorded domain events
- An order status state machine with named business rules
- Outcome[T], the success/failure envelope returned by every handler
- Command and query handlers following one orchestration contract
- In-memory and SQLite repositories, and an in-memory event bus
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ordertrack")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from ordertrack.aggregates import Customer, EventRecorder, Order, identity_equality
from ordertrack.bus import EventHandlerFunc, EventPublisher, InMemoryEventBus
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.config import OrderTrackConfig
from ordertrack.events import (
    CustomerCreated,
    CustomerDeactivated,
    DomainEvent,
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from ordertrack.exceptions import (
    BusinessRuleViolation,
    CurrencyMismatchError,
    InfrastructureError,
    InvalidOutcomeStateError,
    NegativeFactorError,
    NegativeResultError,
    OperationCancelledError,
    OrderTrackError,
    ValidationError,
)
from ordertrack.handlers import (
    CancelOrderCommand,
    CancelOrderHandler,
    ConfirmOrderCommand,
    ConfirmOrderHandler,
    CreateCustomerCommand,
    CreateCustomerHandler,
    CreateOrderCommand,
    CreateOrderHandler,
    DeactivateCustomerCommand,
    DeactivateCustomerHandler,
    DeliverOrderCommand,
    DeliverOrderHandler,
    GetCustomerHandler,
    GetCustomerOrdersHandler,
    GetCustomerOrdersQuery,
    GetCustomerQuery,
    GetOrderHandler,
    GetOrderQuery,
    ListCustomersHandler,
    ListCustomersQuery,
    ListOrdersHandler,
    ListOrdersQuery,
    SearchCustomersHandler,
    SearchCustomersQuery,
    ShipOrderCommand,
    ShipOrderHandler,
)
from ordertrack.outcome import Outcome
from ordertrack.repositories import (
    CustomerFilters,
    CustomerRepository,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    OrderRepository,
    SQLiteCustomerRepository,
    SQLiteOrderRepository,
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
    TryCreate,
)

__all__ = [
    "__version__",
    # Values
    "Address",
    "CustomerId",
    "EmailAddress",
    "Money",
    "OrderId",
    "OrderStatus",
    "PhoneNumber",
    "TryCreate",
    # Outcome
    "Outcome",
    # Events
    "CustomerCreated",
    "CustomerDeactivated",
    "DomainEvent",
    "OrderCancelled",
    "OrderCreated",
    "OrderStatusChanged",
    # Aggregates
    "Customer",
    "EventRecorder",
    "Order",
    "identity_equality",
    # Repositories
    "CustomerFilters",
    "CustomerRepository",
    "InMemoryCustomerRepository",
    "InMemoryOrderRepository",
    "OrderRepository",
    "SQLiteCustomerRepository",
    "SQLiteOrderRepository",
    "SQLiteStore",
    # Bus
    "EventHandlerFunc",
    "EventPublisher",
    "InMemoryEventBus",
    # Handlers
    "CancelOrderCommand",
    "CancelOrderHandler",
    "ConfirmOrderCommand",
    "ConfirmOrderHandler",
    "CreateCustomerCommand",
    "CreateCustomerHandler",
    "CreateOrderCommand",
    "CreateOrderHandler",
    "DeactivateCustomerCommand",
    "DeactivateCustomerHandler",
    "DeliverOrderCommand",
    "DeliverOrderHandler",
    "GetCustomerHandler",
    "GetCustomerOrdersHandler",
    "GetCustomerOrdersQuery",
    "GetCustomerQuery",
    "GetOrderHandler",
    "GetOrderQuery",
    "ListCustomersHandler",
    "ListCustomersQuery",
    "ListOrdersHandler",
    "ListOrdersQuery",
    "SearchCustomersHandler",
    "SearchCustomersQuery",
    "ShipOrderCommand",
    "ShipOrderHandler",
    # Ambient
    "CancellationToken",
    "OrderTrackConfig",
    "check_cancelled",
    # Exceptions
    "BusinessRuleViolation",
    "CurrencyMismatchError",
    "InfrastructureError",
    "InvalidOutcomeStateError",
    "NegativeFactorError",
    "NegativeResultError",
    "OperationCancelledError",
    "OrderTrackError",
    "ValidationError",
]
