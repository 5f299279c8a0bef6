"""
Standard span attributes for ordertrack.

Example:
    >>> from ordertrack.observability.attributes import ATTR_CUSTOMER_ID
    >>>
    >>> with tracer.span(
    ...     "ordertrack.customer_repository.find_by_id",
    ...     {ATTR_CUSTOMER_ID: str(customer_id)},
    ... ):
    ...     pass
"""

# =============================================================================
# Aggregate Attributes
# =============================================================================

ATTR_CUSTOMER_ID = "ordertrack.customer.id"
"""Customer identifier (UUID string)."""

ATTR_ORDER_ID = "ordertrack.order.id"
"""Order identifier (UUID string)."""

ATTR_ORDER_STATUS = "ordertrack.order.status"
"""Order status display name (e.g., 'Pending')."""

# =============================================================================
# Event Attributes
# =============================================================================

ATTR_EVENT_ID = "ordertrack.event.id"
"""Unique identifier for the event (UUID string)."""

ATTR_EVENT_TYPE = "ordertrack.event.type"
"""Type name of the event (e.g., 'OrderCreated')."""

ATTR_EVENT_COUNT = "ordertrack.event.count"
"""Number of events in an operation (integer)."""

ATTR_HANDLER_NAME = "ordertrack.handler.name"
"""Name of the command/query or event handler being invoked (string)."""

ATTR_HANDLER_COUNT = "ordertrack.handler.count"
"""Number of event handlers subscribed to an event type (integer)."""

# =============================================================================
# Query Attributes
# =============================================================================

ATTR_RESULT_COUNT = "ordertrack.result.count"
"""Number of rows returned by a list or search (integer)."""

ATTR_QUERY_LIMIT = "ordertrack.query.limit"
"""Page size of a search (integer)."""

ATTR_QUERY_OFFSET = "ordertrack.query.offset"
"""Row offset of a search (integer)."""

# =============================================================================
# Database Attributes (OpenTelemetry semantic conventions)
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""Database system identifier (e.g., 'sqlite')."""

ATTR_DB_NAME = "db.name"
"""Database name or file path."""

ATTR_DB_OPERATION = "db.operation"
"""Database operation type (e.g., 'SELECT', 'INSERT')."""

__all__ = [
    "ATTR_CUSTOMER_ID",
    "ATTR_DB_NAME",
    "ATTR_DB_OPERATION",
    "ATTR_DB_SYSTEM",
    "ATTR_EVENT_COUNT",
    "ATTR_EVENT_ID",
    "ATTR_EVENT_TYPE",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_NAME",
    "ATTR_ORDER_ID",
    "ATTR_ORDER_STATUS",
    "ATTR_QUERY_LIMIT",
    "ATTR_QUERY_OFFSET",
    "ATTR_RESULT_COUNT",
]
