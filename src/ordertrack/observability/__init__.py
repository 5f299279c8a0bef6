"""
Observability utilities for ordertrack.

OpenTelemetry is optional; install the ``telemetry`` extra to get real
spans. Without it every component uses :class:`NullTracer`.
"""

from ordertrack.observability.attributes import (
    ATTR_CUSTOMER_ID,
    ATTR_DB_NAME,
    ATTR_DB_OPERATION,
    ATTR_DB_SYSTEM,
    ATTR_EVENT_COUNT,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_ORDER_ID,
    ATTR_ORDER_STATUS,
    ATTR_QUERY_LIMIT,
    ATTR_QUERY_OFFSET,
    ATTR_RESULT_COUNT,
)
from ordertrack.observability.tracer import (
    OTEL_AVAILABLE,
    MockSpan,
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)

__all__ = [
    # Tracer
    "OTEL_AVAILABLE",
    "MockSpan",
    "MockTracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "Tracer",
    "create_tracer",
    # Attributes
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
