"""
Command and query shapes accepted by the handlers.

Fields accept both the contractual camelCase names (``customerId``,
``totalAmount``) and the snake_case attribute names. Identifiers, emails
and amounts are kept raw here; handlers turn them into value types as
their first step so malformed input becomes an ``Outcome.failure``.

Example:
    >>> CreateOrderCommand.model_validate({"customerId": "...", "totalAmount": "99.50"})
    >>> CreateOrderCommand(customer_id="...", total_amount=Decimal("99.50"), currency="EUR")
"""

from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ordertrack.aggregates.customer import DEFAULT_DEACTIVATION_REASON
from ordertrack.aggregates.order import DEFAULT_CANCELLATION_REASON


class Request(BaseModel):
    """Base for every command and query."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Commands
# =============================================================================


class CreateCustomerCommand(Request):
    name: str
    email: str
    preferences: dict[str, Any] | None = None


class DeactivateCustomerCommand(Request):
    customer_id: UUID | str
    reason: str = DEFAULT_DEACTIVATION_REASON


class CreateOrderCommand(Request):
    customer_id: UUID | str
    total_amount: Decimal
    currency: str = "USD"
    details: dict[str, Any] | None = None


class ConfirmOrderCommand(Request):
    order_id: UUID | str


class ShipOrderCommand(Request):
    order_id: UUID | str


class DeliverOrderCommand(Request):
    order_id: UUID | str


class CancelOrderCommand(Request):
    order_id: UUID | str
    reason: str = DEFAULT_CANCELLATION_REASON


# =============================================================================
# Queries
# =============================================================================


class GetCustomerQuery(Request):
    customer_id: UUID | str


class GetCustomerOrdersQuery(Request):
    customer_id: UUID | str


class GetOrderQuery(Request):
    order_id: UUID | str


class ListCustomersQuery(Request):
    pass


class ListOrdersQuery(Request):
    pass


class SearchCustomersQuery(Request):
    """
    Paged customer search. Substring criteria are case-insensitive.

    ``limit`` falls back to the configured default page size when omitted.
    """

    name_contains: str | None = None
    email_contains: str | None = None
    is_active: bool | None = None
    limit: int | None = None
    offset: int = Field(default=0)


__all__ = [
    "CancelOrderCommand",
    "ConfirmOrderCommand",
    "CreateCustomerCommand",
    "CreateOrderCommand",
    "DeactivateCustomerCommand",
    "DeliverOrderCommand",
    "GetCustomerOrdersQuery",
    "GetCustomerQuery",
    "GetOrderQuery",
    "ListCustomersQuery",
    "ListOrdersQuery",
    "Request",
    "SearchCustomersQuery",
    "ShipOrderCommand",
]
