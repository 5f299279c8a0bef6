"""Command handlers for the Customer aggregate."""

import logging

from ordertrack.aggregates.customer import Customer
from ordertrack.bus.interface import EventPublisher
from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.handlers.base import BaseHandler, handler_boundary, not_found
from ordertrack.handlers.requests import CreateCustomerCommand, DeactivateCustomerCommand
from ordertrack.observability import Tracer
from ordertrack.outcome import Outcome
from ordertrack.repositories.interface import CustomerRepository
from ordertrack.values.email import EmailAddress
from ordertrack.values.identifiers import CustomerId

logger = logging.getLogger(__name__)


class CreateCustomerHandler(BaseHandler):
    """
    Create a customer with a unique email address.

    Example:
        >>> handler = CreateCustomerHandler(InMemoryCustomerRepository(), publisher=bus)
        >>> outcome = await handler.handle(
        ...     CreateCustomerCommand(name="Ada Lovelace", email="Ada@Example.com")
        ... )
        >>> outcome.value.email.value
        'ada@example.com'
    """

    def __init__(
        self,
        customers: CustomerRepository,
        publisher: EventPublisher | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(publisher, tracer, enable_tracing)
        self._customers = customers

    @handler_boundary("Error creating customer")
    async def handle(
        self,
        command: CreateCustomerCommand,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Customer]:
        ok, email, error = EmailAddress.try_create(command.email)
        if not ok or email is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "create customer")
        if await self._customers.find_by_email(email, cancellation) is not None:
            logger.warning("Customer with email %s already exists", email.value)
            return Outcome.failure(f"Customer with email {email.value} already exists")

        customer = Customer.create(
            CustomerId.new(),
            command.name,
            email,
            preferences=command.preferences,
        )

        check_cancelled(cancellation, "create customer")
        saved = await self._customers.save(customer, cancellation)
        await self._publish_events(customer)

        logger.info(
            "Created customer %s with email %s",
            customer.id,
            email.value,
            extra={"customer_id": str(customer.id)},
        )
        return Outcome.success(saved)


class DeactivateCustomerHandler(BaseHandler):
    """Deactivate an active customer. Deactivation is terminal."""

    def __init__(
        self,
        customers: CustomerRepository,
        publisher: EventPublisher | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(publisher, tracer, enable_tracing)
        self._customers = customers

    @handler_boundary("Error deactivating customer")
    async def handle(
        self,
        command: DeactivateCustomerCommand,
        cancellation: CancellationToken | None = None,
    ) -> Outcome[Customer]:
        ok, customer_id, error = CustomerId.try_create(command.customer_id)
        if not ok or customer_id is None:
            return Outcome.failure(error)

        check_cancelled(cancellation, "deactivate customer")
        customer = await self._customers.find_by_id(customer_id, cancellation)
        if customer is None:
            return not_found("Customer", customer_id)

        customer.deactivate(command.reason)

        check_cancelled(cancellation, "deactivate customer")
        saved = await self._customers.save(customer, cancellation)
        await self._publish_events(customer)

        logger.info(
            "Deactivated customer %s: %s",
            customer_id,
            command.reason,
            extra={"customer_id": str(customer_id)},
        )
        return Outcome.success(saved)


__all__ = [
    "CreateCustomerHandler",
    "DeactivateCustomerHandler",
]
