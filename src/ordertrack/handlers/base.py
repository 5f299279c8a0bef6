"""
Orchestration boundary shared by every command and query handler.

A handler:

1. builds value types from raw input, returning an unprefixed
   ``Outcome.failure`` with the value type's message on bad input;
2. loads the aggregates it needs, returning a "not found" failure when a
   required one is missing;
3. invokes the aggregate operation;
4. persists through the repository;
5. drains the aggregate's events and hands them to the publisher;
6. returns ``Outcome.success``.

Exceptions raised during steps 3 and 4 are converted by
:func:`handler_boundary` into ``Outcome.failure("{prefix}: {message}")``.
Cancellation is never converted.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Concatenate, ParamSpec, Protocol, TypeVar

from ordertrack.bus.interface import EventPublisher
from ordertrack.events.base import DomainEvent
from ordertrack.exceptions import (
    BusinessRuleViolation,
    InfrastructureError,
    OperationCancelledError,
    ValidationError,
)
from ordertrack.observability import Tracer, create_tracer
from ordertrack.observability.attributes import ATTR_EVENT_COUNT, ATTR_HANDLER_NAME
from ordertrack.outcome import Outcome

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")
THandler = TypeVar("THandler", bound="BaseHandler")

_CONVERTED = (ValidationError, BusinessRuleViolation, InfrastructureError)


class RecordsEvents(Protocol):
    """Anything with pending events to hand over (Customer, Order)."""

    def drain_events(self) -> list[DomainEvent]: ...


class BaseHandler:
    """
    Dependencies and helpers common to all handlers.

    Args:
        publisher: Receiver of drained events (None drops them after draining)
        tracer: Optional tracer (if not provided, one will be created)
        enable_tracing: Whether to enable OpenTelemetry tracing (default True)
    """

    def __init__(
        self,
        publisher: EventPublisher | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._publisher = publisher
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

    async def _publish_events(self, aggregate: RecordsEvents) -> list[DomainEvent]:
        """
        Drain the aggregate's events and publish them.

        Must only be called after a successful save. A publisher failure
        is logged; the write has already happened, so it is not turned
        into a failed outcome.

        Returns:
            The drained events, in recorded order
        """
        events = aggregate.drain_events()
        if not events or self._publisher is None:
            return events

        with self._tracer.span(
            "ordertrack.handler.publish_events",
            {ATTR_HANDLER_NAME: type(self).__name__, ATTR_EVENT_COUNT: len(events)},
        ):
            try:
                await self._publisher.publish(events)
            except OperationCancelledError:
                raise
            except Exception:
                logger.exception(
                    "Failed to publish %d event(s) from %s",
                    len(events),
                    type(self).__name__,
                    extra={
                        "handler": type(self).__name__,
                        "event_types": [event.event_type for event in events],
                    },
                )
        return events


def handler_boundary(
    prefix: str,
) -> Callable[
    [Callable[Concatenate[THandler, P], Awaitable[Outcome[R]]]],
    Callable[Concatenate[THandler, P], Awaitable[Outcome[R]]],
]:
    """
    Convert domain and persistence errors raised inside ``handle`` into failures.

    ValidationError, BusinessRuleViolation and InfrastructureError become
    ``Outcome.failure(f"{prefix}: {error.message}")`` and are logged.
    OperationCancelledError and anything unexpected propagate.

    Example:
        >>> class CreateOrderHandler(BaseHandler):
        ...     @handler_boundary("Error creating order")
        ...     async def handle(self, command, cancellation=None) -> Outcome[Order]:
        ...         ...
    """

    def decorate(
        func: Callable[Concatenate[THandler, P], Awaitable[Outcome[R]]],
    ) -> Callable[Concatenate[THandler, P], Awaitable[Outcome[R]]]:
        @functools.wraps(func)
        async def wrapper(self: THandler, *args: P.args, **kwargs: P.kwargs) -> Outcome[R]:
            handler_name = type(self).__name__
            with self._tracer.span(
                f"ordertrack.handler.{handler_name}",
                {ATTR_HANDLER_NAME: handler_name},
            ):
                try:
                    return await func(self, *args, **kwargs)
                except OperationCancelledError:
                    logger.info("%s cancelled", handler_name, extra={"handler": handler_name})
                    raise
                except _CONVERTED as e:
                    message = getattr(e, "message", str(e))
                    logger.error(
                        "%s: %s",
                        prefix,
                        message,
                        exc_info=isinstance(e, InfrastructureError),
                        extra={
                            "handler": handler_name,
                            "error_type": type(e).__name__,
                            "rule_name": getattr(e, "rule_name", None),
                        },
                    )
                    return Outcome.failure(f"{prefix}: {message}")

        return wrapper

    return decorate


def not_found(kind: str, identifier: Any) -> Outcome[Any]:
    """Failure for a missing aggregate: ``"{kind} with ID {id} not found"``."""
    logger.warning("%s %s not found", kind, identifier, extra={"kind": kind, "id": str(identifier)})
    return Outcome.failure(f"{kind} with ID {identifier} not found")


__all__ = [
    "BaseHandler",
    "RecordsEvents",
    "handler_boundary",
    "not_found",
]
