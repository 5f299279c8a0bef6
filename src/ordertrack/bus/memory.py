"""In-memory event bus implementation.

This module provides an in-memory publisher that distributes drained
domain events to subscribers within the same process.

Suitable for development, testing, and single-instance deployments.
"""

import inspect
import logging
import threading
from collections import defaultdict
from collections.abc import Sequence

from ordertrack.bus.interface import EventHandler, EventHandlerFunc
from ordertrack.events.base import DomainEvent
from ordertrack.observability import Tracer, create_tracer
from ordertrack.observability.attributes import (
    ATTR_EVENT_COUNT,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
)

logger = logging.getLogger(__name__)

Subscriber = EventHandler | EventHandlerFunc


def _handler_name(handler: Subscriber) -> str:
    name = getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None)
    return name or type(handler).__name__


class InMemoryEventBus:
    """
    In-memory event bus for event distribution.

    Features:
    - Thread-safe subscription management
    - Support for sync and async handlers, callables or objects with ``handle()``
    - Wildcard subscriptions (receive all events)
    - Ordered dispatch: events in publish order, handlers in subscription order
    - Error isolation (handler failures don't stop other handlers)
    - History of every published event for assertions in tests

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(OrderCreated, my_handler)
        >>> await bus.publish(order.drain_events())
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the event bus with empty subscriber registry.

        Args:
            tracer: Optional custom Tracer instance. If not provided, one is
                   created based on enable_tracing setting.
            enable_tracing: If True and OpenTelemetry is available, emit traces.
                          Ignored if tracer is explicitly provided.
        """
        self._subscribers: dict[type[DomainEvent], list[Subscriber]] = defaultdict(list)
        self._all_event_handlers: list[Subscriber] = []
        self._lock = threading.RLock()
        self._published: list[DomainEvent] = []
        self._stats = {
            "events_published": 0,
            "handlers_invoked": 0,
            "handler_errors": 0,
        }

        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """
        Publish events to all registered subscribers.

        Events are processed sequentially to maintain ordering guarantees.
        Handler failures are logged but don't prevent other handlers from running.

        Args:
            events: Events to publish, oldest first
        """
        if not events:
            return

        with self._tracer.span(
            "ordertrack.event_bus.publish",
            {ATTR_EVENT_COUNT: len(events)},
        ):
            for event in events:
                self._published.append(event)
                await self._dispatch_event(event)
                self._stats["events_published"] += 1

    async def _dispatch_event(self, event: DomainEvent) -> None:
        event_type = type(event)

        with self._lock:
            handlers = list(self._subscribers.get(event_type, [])) + list(self._all_event_handlers)

        if not handlers:
            logger.debug(
                "No handlers registered for event type: %s",
                event_type.__name__,
                extra={"event_type": event_type.__name__},
            )
            return

        with self._tracer.span(
            "ordertrack.event_bus.dispatch",
            {
                ATTR_EVENT_TYPE: event_type.__name__,
                ATTR_EVENT_ID: str(event.event_id),
                ATTR_HANDLER_COUNT: len(handlers),
            },
        ):
            for handler in handlers:
                await self._safe_handle(handler, event)

    async def _safe_handle(self, handler: Subscriber, event: DomainEvent) -> None:
        """Execute one handler, logging and counting any exception it raises."""
        name = _handler_name(handler)
        with self._tracer.span(
            "ordertrack.event_bus.handle",
            {
                ATTR_EVENT_TYPE: event.event_type,
                ATTR_HANDLER_NAME: name,
            },
        ) as span:
            try:
                if isinstance(handler, EventHandler) and not inspect.isfunction(handler):
                    result = handler.handle(event)
                else:
                    result = handler(event)  # type: ignore[operator]
                if inspect.isawaitable(result):
                    await result
                self._stats["handlers_invoked"] += 1
            except Exception as e:
                if span:
                    span.record_exception(e)
                self._stats["handler_errors"] += 1
                logger.error(
                    "Handler %s failed processing %s: %s",
                    name,
                    event.event_type,
                    e,
                    exc_info=True,
                    extra={
                        "handler": name,
                        "event_type": event.event_type,
                        "event_id": str(event.event_id),
                    },
                )

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: Subscriber,
    ) -> None:
        """
        Subscribe a handler to a specific event type.

        Args:
            event_type: The event class to subscribe to
            handler: Object with handle() method or callable
        """
        with self._lock:
            self._subscribers[event_type].append(handler)

        logger.info(
            "Registered handler %s for %s",
            _handler_name(handler),
            event_type.__name__,
            extra={"handler": _handler_name(handler), "event_type": event_type.__name__},
        )

    def unsubscribe(
        self,
        event_type: type[DomainEvent],
        handler: Subscriber,
    ) -> bool:
        """
        Unsubscribe a handler from a specific event type.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        with self._lock:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def subscribe_to_all(self, handler: Subscriber) -> None:
        """
        Subscribe a handler to all event types (wildcard subscription).

        Wildcard handlers run after the type-specific handlers of each event.
        """
        with self._lock:
            self._all_event_handlers.append(handler)

        logger.info(
            "Registered wildcard handler %s",
            _handler_name(handler),
            extra={"handler": _handler_name(handler)},
        )

    @property
    def published_events(self) -> list[DomainEvent]:
        """Every event published so far, in order (a copy)."""
        return list(self._published)

    def get_subscriber_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """
        Get the number of registered subscribers.

        Args:
            event_type: If provided, count only handlers for this type
                        (wildcards excluded); otherwise count all handlers.
        """
        with self._lock:
            if event_type is not None:
                return len(self._subscribers.get(event_type, []))
            return sum(len(h) for h in self._subscribers.values()) + len(
                self._all_event_handlers
            )

    def get_stats(self) -> dict[str, int]:
        """Get a copy of the publishing statistics."""
        return dict(self._stats)

    def clear_subscribers(self) -> None:
        """Remove all subscribers. Useful for test teardown."""
        with self._lock:
            self._subscribers.clear()
            self._all_event_handlers.clear()

    def clear_history(self) -> None:
        """Forget the published event history."""
        self._published.clear()


__all__ = ["InMemoryEventBus"]
