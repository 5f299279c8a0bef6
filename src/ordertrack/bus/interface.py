"""
Event publication interface.

Handlers drain an aggregate's events after a successful save and hand
them to an :class:`EventPublisher`. What happens next (in-process
dispatch, a message broker, an outbox table) is up to the implementation.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, runtime_checkable

from ordertrack.events.base import DomainEvent

# Type alias for simple function-based handlers
EventHandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]


@runtime_checkable
class EventHandler(Protocol):
    """Object-style subscriber with a sync or async ``handle`` method."""

    def handle(self, event: DomainEvent) -> Awaitable[None] | None: ...


@runtime_checkable
class EventPublisher(Protocol):
    """
    Receiver of drained domain events.

    ``publish`` receives events in the order they were recorded. It is
    called at most once per drained batch.

    Example:
        >>> publisher: EventPublisher = InMemoryEventBus()
        >>> await publisher.publish(order.drain_events())
    """

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """Publish events in order."""
        ...


__all__ = [
    "EventHandler",
    "EventHandlerFunc",
    "EventPublisher",
]
