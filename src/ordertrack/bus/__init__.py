"""Event publication for drained domain events."""

from ordertrack.bus.interface import EventHandler, EventHandlerFunc, EventPublisher
from ordertrack.bus.memory import InMemoryEventBus

__all__ = [
    "EventHandler",
    "EventHandlerFunc",
    "EventPublisher",
    "InMemoryEventBus",
]
