"""
Capabilities shared by the Customer and Order aggregates.

Aggregates do not inherit from a common root. Each one owns an
:class:`EventRecorder` for its pending events and is decorated with
:func:`identity_equality` to compare by id.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from ordertrack.events.base import DomainEvent

logger = logging.getLogger(__name__)

TAggregate = TypeVar("TAggregate", bound=type)


class EventRecorder:
    """
    Append-only list of events recorded but not yet published.

    The list itself is never exposed. ``pending_events`` returns an
    immutable snapshot and ``drain_events`` hands the events over to
    the caller and clears the recorder, so each event is drained once.

    Example:
        >>> recorder = EventRecorder()
        >>> recorder.record(event)
        >>> events = recorder.drain_events()
        >>> assert not recorder.has_pending_events
    """

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending: list[DomainEvent] = []

    def record(self, event: DomainEvent) -> None:
        """Append event to the pending list."""
        self._pending.append(event)
        logger.debug(
            "Recorded %s for %s %s",
            event.event_type,
            event.aggregate_type,
            event.aggregate_id,
            extra={
                "event_type": event.event_type,
                "aggregate_id": str(event.aggregate_id),
            },
        )

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        """Events recorded since the last drain, oldest first."""
        return tuple(self._pending)

    @property
    def has_pending_events(self) -> bool:
        """Check if there are events waiting to be published."""
        return len(self._pending) > 0

    def drain_events(self) -> list[DomainEvent]:
        """
        Return every pending event in order and clear the recorder.

        Ownership of the returned list passes to the caller.
        """
        drained, self._pending = self._pending, []
        return drained

    def __len__(self) -> int:
        return len(self._pending)


def identity_equality(
    id_attribute: str = "id",
) -> Callable[[TAggregate], TAggregate]:
    """
    Class decorator giving equality and hashing by identity.

    Two instances are equal when they are of the same class and their
    ``id_attribute`` values are equal, regardless of any other state.

    Args:
        id_attribute: Name of the attribute holding the identifier

    Example:
        >>> @identity_equality()
        ... class Order:
        ...     def __init__(self, id):
        ...         self.id = id
    """

    def decorate(cls: TAggregate) -> TAggregate:
        def __eq__(self: Any, other: object) -> bool:
            if not isinstance(other, cls):
                return NotImplemented
            return bool(getattr(self, id_attribute) == getattr(other, id_attribute))

        def __hash__(self: Any) -> int:
            return hash((cls.__name__, getattr(self, id_attribute)))

        cls.__eq__ = __eq__  # type: ignore[method-assign,assignment]
        cls.__hash__ = __hash__  # type: ignore[method-assign,assignment]
        return cls

    return decorate


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse an ISO timestamp, assuming UTC when it carries no offset."""
    if value is None:
        return None
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


__all__ = [
    "EventRecorder",
    "identity_equality",
    "parse_timestamp",
    "utcnow",
]
