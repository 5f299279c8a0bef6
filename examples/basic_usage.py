"""
Basic Usage Example

This example demonstrates the fundamental ordertrack workflow:
- Wiring repositories, an event bus and handlers
- Creating a customer and placing an order
- Walking the order through its status state machine
- Reading failures from Outcome values instead of exceptions

Run with: python examples/basic_usage.py
"""

import asyncio
import logging
from decimal import Decimal

from ordertrack import (
    CancelOrderCommand,
    CancelOrderHandler,
    ConfirmOrderCommand,
    ConfirmOrderHandler,
    CreateCustomerCommand,
    CreateCustomerHandler,
    CreateOrderCommand,
    CreateOrderHandler,
    DomainEvent,
    InMemoryEventBus,
    OrderTrackConfig,
    ShipOrderCommand,
    ShipOrderHandler,
    SQLiteStore,
)


def print_event(event: DomainEvent) -> None:
    print(f"   [event] {event.event_type} for {event.aggregate_type} {event.aggregate_id}")


async def main() -> None:
    logging.basicConfig(level=logging.WARNING)

    print("=" * 60)
    print("ordertrack Basic Usage Example")
    print("=" * 60)

    bus = InMemoryEventBus(enable_tracing=False)
    bus.subscribe_to_all(print_event)

    async with SQLiteStore(OrderTrackConfig(enable_tracing=False)) as store:
        await store.initialize()
        customers = store.customers()
        orders = store.orders()

        print("\n1. Creating a customer")
        created = await CreateCustomerHandler(customers, bus).handle(
            CreateCustomerCommand(name="Ada Lovelace", email="Ada@Example.com")
        )
        customer = created.value
        print(f"   {customer.name} <{customer.email}>")

        print("\n2. Rejecting a duplicate email")
        duplicate = await CreateCustomerHandler(customers, bus).handle(
            CreateCustomerCommand(name="Someone Else", email="ada@example.com")
        )
        print(f"   Failure: {duplicate.error}")

        print("\n3. Placing and shipping an order")
        placed = await CreateOrderHandler(customers, orders, bus).handle(
            CreateOrderCommand(customer_id=customer.id.value, total_amount=Decimal("1234.567"))
        )
        order_id = placed.value.id.value
        print(f"   Total: {placed.value.total_amount}")

        await ConfirmOrderHandler(orders, bus).handle(ConfirmOrderCommand(order_id=order_id))
        shipped = await ShipOrderHandler(orders, bus).handle(ShipOrderCommand(order_id=order_id))
        print(f"   Status: {shipped.value.status}")

        print("\n4. Trying to cancel a shipped order")
        cancelled = await CancelOrderHandler(orders, bus).handle(
            CancelOrderCommand(order_id=order_id)
        )
        print(f"   Failure: {cancelled.error}")

    print("\n" + "=" * 60)
    print(f"Published {len(bus.published_events)} events")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
