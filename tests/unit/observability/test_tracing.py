"""
Tests for the tracing helpers and the spans components emit.
"""

import pytest

from ordertrack.aggregates import Customer, Order
from ordertrack.observability import (
    OTEL_AVAILABLE,
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    create_tracer,
)
from ordertrack.observability.attributes import (
    ATTR_CUSTOMER_ID,
    ATTR_QUERY_LIMIT,
    ATTR_QUERY_OFFSET,
    ATTR_RESULT_COUNT,
)
from ordertrack.repositories import (
    CustomerFilters,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
)


class TestCreateTracer:
    """Tests for the tracer factory."""

    def test_disabled_returns_null_tracer(self) -> None:
        tracer = create_tracer(__name__, enable_tracing=False)

        assert isinstance(tracer, NullTracer)
        assert tracer.enabled is False

    def test_enabled_follows_availability(self) -> None:
        tracer = create_tracer(__name__, enable_tracing=True)

        if OTEL_AVAILABLE:
            assert isinstance(tracer, OpenTelemetryTracer)
        else:
            assert isinstance(tracer, NullTracer)

    def test_null_tracer_span_is_noop(self) -> None:
        with NullTracer().span("anything", {"key": "value"}) as span:
            assert span is None


class TestMockTracer:
    """Tests for MockTracer."""

    def test_records_spans(self) -> None:
        tracer = MockTracer()

        with tracer.span("first", {"a": 1}):
            pass
        with tracer.span("second"):
            pass

        assert tracer.spans == [("first", {"a": 1}), ("second", {})]
        assert tracer.span_names == ["first", "second"]

        tracer.clear()
        assert tracer.spans == []

    def test_span_attributes_can_be_set_inside_the_span(self) -> None:
        tracer = MockTracer()

        with tracer.span("work", {"a": 1}) as span:
            span.set_attribute("b", 2)

        assert tracer.spans == [("work", {"a": 1, "b": 2})]


class TestInMemoryRepositorySpans:
    """In-memory repositories emit the same span names as the SQLite ones."""

    @pytest.mark.asyncio
    async def test_customer_repository_spans(self, customer: Customer) -> None:
        tracer = MockTracer()
        repo = InMemoryCustomerRepository(tracer=tracer)

        await repo.save(customer)
        await repo.find_by_id(customer.id)

        assert tracer.span_names == [
            "ordertrack.customer_repository.save",
            "ordertrack.customer_repository.find_by_id",
        ]
        _, attributes = tracer.spans[0]
        assert attributes == {ATTR_CUSTOMER_ID: str(customer.id)}

    @pytest.mark.asyncio
    async def test_listing_spans_record_result_count(self, customer: Customer) -> None:
        tracer = MockTracer()
        repo = InMemoryCustomerRepository(tracer=tracer)
        await repo.save(customer)
        tracer.clear()

        await repo.list_all()
        await repo.search(CustomerFilters(name_contains="nobody"), limit=10)

        assert tracer.spans == [
            ("ordertrack.customer_repository.list_all", {ATTR_RESULT_COUNT: 1}),
            (
                "ordertrack.customer_repository.search",
                {ATTR_QUERY_LIMIT: 10, ATTR_QUERY_OFFSET: 0, ATTR_RESULT_COUNT: 0},
            ),
        ]

    @pytest.mark.asyncio
    async def test_order_listing_spans_record_result_count(
        self, customer: Customer, order: Order
    ) -> None:
        tracer = MockTracer()
        repo = InMemoryOrderRepository(tracer=tracer)
        await repo.save(order)
        tracer.clear()

        await repo.find_by_customer(customer.id)
        await repo.list_all()

        _, by_customer = tracer.spans[0]
        _, listing = tracer.spans[1]
        assert by_customer[ATTR_RESULT_COUNT] == 1
        assert listing == {ATTR_RESULT_COUNT: 1}
