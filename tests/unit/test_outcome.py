"""
Unit tests for Outcome.

Tests cover:
- Factory invariants (success carries no error, failure carries one)
- Value access on success and failure
- map/bind/ensure chaining, sync and async
- combine
"""

import pytest

from ordertrack.exceptions import InvalidOutcomeStateError
from ordertrack.outcome import Outcome


class TestOutcomeConstruction:
    """Tests for success/failure factories."""

    def test_success(self) -> None:
        outcome = Outcome.success(42)

        assert outcome.is_success is True
        assert outcome.is_failure is False
        assert outcome.value == 42
        assert outcome.error == ""

    def test_success_may_carry_none(self) -> None:
        assert Outcome.success(None).value is None

    def test_failure(self) -> None:
        outcome: Outcome[int] = Outcome.failure("Customer not found")

        assert outcome.is_success is False
        assert outcome.is_failure is True
        assert outcome.error == "Customer not found"

    def test_failure_value_access_raises(self) -> None:
        outcome: Outcome[int] = Outcome.failure("boom")

        with pytest.raises(InvalidOutcomeStateError, match="Cannot access value"):
            _ = outcome.value

    def test_failure_requires_message(self) -> None:
        with pytest.raises(InvalidOutcomeStateError, match="must have an error message"):
            Outcome.failure("")

    def test_success_cannot_have_error(self) -> None:
        with pytest.raises(InvalidOutcomeStateError, match="cannot have an error message"):
            Outcome(is_success=True, _value=1, error="oops")

    def test_equality(self) -> None:
        assert Outcome.success(1) == Outcome.success(1)
        assert Outcome.failure("e") == Outcome.failure("e")
        assert Outcome.success(1) != Outcome.failure("e")

    def test_repr(self) -> None:
        assert repr(Outcome.success(3)) == "Outcome.success(3)"
        assert repr(Outcome.failure("bad")) == "Outcome.failure('bad')"


class TestOutcomeChaining:
    """Tests for map, bind and ensure."""

    def test_map_success(self) -> None:
        assert Outcome.success(2).map(lambda x: x * 10) == Outcome.success(20)

    def test_map_failure_never_invokes_mapper(self) -> None:
        calls: list[int] = []

        def mapper(x: int) -> int:
            calls.append(x)
            return x

        outcome: Outcome[int] = Outcome.failure("e")

        assert outcome.map(mapper) == Outcome.failure("e")
        assert calls == []

    def test_bind_success(self) -> None:
        def half(x: int) -> Outcome[int]:
            return Outcome.success(x // 2) if x % 2 == 0 else Outcome.failure("odd")

        assert Outcome.success(10).bind(half) == Outcome.success(5)
        assert Outcome.success(3).bind(half) == Outcome.failure("odd")

    def test_bind_failure_short_circuits(self) -> None:
        outcome: Outcome[int] = Outcome.failure("first")

        assert outcome.bind(lambda x: Outcome.failure("second")) == Outcome.failure("first")

    def test_ensure(self) -> None:
        assert Outcome.success(5).ensure(lambda x: x > 0, "must be positive") == Outcome.success(5)
        assert Outcome.success(-1).ensure(lambda x: x > 0, "must be positive") == (
            Outcome.failure("must be positive")
        )

    def test_ensure_keeps_original_failure(self) -> None:
        outcome: Outcome[int] = Outcome.failure("original")

        assert outcome.ensure(lambda x: False, "other") == Outcome.failure("original")

    def test_get_value_or_default(self) -> None:
        assert Outcome.success(1).get_value_or_default(0) == 1
        assert Outcome.failure("e").get_value_or_default(0) == 0
        assert Outcome.failure("e").get_value_or_default() is None

    @pytest.mark.asyncio
    async def test_map_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await Outcome.success(4).map_async(double) == Outcome.success(8)
        assert await Outcome.failure("e").map_async(double) == Outcome.failure("e")

    @pytest.mark.asyncio
    async def test_bind_async(self) -> None:
        async def check(x: int) -> Outcome[int]:
            return Outcome.success(x) if x else Outcome.failure("zero")

        assert await Outcome.success(1).bind_async(check) == Outcome.success(1)
        assert await Outcome.success(0).bind_async(check) == Outcome.failure("zero")


class TestOutcomeCombine:
    """Tests for combine."""

    def test_all_success(self) -> None:
        assert Outcome.combine(Outcome.success(1), Outcome.success("a")) == Outcome.success(None)

    def test_errors_joined_in_order(self) -> None:
        combined = Outcome.combine(
            Outcome.failure("first"),
            Outcome.success(1),
            Outcome.failure("second"),
        )

        assert combined.error == "first; second"

    def test_empty(self) -> None:
        assert Outcome.combine().is_success
