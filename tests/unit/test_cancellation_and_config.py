"""
Unit tests for CancellationToken and OrderTrackConfig.
"""

import asyncio
import os

import pytest
from pydantic import ValidationError

from ordertrack.cancellation import CancellationToken, check_cancelled
from ordertrack.config import OrderTrackConfig
from ordertrack.exceptions import OperationCancelledError

# =============================================================================
# Cancellation
# =============================================================================


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_starts_uncancelled(self) -> None:
        token = CancellationToken()

        assert token.is_cancelled is False
        token.raise_if_cancelled("anything")

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel()
        token.cancel()

        assert token.is_cancelled is True

    def test_raise_if_cancelled(self) -> None:
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError) as exc_info:
            token.raise_if_cancelled("save order")

        assert exc_info.value.operation == "save order"
        assert str(exc_info.value) == "Operation cancelled during save order"

    def test_check_cancelled_accepts_none(self) -> None:
        check_cancelled(None, "list orders")

    def test_check_cancelled_raises(self) -> None:
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            check_cancelled(token)

    @pytest.mark.asyncio
    async def test_wait_returns_after_cancel(self) -> None:
        token = CancellationToken()
        waiter = asyncio.create_task(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        token.cancel()
        await asyncio.wait_for(waiter, timeout=1.0)

        assert waiter.done()


# =============================================================================
# Configuration
# =============================================================================


class TestOrderTrackConfig:
    """Tests for OrderTrackConfig."""

    @pytest.fixture(autouse=True)
    def clean_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in list(os.environ):
            if name.upper().startswith(("ORDERTRACK_", "APP_")):
                monkeypatch.delenv(name)

    def test_defaults(self) -> None:
        config = OrderTrackConfig()

        assert config.database == ":memory:"
        assert config.is_memory_database is True
        assert config.busy_timeout_ms == 5000
        assert config.wal_mode is False
        assert config.default_currency == "USD"
        assert config.default_search_limit == 50
        assert config.max_search_limit == 500
        assert config.enable_tracing is True

    def test_currency_uppercased(self) -> None:
        assert OrderTrackConfig(default_currency="eur").default_currency == "EUR"

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"database": ""}, "database must not be empty"),
            ({"busy_timeout_ms": -1}, "busy_timeout_ms must be >= 0"),
            ({"default_currency": "EURO"}, "default_currency must be a 3-letter code"),
            ({"default_currency": "E1R"}, "default_currency must be a 3-letter code"),
            ({"max_search_limit": 0}, "max_search_limit must be positive"),
            ({"default_search_limit": 0}, "default_search_limit must be between"),
            (
                {"default_search_limit": 100, "max_search_limit": 10},
                "default_search_limit must be between",
            ),
        ],
    )
    def test_validation(self, kwargs: dict[str, object], match: str) -> None:
        with pytest.raises(ValidationError, match=match):
            OrderTrackConfig(**kwargs)  # type: ignore[arg-type]

    def test_is_frozen(self) -> None:
        config = OrderTrackConfig()

        with pytest.raises(ValidationError):
            config.database = "other.db"  # type: ignore[misc]

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ORDERTRACK_DATABASE", "orders.db")
        monkeypatch.setenv("ORDERTRACK_BUSY_TIMEOUT_MS", "250")
        monkeypatch.setenv("ORDERTRACK_WAL_MODE", "yes")
        monkeypatch.setenv("ORDERTRACK_DEFAULT_CURRENCY", "gbp")
        monkeypatch.setenv("ORDERTRACK_DEFAULT_SEARCH_LIMIT", "20")
        monkeypatch.setenv("ORDERTRACK_MAX_SEARCH_LIMIT", "100")
        monkeypatch.setenv("ORDERTRACK_ENABLE_TRACING", "false")
        monkeypatch.setenv("UNRELATED", "ignored")

        config = OrderTrackConfig.from_env()

        assert config.database == "orders.db"
        assert config.busy_timeout_ms == 250
        assert config.wal_mode is True
        assert config.default_currency == "GBP"
        assert config.default_search_limit == 20
        assert config.max_search_limit == 100
        assert config.enable_tracing is False
        assert config.is_memory_database is False

    def test_keyword_arguments_override_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ORDERTRACK_DATABASE", "orders.db")

        assert OrderTrackConfig(database="other.db").database == "other.db"

    def test_unset_variables_keep_defaults(self) -> None:
        assert OrderTrackConfig.from_env() == OrderTrackConfig()

    def test_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_DATABASE", "app.db")

        config = OrderTrackConfig.from_env(prefix="APP_")

        assert config.database == "app.db"

    @pytest.mark.parametrize(
        "name,raw,match",
        [
            ("ORDERTRACK_WAL_MODE", "maybe", "valid boolean"),
            ("ORDERTRACK_BUSY_TIMEOUT_MS", "soon", "valid integer"),
            ("ORDERTRACK_DEFAULT_CURRENCY", "dollars", "3-letter code"),
        ],
    )
    def test_rejects_unparseable_variables(
        self, monkeypatch: pytest.MonkeyPatch, name: str, raw: str, match: str
    ) -> None:
        monkeypatch.setenv(name, raw)

        with pytest.raises(ValidationError, match=match):
            OrderTrackConfig.from_env()
