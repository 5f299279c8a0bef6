"""
Runtime configuration for ordertrack components.

:class:`OrderTrackConfig` is consumed by :class:`~ordertrack.repositories.sqlite.SQLiteStore`
(connection settings) and by the order and search handlers (default currency,
page size bounds). Values come from keyword arguments first, then
``ORDERTRACK_*`` environment variables, then the defaults below.
"""

from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrderTrackConfig(BaseSettings):
    """
    Configuration for repositories and handlers.

    Attributes:
        database: SQLite database path, or ":memory:" for an in-memory database
        busy_timeout_ms: How long SQLite waits on a locked database
        wal_mode: Enable write-ahead logging (ignored for ":memory:")
        default_currency: Currency used when a request omits one
        default_search_limit: Page size used when a search omits a limit
        max_search_limit: Largest page size a search may request
        enable_tracing: Whether components create OpenTelemetry spans

    Example:
        >>> config = OrderTrackConfig(database="orders.db", wal_mode=True)
        >>> config = OrderTrackConfig()  # reads ORDERTRACK_DATABASE, ORDERTRACK_WAL_MODE, ...
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDERTRACK_",
        frozen=True,
        extra="ignore",
    )

    database: str = ":memory:"
    busy_timeout_ms: int = 5000
    wal_mode: bool = False
    default_currency: str = "USD"
    default_search_limit: int = 50
    max_search_limit: int = 500
    enable_tracing: bool = True

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str) -> str:
        if not v:
            raise ValueError(
                "database must not be empty. Use ':memory:' for an in-memory database."
            )
        return v

    @field_validator("busy_timeout_ms")
    @classmethod
    def validate_busy_timeout(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"busy_timeout_ms must be >= 0, got {v}.")
        return v

    @field_validator("default_currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: object) -> object:
        if isinstance(v, str):
            v = v.strip()
            if len(v) != 3 or not v.isalpha():
                raise ValueError(f"default_currency must be a 3-letter code, got {v!r}.")
            return v.upper()
        return v

    @field_validator("max_search_limit")
    @classmethod
    def validate_max_search_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_search_limit must be positive, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_search_limits(self) -> OrderTrackConfig:
        if not 1 <= self.default_search_limit <= self.max_search_limit:
            raise ValueError(
                f"default_search_limit must be between 1 and max_search_limit "
                f"({self.max_search_limit}), got {self.default_search_limit}."
            )
        return self

    @property
    def is_memory_database(self) -> bool:
        return self.database == ":memory:"

    @classmethod
    def from_env(cls, prefix: str = "ORDERTRACK_") -> OrderTrackConfig:
        """
        Build a configuration from environment variables only.

        Args:
            prefix: Variable name prefix

        Raises:
            pydantic.ValidationError: If a variable cannot be parsed or fails validation
        """
        return cls(_env_prefix=prefix)  # type: ignore[call-arg]


__all__ = ["OrderTrackConfig"]
