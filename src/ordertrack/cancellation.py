"""
Cooperative cancellation for handler and repository calls.

A :class:`CancellationToken` is created by the caller (usually the
transport layer, once per request) and threaded through every handler
and repository call. It is checked at each repository boundary; the
domain core itself never blocks.

Example:
    >>> token = CancellationToken()
    >>> outcome = await handler.handle(command, cancellation=token)
    >>> # From elsewhere, e.g. on client disconnect:
    >>> token.cancel()
"""

import asyncio

from ordertrack.exceptions import OperationCancelledError


class CancellationToken:
    """
    Flag signalling that the caller no longer wants the result.

    Cancelling is one-way and idempotent.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation of every operation holding this token."""
        self._event.set()

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self, operation: str | None = None) -> None:
        """
        Raise if cancellation was requested.

        Raises:
            OperationCancelledError: If the token is cancelled
        """
        if self._event.is_set():
            raise OperationCancelledError(operation)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"


def check_cancelled(token: CancellationToken | None, operation: str | None = None) -> None:
    """Raise OperationCancelledError if token is set and cancelled; None never cancels."""
    if token is not None:
        token.raise_if_cancelled(operation)


__all__ = [
    "CancellationToken",
    "check_cancelled",
]
