"""
Cancellation tokens for projection handlers.

Every canonical handler receives a CancellationToken as its third argument.
The token is an explicit value threaded through each invocation rather than
ambient state, so handlers and dispatchers can observe cancellation without
any global context.

This module provides:
- CancellationTokenSource: Owner side, used to request cancellation
- CancellationToken: Observer side, passed to handlers

Example:
    >>> source = CancellationTokenSource()
    >>> token = source.token
    >>> token.is_cancellation_requested
    False
    >>> source.cancel("shutting down")
    >>> token.raise_if_cancellation_requested()
    Traceback (most recent call last):
    ...
    OperationCancelledError: Operation was cancelled: shutting down
"""

from __future__ import annotations

import asyncio
import logging

from eventprojector.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Read-only view of a cancellation request.

    Tokens are created by a CancellationTokenSource. Use
    CancellationToken.none() where no cancellation can ever occur.
    """

    __slots__ = ("_source",)

    _NONE: CancellationToken | None = None

    def __init__(self, source: CancellationTokenSource | None = None) -> None:
        self._source = source

    @classmethod
    def none(cls) -> CancellationToken:
        """Return the shared token that is never cancelled."""
        if cls._NONE is None:
            cls._NONE = cls(None)
        return cls._NONE

    @property
    def can_be_cancelled(self) -> bool:
        """Whether this token is backed by a source."""
        return self._source is not None

    @property
    def is_cancellation_requested(self) -> bool:
        """True once the owning source has been cancelled."""
        return self._source is not None and self._source.is_cancelled

    @property
    def reason(self) -> str | None:
        """The reason passed to CancellationTokenSource.cancel(), if any."""
        return self._source.reason if self._source is not None else None

    def raise_if_cancellation_requested(self) -> None:
        """
        Raise if cancellation has been requested.

        Raises:
            OperationCancelledError: If the owning source was cancelled
        """
        if self.is_cancellation_requested:
            raise OperationCancelledError(self.reason)

    async def wait(self) -> None:
        """
        Wait until cancellation is requested.

        Waits forever for a token without a source.
        """
        if self._source is None:
            await asyncio.Event().wait()
            return
        await self._source.wait()

    def __repr__(self) -> str:
        if self._source is None:
            return "CancellationToken(none)"
        return f"CancellationToken(cancelled={self.is_cancellation_requested})"


class CancellationTokenSource:
    """
    Signals cancellation to the tokens it hands out.

    Example:
        >>> source = CancellationTokenSource()
        >>> await projector.project_many(conn, events, source.token)
        >>> # elsewhere
        >>> source.cancel("shutdown")
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None
        self._event = asyncio.Event()
        self._token = CancellationToken(self)

    @property
    def token(self) -> CancellationToken:
        """The token observing this source."""
        return self._token

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    @property
    def reason(self) -> str | None:
        """Reason given to cancel()."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """
        Request cancellation.

        Calling cancel() more than once keeps the first reason.

        Args:
            reason: Optional human readable reason
        """
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        self._event.set()
        logger.debug(
            "Cancellation requested: %s",
            reason or "no reason given",
            extra={"reason": reason},
        )

    async def wait(self) -> None:
        """Wait until cancel() is called."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationTokenSource(cancelled={self._cancelled})"


__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
]
