"""
Canonical protocol definitions for the eventprojector library.

Protocols:
- CanonicalHandler: The single normalized handler shape stored in a projection
- SyncHandler: (connection, event) -> None
- AsyncHandler: async (connection, event) -> None
- CancellableAsyncHandler: async (connection, event, token) -> None
- ProjectionHandlerSource: Anything exposing an ordered sequence of
  ProjectionHandler records (a built Projection or a builder)

Example:
    >>> from eventprojector.protocols import CanonicalHandler
    >>>
    >>> async def on_created(conn, event, token) -> None:
    ...     await conn.execute(...)
    >>> isinstance(on_created, CanonicalHandler)
    True
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from eventprojector.cancellation import CancellationToken
    from eventprojector.handlers.record import ProjectionHandler

TConnection = TypeVar("TConnection", contravariant=True)
TEvent = TypeVar("TEvent", contravariant=True)


@runtime_checkable
class CanonicalHandler(Protocol[TConnection, TEvent]):
    """
    The canonical handler shape.

    Every accepted handler form is normalized to this signature at
    registration time, so dispatchers never branch on the original shape.
    """

    def __call__(
        self, connection: TConnection, event: TEvent, token: CancellationToken
    ) -> Awaitable[Any]: ...


class SyncHandler(Protocol[TConnection, TEvent]):
    """Synchronous action run against the connection."""

    def __call__(self, connection: TConnection, event: TEvent) -> Any: ...


class AsyncHandler(Protocol[TConnection, TEvent]):
    """Asynchronous function that does not observe cancellation."""

    def __call__(self, connection: TConnection, event: TEvent) -> Awaitable[Any]: ...


class CancellableAsyncHandler(Protocol[TConnection, TEvent]):
    """Asynchronous function that receives the cancellation token."""

    def __call__(
        self, connection: TConnection, event: TEvent, token: CancellationToken
    ) -> Awaitable[Any]: ...


# Any of the three accepted registration shapes
AnyHandler: TypeAlias = (
    SyncHandler[Any, Any] | AsyncHandler[Any, Any] | CancellableAsyncHandler[Any, Any]
)


@runtime_checkable
class ProjectionHandlerSource(Protocol):
    """
    Protocol for objects exposing an ordered sequence of handler records.

    Satisfied by Projection (built registry or mutable aggregate) and by
    ProjectionBuilder, so either can seed a new builder.
    """

    @property
    def handlers(self) -> tuple[ProjectionHandler, ...]:
        """All handler records in registration order."""
        ...

    def __iter__(self) -> Iterator[ProjectionHandler]: ...


__all__ = [
    "AnyHandler",
    "AsyncHandler",
    "CancellableAsyncHandler",
    "CanonicalHandler",
    "ProjectionHandlerSource",
    "SyncHandler",
]
