"""
Handler records stored in projections.

A ProjectionHandler pairs the exact event type a handler was registered for
with the handler in its canonical (connection, event, token) shape.
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any

from eventprojector.cancellation import CancellationToken
from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.adapter import (
    CanonicalHandlerFunc,
    HandlerShape,
    get_handler_name,
    normalize_handler,
)
from eventprojector.protocols import AnyHandler


@dataclass(frozen=True)
class ProjectionHandler:
    """
    Immutable record of one registered handler.

    Records are created once at registration and never mutated. Two records
    are equal when they target the same event type with equal canonical
    handlers (adapters compare by the handler they wrap); the name is
    informational only.

    Attributes:
        event_type: The exact event class this handler is selected for
        handler: Canonical handler (connection, event, token) -> Awaitable
        name: Descriptive name of the originally registered handler

    Example:
        >>> record = ProjectionHandler.create(OrderPlaced, on_order_placed)
        >>> record.matches(OrderPlaced(...))
        True
        >>> await record.invoke(conn, event, token)
    """

    event_type: type
    handler: CanonicalHandlerFunc
    name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.event_type is None:
            raise InvalidArgumentError("event_type")
        if not isinstance(self.event_type, type):
            raise InvalidArgumentError(
                "event_type",
                f"Event type must be a class, got {self.event_type!r}",
            )
        if self.handler is None:
            raise InvalidArgumentError("handler")
        if not callable(self.handler):
            raise InvalidArgumentError(
                "handler",
                f"Handler must be callable, got {type(self.handler).__name__}",
            )
        if not self.name:
            original = getattr(self.handler, "original", self.handler)
            object.__setattr__(self, "name", get_handler_name(original))

    @classmethod
    def create(
        cls,
        event_type: type,
        handler: AnyHandler | None,
        *,
        shape: HandlerShape | None = None,
    ) -> ProjectionHandler:
        """
        Normalize a handler of any accepted shape and wrap it in a record.

        Args:
            event_type: The exact event class to select this handler for
            handler: Sync, async or cancellable async handler
            shape: Explicit shape, skipping signature inspection

        Returns:
            A new ProjectionHandler

        Raises:
            InvalidArgumentError: If handler is None or event_type is not a class
            HandlerSignatureError: If the handler matches no accepted shape
        """
        canonical = normalize_handler(handler, shape)
        return cls(event_type=event_type, handler=canonical, name=get_handler_name(handler))

    def matches(self, event: Any) -> bool:
        """Whether the event's run-time type is exactly this record's event type."""
        return type(event) is self.event_type

    def invoke(
        self,
        connection: Any,
        event: Any,
        token: CancellationToken | None = None,
    ) -> Awaitable[Any]:
        """
        Invoke the canonical handler.

        Failures are not caught; they surface either synchronously (sync
        handlers) or when the returned awaitable is awaited.

        Args:
            connection: The read-model connection, passed through unexamined
            event: The event instance
            token: Cancellation token (defaults to CancellationToken.none())

        Returns:
            The handler's awaitable completion
        """
        return self.handler(
            connection,
            event,
            token if token is not None else CancellationToken.none(),
        )

    def __repr__(self) -> str:
        return f"ProjectionHandler({self.event_type.__name__}, {self.name})"


__all__ = ["ProjectionHandler"]
