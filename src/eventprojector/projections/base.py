"""
Base class for projections.

A Projection is the ordered collection of handler records that a dispatcher
queries at runtime. It plays two roles:

- The built, immutable result of a ProjectionBuilder
- A long-lived declarative aggregate: subclasses register their handlers
  once, in __init__, with handle() or @handles decorated methods

Example:
    >>> class OrderProjection(Projection):
    ...     def __init__(self) -> None:
    ...         super().__init__()
    ...         self.handle(OrderPlaced, self._on_placed)
    ...         self.handle(OrderShipped, lambda conn, event: conn.execute(...))
    ...
    ...     async def _on_placed(self, conn, event: OrderPlaced) -> None:
    ...         await conn.execute(...)
    >>>
    >>> projection = OrderProjection()
    >>> projection.handlers_for(OrderPlaced(...))
    (ProjectionHandler(OrderPlaced, OrderProjection._on_placed),)
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable, Iterator
from typing import Any, Self, overload

from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.adapter import HandlerShape
from eventprojector.handlers.decorators import get_handled_event_types
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.protocols import AnyHandler
from eventprojector.projections.resolve import ExactTypeResolver

logger = logging.getLogger(__name__)


class Projection:
    """
    Ordered, enumerable collection of projection handler records.

    Registration (handle() and @handles discovery) is meant to happen while
    the projection is being constructed, from a single thread. Every read
    (handlers, iteration, handlers_for) returns an immutable snapshot, so a
    projection that is no longer being registered against is safe to share
    between concurrent dispatchers.

    Conversion to a plain ordered collection works implicitly through
    iteration (list(projection), tuple(projection), unpacking) and explicitly
    through the handlers property and to_list().

    Attributes:
        projection_name: Name of the projection (its class name)
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, handlers: Iterable[ProjectionHandler] = ()) -> None:
        """
        Initialize the projection.

        Args:
            handlers: Initial handler records, copied in order

        Raises:
            InvalidArgumentError: If handlers is None or contains anything
                other than ProjectionHandler records
        """
        if handlers is None:
            raise InvalidArgumentError("handlers")

        self._projection_name = self.__class__.__name__
        self._handlers: list[ProjectionHandler] = []
        self._resolver: ExactTypeResolver | None = None

        for record in handlers:
            if not isinstance(record, ProjectionHandler):
                raise InvalidArgumentError(
                    "handlers",
                    f"Expected ProjectionHandler records, got {type(record).__name__}",
                )
            self._handlers.append(record)

        self._discover_handlers()

    def _discover_handlers(self) -> None:
        """
        Register @handles decorated methods in class definition order.

        Base class methods come first. An override replaces the base method
        in place and is registered only if it is itself decorated.
        """
        names: list[str] = []
        seen: set[str] = set()
        for klass in reversed(type(self).__mro__):
            for attr_name in vars(klass):
                if attr_name not in seen:
                    seen.add(attr_name)
                    names.append(attr_name)

        for attr_name in names:
            # Skip dunder methods
            if attr_name.startswith("__"):
                continue

            # Static lookup so properties are not evaluated during discovery
            raw = inspect.getattr_static(self, attr_name, None)
            if not isinstance(raw, (staticmethod, classmethod)) and not inspect.isfunction(raw):
                continue

            event_types = get_handled_event_types(raw)
            if not event_types:
                continue

            bound = getattr(self, attr_name)
            for event_type in event_types:
                self.handle(event_type, bound)

    def handle(
        self,
        event_type: type,
        handler: AnyHandler | None,
        *,
        shape: HandlerShape | None = None,
    ) -> Self:
        """
        Register a handler for an exact event type.

        Accepts any of the three handler shapes; the handler is normalized to
        the canonical shape and appended after all previously registered
        handlers.

        Args:
            event_type: The exact event class the handler is selected for
            handler: Sync, async or cancellable async handler
            shape: Explicit shape, skipping signature inspection

        Returns:
            This projection, for chaining

        Raises:
            InvalidArgumentError: If handler is None or event_type is not a class
            HandlerSignatureError: If the handler matches no accepted shape
        """
        record = ProjectionHandler.create(event_type, handler, shape=shape)
        self._handlers.append(record)
        self._resolver = None

        logger.debug(
            "Registered handler %s for %s",
            record.name,
            event_type.__name__,
            extra={
                "projection": self._projection_name,
                "handler": record.name,
                "event_type": event_type.__name__,
                "handler_count": len(self._handlers),
            },
        )
        return self

    @property
    def projection_name(self) -> str:
        """Get the projection name."""
        return self._projection_name

    @property
    def handlers(self) -> tuple[ProjectionHandler, ...]:
        """All handler records, unfiltered, in registration order."""
        return tuple(self._handlers)

    @property
    def event_types(self) -> tuple[type, ...]:
        """Distinct registered event types in first registration order."""
        return tuple(dict.fromkeys(record.event_type for record in self._handlers))

    def to_list(self) -> list[ProjectionHandler]:
        """Return the handler records as a new list."""
        return list(self._handlers)

    def handlers_for(self, event: Any) -> tuple[ProjectionHandler, ...]:
        """
        Get the handlers registered for the event's exact run-time type.

        Unmatched events yield an empty tuple, never an error.

        Args:
            event: The event instance

        Returns:
            Matching records in registration order
        """
        resolver = self._resolver
        if resolver is None:
            resolver = ExactTypeResolver(self._handlers)
            self._resolver = resolver
        return resolver(event)

    def __iter__(self) -> Iterator[ProjectionHandler]:
        return iter(self.handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    @overload
    def __getitem__(self, index: int) -> ProjectionHandler: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[ProjectionHandler, ...]: ...

    def __getitem__(self, index: int | slice) -> ProjectionHandler | tuple[ProjectionHandler, ...]:
        return self.handlers[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Projection):
            return NotImplemented
        return type(self) is type(other) and self._handlers == other._handlers

    def __repr__(self) -> str:
        return f"{self._projection_name}(handlers={len(self._handlers)})"


__all__ = ["Projection"]
