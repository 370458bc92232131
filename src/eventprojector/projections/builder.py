"""
Immutable projection builder.

ProjectionBuilder is a persistent, fluent way to assemble a projection: every
registration returns a new builder and leaves the receiver untouched, so
intermediate builders can be kept, shared and branched.

Example:
    >>> base = ProjectionBuilder().when(OrderPlaced, insert_order)
    >>> with_audit = base.when(OrderPlaced, write_audit_row)
    >>> len(base), len(with_audit)
    (1, 2)
    >>> projection = with_audit.build()
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.adapter import HandlerShape
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.projections.base import Projection
from eventprojector.protocols import AnyHandler

logger = logging.getLogger(__name__)


def _snapshot(handlers: Iterable[ProjectionHandler] | None, argument: str) -> tuple[ProjectionHandler, ...]:
    if handlers is None:
        raise InvalidArgumentError(argument)
    records = tuple(handlers)
    for record in records:
        if not isinstance(record, ProjectionHandler):
            raise InvalidArgumentError(
                argument,
                f"Expected ProjectionHandler records, got {type(record).__name__}",
            )
    return records


class ProjectionBuilder:
    """
    Fluent, persistent accumulator of projection handler records.

    Builders are values: when() and include() return new builders whose
    records are the receiver's records plus the new ones appended at the end.
    The receiver is never mutated, so a builder handed to another caller is
    never affected by later registrations.

    Example:
        >>> projection = (
        ...     ProjectionBuilder()
        ...     .when(OrderPlaced, lambda conn, e: conn.execute(insert_stmt(e)))
        ...     .when(OrderShipped, mark_shipped)
        ...     .build()
        ... )
        >>>
        >>> # Extend an existing projection without re-registering its handlers
        >>> extended = ProjectionBuilder(projection).when(OrderCancelled, remove_order).build()
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Iterable[ProjectionHandler] = ()) -> None:
        """
        Initialize the builder.

        Args:
            handlers: Initial records, typically an existing Projection.
                They are copied in their original order.

        Raises:
            InvalidArgumentError: If handlers is None or contains anything
                other than ProjectionHandler records
        """
        self._handlers = _snapshot(handlers, "handlers")

    @classmethod
    def _from_records(cls, records: tuple[ProjectionHandler, ...]) -> ProjectionBuilder:
        builder = cls.__new__(cls)
        builder._handlers = records
        return builder

    def when(
        self,
        event_type: type,
        handler: AnyHandler | None,
        *,
        shape: HandlerShape | None = None,
    ) -> ProjectionBuilder:
        """
        Register a handler for an exact event type.

        The handler is selected later only for events whose run-time type is
        exactly event_type. Any of the three handler shapes is accepted.

        Args:
            event_type: The exact event class the handler is selected for
            handler: Sync, async or cancellable async handler
            shape: Explicit shape, skipping signature inspection

        Returns:
            A new builder with one record appended

        Raises:
            InvalidArgumentError: If handler is None or event_type is not a class
            HandlerSignatureError: If the handler matches no accepted shape
        """
        record = ProjectionHandler.create(event_type, handler, shape=shape)

        logger.debug(
            "Registered handler %s for %s",
            record.name,
            event_type.__name__,
            extra={
                "handler": record.name,
                "event_type": event_type.__name__,
                "handler_count": len(self._handlers) + 1,
            },
        )
        return self._from_records((*self._handlers, record))

    def include(self, projection: Iterable[ProjectionHandler] | None) -> ProjectionBuilder:
        """
        Append every record of another projection.

        Used to compose several projections into one.

        Args:
            projection: A Projection (or any iterable of records)

        Returns:
            A new builder with the projection's records appended in order

        Raises:
            InvalidArgumentError: If projection is None
        """
        records = _snapshot(projection, "projection")
        return self._from_records(self._handlers + records)

    def build(self) -> Projection:
        """
        Build a projection from the records collected so far.

        The projection is a snapshot: later registrations on this builder (or
        builders derived from it) never affect it.

        Returns:
            A Projection holding the records in registration order
        """
        return Projection(self._handlers)

    @property
    def handlers(self) -> tuple[ProjectionHandler, ...]:
        """Records collected so far, in registration order."""
        return self._handlers

    def __iter__(self) -> Iterator[ProjectionHandler]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"ProjectionBuilder(handlers={len(self._handlers)})"


__all__ = ["ProjectionBuilder"]
