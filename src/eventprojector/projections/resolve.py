"""
Exact-type handler resolution.

Dispatchers use a resolver to select, for an arriving event, the handler
records whose event type is exactly the event's run-time type. Subclass
relationships never match: a handler registered for a base class is not
selected for an instance of a derived class.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.record import ProjectionHandler


class ExactTypeResolver:
    """
    Maps event types to the ordered handlers registered for them.

    The mapping is computed once from a snapshot of the given handlers, so a
    resolver is read-only and safe to share between concurrent dispatchers.

    Example:
        >>> resolver = ExactTypeResolver(projection.handlers)
        >>> for record in resolver(event):
        ...     await record.invoke(conn, event, token)
    """

    __slots__ = ("_table",)

    def __init__(self, handlers: Iterable[ProjectionHandler]) -> None:
        """
        Build the resolution table.

        Args:
            handlers: Handler records in registration order

        Raises:
            InvalidArgumentError: If handlers is None
        """
        if handlers is None:
            raise InvalidArgumentError("handlers")

        grouped: dict[type, list[ProjectionHandler]] = {}
        for record in handlers:
            grouped.setdefault(record.event_type, []).append(record)
        self._table: dict[type, tuple[ProjectionHandler, ...]] = {
            event_type: tuple(records) for event_type, records in grouped.items()
        }

    def resolve(self, event: Any) -> tuple[ProjectionHandler, ...]:
        """
        Get the handlers registered for the event's exact run-time type.

        Args:
            event: The event instance

        Returns:
            Matching records in registration order; empty if none match
        """
        return self._table.get(type(event), ())

    __call__ = resolve

    @property
    def event_types(self) -> tuple[type, ...]:
        """Event types with at least one handler, in first registration order."""
        return tuple(self._table)

    def __contains__(self, event_type: object) -> bool:
        return event_type in self._table

    def __repr__(self) -> str:
        return f"ExactTypeResolver(event_types={len(self._table)})"


def resolve_exact_type(handlers: Iterable[ProjectionHandler]) -> ExactTypeResolver:
    """
    Create a resolver matching handlers on the event's exact run-time type.

    Args:
        handlers: Handler records, typically a Projection

    Returns:
        An ExactTypeResolver

    Raises:
        InvalidArgumentError: If handlers is None
    """
    return ExactTypeResolver(handlers)


__all__ = [
    "ExactTypeResolver",
    "resolve_exact_type",
]
