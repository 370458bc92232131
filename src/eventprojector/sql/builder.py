"""
Immutable builder for SQL projections.

SQL handlers do not touch the connection themselves: they take an event and
return the statements to run. The builder turns each of them into a canonical
handler that executes those statements, in order, on the AsyncConnection it
is invoked with.

Example:
    >>> projection = (
    ...     SqlProjectionBuilder()
    ...     .when(OrderPlaced, lambda e: insert(orders).values(id=e.order_id))
    ...     .when(OrderCancelled, lambda e: [
    ...         delete(order_lines).where(order_lines.c.order_id == e.order_id),
    ...         delete(orders).where(orders.c.id == e.order_id),
    ...     ])
    ...     .build()
    ... )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncConnection

from eventprojector.cancellation import CancellationToken
from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.adapter import HandlerShape, get_handler_name, normalize_handler
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.projections.base import Projection
from eventprojector.projections.builder import ProjectionBuilder
from eventprojector.sql.statements import as_statements, execute_statements

logger = logging.getLogger(__name__)

StatementFactory = Callable[[Any], Any]


class SqlHandler:
    """
    Canonical handler running the statements a factory produces for an event.

    Two SqlHandlers are equal when they wrap the same factory.

    Attributes:
        factory: The event -> statements callable
        name: Descriptive name of the factory
    """

    __slots__ = ("_factory", "_name")

    def __init__(self, factory: StatementFactory) -> None:
        self._factory = factory
        self._name = get_handler_name(factory)

    @property
    def factory(self) -> StatementFactory:
        return self._factory

    @property
    def name(self) -> str:
        return self._name

    async def __call__(
        self,
        connection: AsyncConnection,
        event: Any,
        token: CancellationToken,
    ) -> int:
        statements = as_statements(self._factory(event))
        count = await execute_statements(connection, statements, token)
        logger.debug(
            "Executed %d statement(s) from %s for %s",
            count,
            self._name,
            type(event).__name__,
            extra={
                "handler": self._name,
                "event_type": type(event).__name__,
                "statement_count": count,
            },
        )
        return count

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SqlHandler):
            return self._factory == other._factory
        return NotImplemented

    def __hash__(self) -> int:
        return hash((SqlHandler, self._factory))

    def __repr__(self) -> str:
        return f"SqlHandler({self._name})"


class SqlProjectionBuilder:
    """
    Fluent, persistent builder of SQL projections.

    Behaves like ProjectionBuilder: when() returns a new builder and the
    receiver is never mutated. A handler may return a single statement, a
    list of statements, any other iterable (including a generator) or None.

    Example:
        >>> def on_renamed(event):
        ...     yield update(items).where(items.c.id == event.id).values(name=event.name)
        ...     yield SqlStatement("UPDATE stats SET renames = renames + 1")
        >>>
        >>> projection = SqlProjectionBuilder().when(ItemRenamed, on_renamed).build()
    """

    __slots__ = ("_builder",)

    def __init__(self, handlers: Iterable[ProjectionHandler] = ()) -> None:
        """
        Initialize the builder.

        Args:
            handlers: Initial records, typically an existing SQL projection

        Raises:
            InvalidArgumentError: If handlers is None
        """
        self._builder = ProjectionBuilder(handlers)

    @classmethod
    def _wrap(cls, builder: ProjectionBuilder) -> SqlProjectionBuilder:
        wrapped = cls.__new__(cls)
        wrapped._builder = builder
        return wrapped

    def when(self, event_type: type, handler: StatementFactory | None) -> SqlProjectionBuilder:
        """
        Register a statement-producing handler for an exact event type.

        Args:
            event_type: The exact event class the handler is selected for
            handler: Callable taking the event and returning statements

        Returns:
            A new builder with one record appended

        Raises:
            InvalidArgumentError: If handler is None or not callable, or
                event_type is not a class
        """
        if handler is None:
            raise InvalidArgumentError("handler")
        if not callable(handler):
            raise InvalidArgumentError(
                "handler",
                f"Handler must be callable, got {type(handler).__name__}",
            )

        sql_handler = SqlHandler(handler)
        record = ProjectionHandler(
            event_type=event_type,
            handler=normalize_handler(sql_handler, HandlerShape.ASYNC_CANCELLABLE),
            name=sql_handler.name,
        )
        return self._wrap(self._builder.include((record,)))

    def include(self, projection: Iterable[ProjectionHandler] | None) -> SqlProjectionBuilder:
        """
        Append every record of another projection.

        Raises:
            InvalidArgumentError: If projection is None
        """
        return self._wrap(self._builder.include(projection))

    def build(self) -> Projection:
        """Build a projection from the records collected so far."""
        return self._builder.build()

    @property
    def handlers(self) -> tuple[ProjectionHandler, ...]:
        """Records collected so far, in registration order."""
        return self._builder.handlers

    def __iter__(self) -> Iterator[ProjectionHandler]:
        return iter(self._builder)

    def __len__(self) -> int:
        return len(self._builder)

    def __repr__(self) -> str:
        return f"SqlProjectionBuilder(handlers={len(self._builder)})"


__all__ = [
    "SqlHandler",
    "SqlProjectionBuilder",
    "StatementFactory",
]
