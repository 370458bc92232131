"""
Reference dispatcher for projections.

A Projector takes a projection (or any ordered source of handler records),
selects the handlers registered for each arriving event's exact type and
runs them against a caller-supplied connection.

Example:
    >>> projector = Projector(OrderProjection())
    >>> async with engine.connect() as conn:
    ...     handled = await projector.project(conn, OrderPlaced(...))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from eventprojector.cancellation import CancellationToken
from eventprojector.exceptions import InvalidArgumentError, UnhandledEventError
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.observability.attributes import (
    ATTR_EVENT_COUNT,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_INDEX,
    ATTR_HANDLER_NAME,
    ATTR_PROJECTION_NAME,
)
from eventprojector.observability.tracer import Tracer, create_tracer
from eventprojector.projections.config import ProjectorConfig
from eventprojector.projections.resolve import ExactTypeResolver

logger = logging.getLogger(__name__)

HandlerResolver = Callable[[Any], Iterable[ProjectionHandler]]


class Projector:
    """
    Runs the handlers of a projection for arriving events.

    The projector snapshots the handler records when it is created; a
    projection should be fully registered before it is handed over.

    Handler failures are logged and re-raised unchanged. In sequential mode
    (the default) a failure stops the remaining handlers for that event; in
    concurrent mode every handler runs to completion before the first
    failure, in registration order, is raised.

    Example:
        >>> projector = Projector(
        ...     projection,
        ...     config=ProjectorConfig(unregistered_event_handling="warn"),
        ... )
        >>> await projector.project_many(conn, events, source.token)
    """

    def __init__(
        self,
        projection: Iterable[ProjectionHandler],
        *,
        resolver: HandlerResolver | None = None,
        config: ProjectorConfig | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """
        Initialize the projector.

        Args:
            projection: A Projection, ProjectionBuilder or iterable of records
            resolver: Selects the records for an event. Defaults to exact
                run-time type matching over the projection's records.
            config: Projector configuration (defaults to ProjectorConfig())
            tracer: Optional custom Tracer. Created from config.enable_tracing
                when not provided.

        Raises:
            InvalidArgumentError: If projection is None
        """
        if projection is None:
            raise InvalidArgumentError("projection")

        self._config = config or ProjectorConfig()
        self._handlers: tuple[ProjectionHandler, ...] = tuple(projection)
        self._projection_name: str = getattr(
            projection, "projection_name", type(projection).__name__
        )
        self._resolver: HandlerResolver = resolver or ExactTypeResolver(self._handlers)

        self._tracer = tracer or create_tracer(__name__, self._config.enable_tracing)
        self._enable_tracing = self._tracer.enabled

    @property
    def config(self) -> ProjectorConfig:
        """Get the projector configuration."""
        return self._config

    @property
    def projection_name(self) -> str:
        """Name of the projection being run."""
        return self._projection_name

    @property
    def handlers(self) -> tuple[ProjectionHandler, ...]:
        """Snapshot of the handler records this projector dispatches to."""
        return self._handlers

    async def project(
        self,
        connection: Any,
        event: Any,
        token: CancellationToken | None = None,
    ) -> int:
        """
        Run every handler registered for the event's exact type.

        Args:
            connection: Read-model connection passed to each handler
            event: The event to project
            token: Cancellation token passed to each handler

        Returns:
            Number of handlers that ran

        Raises:
            OperationCancelledError: If the token is already cancelled
            UnhandledEventError: If no handler matches and
                unregistered_event_handling="error"
        """
        token = token if token is not None else CancellationToken.none()
        token.raise_if_cancellation_requested()

        records = tuple(self._resolver(event))
        if not records:
            self._handle_unregistered_event(event)
            return 0

        event_type = type(event).__name__
        with self._tracer.span(
            "eventprojector.projector.project",
            {
                ATTR_PROJECTION_NAME: self._projection_name,
                ATTR_EVENT_TYPE: event_type,
                ATTR_HANDLER_COUNT: len(records),
            },
        ):
            if self._config.concurrent_handlers:
                results = await asyncio.gather(
                    *(
                        self._invoke(index, record, connection, event, token)
                        for index, record in enumerate(records)
                    ),
                    return_exceptions=True,
                )
                # Every handler has settled; surface the first failure in registration order
                for result in results:
                    if isinstance(result, BaseException):
                        raise result
            else:
                for index, record in enumerate(records):
                    await self._invoke(index, record, connection, event, token)

        logger.debug(
            "Projection %s processed %s with %d handler(s)",
            self._projection_name,
            event_type,
            len(records),
            extra={
                "projection": self._projection_name,
                "event_type": event_type,
                "handler_count": len(records),
            },
        )
        return len(records)

    async def project_many(
        self,
        connection: Any,
        events: Iterable[Any],
        token: CancellationToken | None = None,
    ) -> int:
        """
        Project events one after another, in order.

        The token is checked before each event, so cancellation stops the
        batch between events and never interrupts a running handler.

        Args:
            connection: Read-model connection passed to each handler
            events: Events to project, in order
            token: Cancellation token

        Returns:
            Total number of handlers that ran

        Raises:
            OperationCancelledError: If the token is cancelled before an event
        """
        token = token if token is not None else CancellationToken.none()
        batch = list(events)
        total = 0

        with self._tracer.span(
            "eventprojector.projector.project_many",
            {
                ATTR_PROJECTION_NAME: self._projection_name,
                ATTR_EVENT_COUNT: len(batch),
            },
        ):
            for event in batch:
                token.raise_if_cancellation_requested()
                total += await self.project(connection, event, token)

        return total

    async def _invoke(
        self,
        index: int,
        record: ProjectionHandler,
        connection: Any,
        event: Any,
        token: CancellationToken,
    ) -> None:
        event_type = type(event).__name__
        with self._tracer.span(
            "eventprojector.projector.handler",
            {
                ATTR_PROJECTION_NAME: self._projection_name,
                ATTR_EVENT_TYPE: event_type,
                ATTR_HANDLER_NAME: record.name,
                ATTR_HANDLER_INDEX: index,
            },
        ):
            try:
                await record.invoke(connection, event, token)
            except Exception as e:
                logger.error(
                    "Handler %s in %s failed to process %s: %s",
                    record.name,
                    self._projection_name,
                    event_type,
                    e,
                    exc_info=True,
                    extra={
                        "projection": self._projection_name,
                        "handler": record.name,
                        "event_type": event_type,
                        "error": str(e),
                    },
                )
                raise

    def _handle_unregistered_event(self, event: Any) -> None:
        """
        Apply the unregistered event policy.

        Raises:
            UnhandledEventError: If unregistered_event_handling="error"
        """
        event_type = type(event).__name__
        available_handlers = list(dict.fromkeys(r.event_type.__name__ for r in self._handlers))
        policy = self._config.unregistered_event_handling

        if policy == "error":
            raise UnhandledEventError(
                event_type=event_type,
                projection_name=self._projection_name,
                available_handlers=available_handlers,
            )
        elif policy == "warn":
            logger.warning(
                "No handler registered for event type %s in %s. Available handlers: %s.",
                event_type,
                self._projection_name,
                ", ".join(available_handlers) if available_handlers else "none",
                extra={
                    "projection": self._projection_name,
                    "event_type": event_type,
                    "available_handlers": available_handlers,
                },
            )
        else:
            logger.debug(
                "Ignoring %s, no handler registered in %s",
                event_type,
                self._projection_name,
                extra={
                    "projection": self._projection_name,
                    "event_type": event_type,
                },
            )

    def __repr__(self) -> str:
        return f"Projector({self._projection_name}, handlers={len(self._handlers)})"


__all__ = [
    "HandlerResolver",
    "Projector",
]
