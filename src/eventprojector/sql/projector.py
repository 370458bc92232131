"""
Transactional projector for SQL projections.

SqlProjector runs a projection against an AsyncEngine, opening one
transaction per call so every statement produced for an event (or a batch of
events) commits or rolls back together.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine

from eventprojector.cancellation import CancellationToken
from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.observability.attributes import ATTR_DB_SYSTEM, ATTR_PROJECTION_NAME
from eventprojector.observability.tracer import Tracer, create_tracer
from eventprojector.observability.tracing import traced
from eventprojector.projections.config import ProjectorConfig
from eventprojector.projections.projector import HandlerResolver, Projector

logger = logging.getLogger(__name__)


class SqlProjector:
    """
    Runs a projection inside engine-managed transactions.

    Example:
        >>> engine = create_async_engine("sqlite+aiosqlite:///read_model.db")
        >>> projector = SqlProjector(projection, engine)
        >>> await projector.project(OrderPlaced(...))
        >>> await projector.project_many(events, source.token)
    """

    def __init__(
        self,
        projection: Iterable[ProjectionHandler],
        engine: AsyncEngine,
        *,
        resolver: HandlerResolver | None = None,
        config: ProjectorConfig | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        """
        Initialize the SQL projector.

        Args:
            projection: A Projection (typically built by SqlProjectionBuilder)
            engine: SQLAlchemy async engine for the read model
            resolver: Optional custom handler resolver
            config: Projector configuration. Handlers share one connection,
                so concurrent_handlers is not supported.
            tracer: Optional custom Tracer

        Raises:
            InvalidArgumentError: If engine is None
            ValueError: If config enables concurrent_handlers
        """
        if engine is None:
            raise InvalidArgumentError("engine")

        config = config or ProjectorConfig()
        if config.concurrent_handlers:
            raise ValueError(
                "SqlProjector runs handlers on a single connection and requires "
                "concurrent_handlers=False."
            )

        self._engine = engine
        self._tracer = tracer or create_tracer(__name__, config.enable_tracing)
        self._enable_tracing = self._tracer.enabled
        self._projector = Projector(
            projection,
            resolver=resolver,
            config=config,
            tracer=self._tracer,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def projector(self) -> Projector:
        """The underlying dispatcher."""
        return self._projector

    @traced("eventprojector.sql_projector.project", lambda self: self._span_attributes())
    async def project(self, event: Any, token: CancellationToken | None = None) -> int:
        """
        Project one event in its own transaction.

        Returns:
            Number of handlers that ran

        Raises:
            OperationCancelledError: If cancellation is requested; the
                transaction is rolled back
        """
        async with self._engine.begin() as conn:
            return await self._projector.project(conn, event, token)

    @traced("eventprojector.sql_projector.project_many", lambda self: self._span_attributes())
    async def project_many(
        self,
        events: Iterable[Any],
        token: CancellationToken | None = None,
    ) -> int:
        """
        Project a batch of events in a single transaction.

        Returns:
            Total number of handlers that ran

        Raises:
            OperationCancelledError: If cancellation is requested; the whole
                batch is rolled back
        """
        async with self._engine.begin() as conn:
            total = await self._projector.project_many(conn, events, token)

        logger.debug(
            "Committed %d handler run(s) for %s",
            total,
            self._projector.projection_name,
            extra={
                "projection": self._projector.projection_name,
                "handler_count": total,
                "dialect": self._engine.dialect.name,
            },
        )
        return total

    def _span_attributes(self) -> dict[str, Any]:
        return {
            ATTR_PROJECTION_NAME: self._projector.projection_name,
            ATTR_DB_SYSTEM: self._engine.dialect.name,
        }

    def __repr__(self) -> str:
        return f"SqlProjector({self._projector.projection_name}, dialect={self._engine.dialect.name})"


__all__ = ["SqlProjector"]
