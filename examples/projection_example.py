"""
Projection Example

This example demonstrates:
- Declaring a projection as a Projection subclass with @handles
- Building the same kind of projection with ProjectionBuilder
- SQL projections whose handlers return statements
- Running projections with Projector and SqlProjector
- Cooperative cancellation with CancellationTokenSource

Run with: python -m examples.projection_example
(requires the sqlite extra: pip install -e ".[sqlite]")
"""

import asyncio
import logging
from collections import defaultdict
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlalchemy import Column, Integer, MetaData, String, Table, select
from sqlalchemy.ext.asyncio import create_async_engine

from eventprojector import (
    CancellationToken,
    CancellationTokenSource,
    OperationCancelledError,
    Projection,
    ProjectionBuilder,
    Projector,
    ProjectorConfig,
    SqlProjectionBuilder,
    SqlProjector,
    SqlStatement,
    handles,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# =============================================================================
# Domain Events
# =============================================================================


class OrderPlaced(BaseModel):
    order_id: UUID
    customer: str
    total: float


class OrderShipped(BaseModel):
    order_id: UUID


class OrderCancelled(BaseModel):
    order_id: UUID


# =============================================================================
# In-memory read model
# =============================================================================


class OrderBook:
    """A trivial connection: the read model itself."""

    def __init__(self) -> None:
        self.orders: dict[UUID, dict] = {}
        self.revenue_by_customer: dict[str, float] = defaultdict(float)


class OrderBookProjection(Projection):
    """Declarative projection over the in-memory order book."""

    @handles(OrderPlaced)
    def _on_placed(self, book: OrderBook, event: OrderPlaced) -> None:
        book.orders[event.order_id] = {"customer": event.customer, "status": "placed"}

    @handles(OrderShipped)
    async def _on_shipped(self, book: OrderBook, event: OrderShipped) -> None:
        book.orders[event.order_id]["status"] = "shipped"

    @handles(OrderCancelled)
    async def _on_cancelled(
        self, book: OrderBook, event: OrderCancelled, token: CancellationToken
    ) -> None:
        token.raise_if_cancellation_requested()
        book.orders.pop(event.order_id, None)


def track_revenue(book: OrderBook, event: OrderPlaced) -> None:
    book.revenue_by_customer[event.customer] += event.total


# =============================================================================
# SQL read model
# =============================================================================

metadata = MetaData()
orders = Table(
    "orders",
    metadata,
    Column("id", String, primary_key=True),
    Column("customer", String, nullable=False),
    Column("status", String, nullable=False),
)
order_counts = Table(
    "order_counts",
    metadata,
    Column("status", String, primary_key=True),
    Column("total", Integer, nullable=False),
)

sql_projection = (
    SqlProjectionBuilder()
    .when(
        OrderPlaced,
        lambda e: orders.insert().values(id=str(e.order_id), customer=e.customer, status="placed"),
    )
    .when(
        OrderShipped,
        lambda e: [
            orders.update().where(orders.c.id == str(e.order_id)).values(status="shipped"),
            SqlStatement(
                "UPDATE order_counts SET total = total + 1 WHERE status = :status",
                {"status": "shipped"},
            ),
        ],
    )
    .when(OrderCancelled, lambda e: orders.delete().where(orders.c.id == str(e.order_id)))
    .build()
)


async def main() -> None:
    first, second = uuid4(), uuid4()
    events = [
        OrderPlaced(order_id=first, customer="alice", total=30.0),
        OrderPlaced(order_id=second, customer="bob", total=12.5),
        OrderShipped(order_id=first),
        OrderCancelled(order_id=second),
    ]

    # Extend the declarative projection with a builder
    projection = ProjectionBuilder(OrderBookProjection()).when(OrderPlaced, track_revenue).build()
    book = OrderBook()
    projector = Projector(projection, config=ProjectorConfig(unregistered_event_handling="warn"))

    handled = await projector.project_many(book, events)
    logger.info("In-memory projection ran %d handlers: %s", handled, dict(book.revenue_by_customer))

    # Project the same events into SQLite
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(order_counts.insert().values(status="shipped", total=0))

    sql_projector = SqlProjector(sql_projection, engine)
    await sql_projector.project_many(events)

    async with engine.connect() as conn:
        rows = (await conn.execute(select(orders.c.customer, orders.c.status))).all()
        logger.info("SQL read model: %s", rows)

    # Cancellation stops a batch between events and rolls it back
    source = CancellationTokenSource()
    source.cancel("shutting down")
    try:
        await sql_projector.project_many(events, source.token)
    except OperationCancelledError as e:
        logger.info("Batch cancelled: %s", e.reason)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
