"""Unit tests for ProjectionHandler records."""

import dataclasses

import pytest

from eventprojector.cancellation import CancellationToken, CancellationTokenSource
from eventprojector.exceptions import InvalidArgumentError
from eventprojector.handlers.adapter import HandlerAdapter, HandlerShape
from eventprojector.handlers.record import ProjectionHandler
from tests.fixtures import Message, OrderPlaced, PriorityOrderPlaced


def on_message(conn, event):
    conn.record("on_message", event)


async def on_message_async(conn, event, token):
    await conn.record_async("on_message_async", event)


class TestProjectionHandlerCreate:
    """Tests for ProjectionHandler.create."""

    def test_create_normalizes_handler(self):
        """Sync handlers are wrapped in an adapter."""
        record = ProjectionHandler.create(Message, on_message)

        assert record.event_type is Message
        assert isinstance(record.handler, HandlerAdapter)
        assert record.name == "on_message"

    def test_create_keeps_cancellable_handler(self):
        """Canonical handlers are stored as-is."""
        record = ProjectionHandler.create(Message, on_message_async)

        assert record.handler is on_message_async
        assert record.name == "on_message_async"

    def test_create_with_explicit_shape(self):
        """An explicit shape is forwarded to normalization."""
        record = ProjectionHandler.create(Message, on_message, shape=HandlerShape.SYNC)

        assert record.handler.shape is HandlerShape.SYNC  # type: ignore[attr-defined]

    def test_create_rejects_none_handler(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ProjectionHandler.create(Message, None)

        assert exc_info.value.argument == "handler"

    def test_create_rejects_non_type_event(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            ProjectionHandler.create("Message", on_message)  # type: ignore[arg-type]

        assert exc_info.value.argument == "event_type"

    def test_direct_construction_defaults_name(self):
        """Records built directly derive a name from the handler."""
        record = ProjectionHandler(Message, on_message_async)

        assert record.name == "on_message_async"


class TestProjectionHandlerSemantics:
    """Tests for record equality, immutability and matching."""

    def test_records_are_frozen(self):
        record = ProjectionHandler.create(Message, on_message)

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.event_type = OrderPlaced  # type: ignore[misc]

    def test_equal_when_same_type_and_handler(self):
        """Registering the same handler twice gives equal records."""
        assert ProjectionHandler.create(Message, on_message) == ProjectionHandler.create(
            Message, on_message
        )

    def test_name_does_not_affect_equality(self):
        first = ProjectionHandler(Message, on_message_async, name="a")
        second = ProjectionHandler(Message, on_message_async, name="b")

        assert first == second

    def test_different_event_types_not_equal(self):
        assert ProjectionHandler.create(Message, on_message) != ProjectionHandler.create(
            OrderPlaced, on_message
        )

    def test_matches_exact_type_only(self):
        """Subclass instances do not match."""
        record = ProjectionHandler.create(OrderPlaced, on_message)

        assert record.matches(OrderPlaced()) is True
        assert record.matches(PriorityOrderPlaced()) is False
        assert record.matches(Message()) is False

    def test_repr(self):
        record = ProjectionHandler.create(Message, on_message)

        assert repr(record) == "ProjectionHandler(Message, on_message)"


class TestProjectionHandlerInvoke:
    """Tests for ProjectionHandler.invoke."""

    @pytest.mark.asyncio
    async def test_invoke_passes_connection_and_event(self, connection, message):
        record = ProjectionHandler.create(Message, on_message)

        await record.invoke(connection, message)

        assert connection.calls == [("on_message", message)]

    @pytest.mark.asyncio
    async def test_invoke_defaults_token_to_none_token(self, connection, message):
        """Omitting the token passes the shared never-cancelled token."""
        received = []

        async def handler(conn, event, token):
            received.append(token)

        await ProjectionHandler.create(Message, handler).invoke(connection, message)

        assert received == [CancellationToken.none()]

    @pytest.mark.asyncio
    async def test_invoke_forwards_token(self, connection, message):
        received = []

        async def handler(conn, event, token):
            received.append(token)

        source = CancellationTokenSource()
        await ProjectionHandler.create(Message, handler).invoke(connection, message, source.token)

        assert received[0] is source.token
