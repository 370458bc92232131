"""Unit tests for SQL projection building."""

from typing import Any

import pytest
from sqlalchemy import Column, Integer, MetaData, String, Table, insert, text

from eventprojector.cancellation import CancellationTokenSource
from eventprojector.exceptions import InvalidArgumentError, OperationCancelledError
from eventprojector.handlers.record import ProjectionHandler
from eventprojector.projections.base import Projection
from eventprojector.projections.builder import ProjectionBuilder
from eventprojector.sql import (
    SqlHandler,
    SqlProjectionBuilder,
    SqlStatement,
    as_statements,
    execute_statements,
)
from tests.fixtures import Message, OrderPlaced, Other

metadata = MetaData()
messages = Table(
    "messages",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("text", String, nullable=False),
)


class ExecutingConnection:
    """Stands in for an AsyncConnection, recording executed statements."""

    def __init__(self) -> None:
        self.executed: list[tuple[Any, Any]] = []

    async def execute(self, statement: Any, parameters: Any = None) -> None:
        self.executed.append((statement, parameters))


def insert_message(event):
    return insert(messages).values(text=event.text)


class TestSqlStatement:
    def test_string_wrapped_in_text(self):
        statement = SqlStatement("DELETE FROM messages")

        assert str(statement.executable) == "DELETE FROM messages"

    def test_executable_passed_through(self):
        stmt = insert(messages)

        assert SqlStatement(stmt).executable is stmt

    def test_rejects_non_statement(self):
        with pytest.raises(TypeError, match="Executable or str"):
            SqlStatement(42)  # type: ignore[arg-type]


class TestAsStatements:
    def test_none_is_no_statements(self):
        assert as_statements(None) == ()

    def test_single_executable(self):
        stmt = text("SELECT 1")

        assert as_statements(stmt) == (SqlStatement(stmt),)

    def test_single_sql_statement(self):
        statement = SqlStatement("SELECT 1", {"a": 1})

        assert as_statements(statement) == (statement,)

    def test_list_and_generator(self):
        first = text("SELECT 1")
        second = SqlStatement("SELECT :x", {"x": 2})

        assert as_statements([first, second]) == (SqlStatement(first), second)
        assert as_statements(s for s in [first, second]) == (SqlStatement(first), second)

    def test_rejects_other_values(self):
        with pytest.raises(TypeError, match="must return statements"):
            as_statements(42)

    def test_rejects_bad_items(self):
        with pytest.raises(TypeError):
            as_statements([text("SELECT 1"), 42])


class TestExecuteStatements:
    @pytest.mark.asyncio
    async def test_executes_in_order(self):
        conn = ExecutingConnection()
        statements = (SqlStatement("SELECT 1"), SqlStatement("SELECT :x", {"x": 2}))

        count = await execute_statements(conn, statements)  # type: ignore[arg-type]

        assert count == 2
        assert [str(stmt) for stmt, _ in conn.executed] == ["SELECT 1", "SELECT :x"]
        assert [params for _, params in conn.executed] == [None, {"x": 2}]

    @pytest.mark.asyncio
    async def test_stops_when_cancelled(self):
        conn = ExecutingConnection()
        source = CancellationTokenSource()
        source.cancel()

        with pytest.raises(OperationCancelledError):
            await execute_statements(conn, (SqlStatement("SELECT 1"),), source.token)  # type: ignore[arg-type]

        assert conn.executed == []


class TestSqlProjectionBuilder:
    def test_empty_build(self):
        projection = SqlProjectionBuilder().build()

        assert type(projection) is Projection
        assert len(projection) == 0

    def test_when_is_persistent(self):
        first = SqlProjectionBuilder().when(Message, insert_message)
        second = first.when(OrderPlaced, lambda e: None)

        assert len(first) == 1
        assert len(second) == 2
        assert repr(second) == "SqlProjectionBuilder(handlers=2)"

    def test_records_wrap_sql_handlers(self):
        (record,) = SqlProjectionBuilder().when(Message, insert_message).build()

        assert record.event_type is Message
        assert isinstance(record.handler, SqlHandler)
        assert record.handler.factory is insert_message
        assert record.name == "insert_message"

    def test_same_factory_gives_equal_projections(self):
        first = SqlProjectionBuilder().when(Message, insert_message).build()
        second = SqlProjectionBuilder().when(Message, insert_message).build()

        assert first == second

    def test_none_handler_rejected(self):
        builder = SqlProjectionBuilder()

        with pytest.raises(InvalidArgumentError) as exc_info:
            builder.when(Message, None)

        assert exc_info.value.argument == "handler"
        assert len(builder) == 0

    def test_non_callable_handler_rejected(self):
        with pytest.raises(InvalidArgumentError, match="callable"):
            SqlProjectionBuilder().when(Message, "INSERT INTO x")  # type: ignore[arg-type]

    def test_include_and_seed(self):
        base = SqlProjectionBuilder().when(Message, insert_message).build()

        extended = SqlProjectionBuilder(base).include(
            ProjectionBuilder().when(Other, lambda conn, event: None).build()
        )

        assert [r.event_type for r in extended] == [Message, Other]
        assert extended.handlers[0] == base.handlers[0]

    def test_include_none_rejected(self):
        with pytest.raises(InvalidArgumentError):
            SqlProjectionBuilder().include(None)

    @pytest.mark.asyncio
    async def test_single_statement_handler(self):
        conn = ExecutingConnection()
        projection = SqlProjectionBuilder().when(Message, insert_message).build()
        event = Message(text="hi")

        for record in projection.handlers_for(event):
            await record.invoke(conn, event)

        (statement, _), = conn.executed
        assert statement.compile().params == {"text": "hi"}

    @pytest.mark.asyncio
    async def test_list_handler_runs_in_order(self):
        conn = ExecutingConnection()
        projection = (
            SqlProjectionBuilder()
            .when(
                Message,
                lambda e: [
                    SqlStatement("DELETE FROM messages WHERE text = :text", {"text": e.text}),
                    insert_message(e),
                ],
            )
            .build()
        )

        await projection[0].invoke(conn, Message(text="hi"))

        assert str(conn.executed[0][0]) == "DELETE FROM messages WHERE text = :text"
        assert conn.executed[0][1] == {"text": "hi"}
        assert conn.executed[1][0].is_insert

    @pytest.mark.asyncio
    async def test_generator_handler(self):
        conn = ExecutingConnection()

        def statements(event):
            yield SqlStatement("SELECT 1")
            yield SqlStatement("SELECT 2")

        projection = SqlProjectionBuilder().when(Message, statements).build()

        result = await projection[0].invoke(conn, Message())

        assert result == 2
        assert [str(stmt) for stmt, _ in conn.executed] == ["SELECT 1", "SELECT 2"]

    @pytest.mark.asyncio
    async def test_cancellation_between_statements(self):
        conn = ExecutingConnection()
        source = CancellationTokenSource()

        def statements(event):
            yield SqlStatement("SELECT 1")
            source.cancel("stop")
            yield SqlStatement("SELECT 2")

        record: ProjectionHandler = SqlProjectionBuilder().when(Message, statements).build()[0]

        with pytest.raises(OperationCancelledError):
            await record.invoke(conn, Message(), source.token)

        # Statements are collected before execution starts
        assert conn.executed == []

    @pytest.mark.asyncio
    async def test_factory_errors_propagate(self):
        def broken(event):
            raise LookupError("no such row")

        record = SqlProjectionBuilder().when(Message, broken).build()[0]

        with pytest.raises(LookupError, match="no such row"):
            await record.invoke(ExecutingConnection(), Message())
