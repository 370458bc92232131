"""
SQL statements produced by SQL projection handlers.

A SQL projection handler turns an event into zero or more statements. A
statement is either a SQLAlchemy executable (insert(), update(), text(), ...)
or a SqlStatement pairing an executable with its bind parameters.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql.base import Executable

from eventprojector.cancellation import CancellationToken

StatementParameters = Mapping[str, Any] | Sequence[Mapping[str, Any]]


@dataclass(frozen=True)
class SqlStatement:
    """
    An executable statement with its bind parameters.

    Plain strings are accepted and wrapped with sqlalchemy.text(), so named
    parameters use the :name syntax.

    Attributes:
        statement: SQLAlchemy executable or raw SQL text
        parameters: A mapping of bind parameters, or a sequence of mappings
            to execute the statement once per mapping

    Example:
        >>> SqlStatement(
        ...     "INSERT INTO orders (id, total) VALUES (:id, :total)",
        ...     {"id": event.order_id, "total": event.total},
        ... )
    """

    statement: Executable | str
    parameters: StatementParameters | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.statement, (Executable, str)):
            raise TypeError(
                f"statement must be a SQLAlchemy Executable or str, "
                f"got {type(self.statement).__name__}"
            )

    @property
    def executable(self) -> Executable:
        """The statement as a SQLAlchemy executable."""
        if isinstance(self.statement, str):
            return text(self.statement)
        return self.statement


SqlStatementLike = SqlStatement | Executable | str


def as_statements(result: Any) -> tuple[SqlStatement, ...]:
    """
    Normalize a SQL handler's return value to a tuple of statements.

    Accepts None (no statements), a single statement or an iterable of
    statements, including generators.

    Raises:
        TypeError: If anything produced is not a statement
    """
    if result is None:
        return ()
    if isinstance(result, SqlStatement):
        return (result,)
    if isinstance(result, (Executable, str)):
        return (SqlStatement(result),)
    if not isinstance(result, Iterable):
        raise TypeError(
            f"SQL handlers must return statements, got {type(result).__name__}"
        )
    return tuple(
        item if isinstance(item, SqlStatement) else SqlStatement(item) for item in result
    )


async def execute_statements(
    connection: AsyncConnection,
    statements: Iterable[SqlStatement],
    token: CancellationToken | None = None,
) -> int:
    """
    Execute statements in order on a connection.

    The token is checked before each statement. Statements already executed
    are left to the caller's transaction to commit or roll back.

    Args:
        connection: An open SQLAlchemy AsyncConnection
        statements: Statements to execute
        token: Cancellation token

    Returns:
        Number of statements executed

    Raises:
        OperationCancelledError: If the token is cancelled between statements
    """
    token = token if token is not None else CancellationToken.none()
    count = 0
    for statement in statements:
        token.raise_if_cancellation_requested()
        await connection.execute(statement.executable, statement.parameters)
        count += 1
    return count


__all__ = [
    "SqlStatement",
    "SqlStatementLike",
    "StatementParameters",
    "as_statements",
    "execute_statements",
]
