"""
SQLAlchemy support for projections.

This package provides:
- SqlProjectionBuilder: Builds projections from event -> statements handlers
- SqlStatement: An executable paired with its bind parameters
- SqlProjector: Runs a projection inside engine-managed transactions
"""

from eventprojector.sql.builder import SqlHandler, SqlProjectionBuilder, StatementFactory
from eventprojector.sql.projector import SqlProjector
from eventprojector.sql.statements import (
    SqlStatement,
    SqlStatementLike,
    StatementParameters,
    as_statements,
    execute_statements,
)

__all__ = [
    "SqlHandler",
    "SqlProjectionBuilder",
    "SqlProjector",
    "SqlStatement",
    "SqlStatementLike",
    "StatementFactory",
    "StatementParameters",
    "as_statements",
    "execute_statements",
]
