"""
access.executor
~~~~~~~~~~~~~~~

Runs a :class:`~vaultdb.access.statements.Statement` on a SQLAlchemy
connection and shapes the result according to the statement's kind.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Union

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..errors import StatementExecutionError
from .statements import OperationKind, Statement

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
ExecutionResult = Union[List[Row], int]


REDACTED = "***"


def _driver_message(exc: SQLAlchemyError, bindings) -> str:
    """Driver diagnostic with every bound value replaced by ``***``."""
    # DBAPIError.__str__ appends the bound parameters; keep only the driver text
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        message = str(exc.orig)
    else:
        message = str(exc).split("\n[SQL:", 1)[0]
    # drivers such as MySQL quote the offending value ("Duplicate entry '...'")
    values = {str(value) for value in bindings.values() if value is not None}
    for value in sorted(values, key=len, reverse=True):
        if value:
            message = message.replace(value, REDACTED)
    return message


def execute(statement: Statement, connection: Connection) -> ExecutionResult:
    """
    Execute ``statement`` on ``connection``.

    Returns
    -------
    list[dict] | int
        The rows for a SELECT, the new row id for an INSERT and the
        affected row count for an UPDATE or DELETE.

    Raises
    ------
    StatementExecutionError
        When the driver rejects the statement.  No retry is attempted.
    """
    logger.debug("Executing %s [params: %s]", statement.sql, ", ".join(statement.bindings))
    try:
        result = connection.execute(text(statement.sql), dict(statement.bindings))
        if statement.kind is OperationKind.SELECT:
            return [dict(row._mapping) for row in result]
        if statement.kind is OperationKind.INSERT:
            return int(result.lastrowid)
        return int(result.rowcount)
    except SQLAlchemyError as exc:
        message = _driver_message(exc, statement.bindings)
        logger.error("Statement failed: %s in statement: %s", message, statement.sql)
        raise StatementExecutionError(statement.sql, message) from exc
