"""
access.statements
~~~~~~~~~~~~~~~~~

Pure builders that turn column/value mappings into parameterized SQL.

Values only ever travel in :attr:`Statement.bindings`; the SQL text holds
identifiers and ``:name`` placeholders.  Identifiers cannot be bound, so
table and column names are checked against
:data:`~vaultdb.config.settings.IDENTIFIER_PATTERN` and then interpolated.
Callers must still pass only trusted identifiers.

Placeholders are ``:w_<column>`` in WHERE clauses, ``:set_<column>`` in
SET clauses and ``:<column>`` in INSERT values, so one column may appear
in both SET and WHERE of the same UPDATE.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple, Union

from ..config import settings
from ..errors import (
    EmptyPayloadError,
    MalformedIdentifierError,
    MissingWhereClauseError,
    StatementError,
    UnsupportedValueError,
)

ScalarValue = Union[str, int, float, bool, None]
ColumnValueMap = Mapping[str, ScalarValue]

_SCALAR_TYPES = (str, int, float, bool, type(None))


class OperationKind(enum.Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Statement:
    """A parameterized statement ready for :func:`~vaultdb.access.executor.execute`."""
    sql: str
    bindings: Mapping[str, ScalarValue]
    kind: OperationKind


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #

def _column(name: object) -> str:
    if not isinstance(name, str) or not settings.IDENTIFIER_PATTERN.fullmatch(name):
        raise MalformedIdentifierError(name, "column")
    return name


def _table(name: object) -> str:
    # schema-qualified names are allowed: each dotted part is an identifier
    if not isinstance(name, str) or not all(
        settings.IDENTIFIER_PATTERN.fullmatch(part) for part in name.split(".")
    ):
        raise MalformedIdentifierError(name, "table")
    return name


def _value(column: str, value: object) -> ScalarValue:
    if not isinstance(value, _SCALAR_TYPES):
        raise UnsupportedValueError(column, type(value))
    return value  # type: ignore[return-value]


def _assignments(
    columns: Optional[ColumnValueMap], prefix: str
) -> Tuple[Tuple[str, ...], Tuple[Tuple[str, ScalarValue], ...]]:
    """Return ``("col = :<prefix>col", ...)`` and the matching bindings."""
    pairs = tuple(
        (_column(column), f"{prefix}{column}", _value(column, value))
        for column, value in (columns or {}).items()
    )
    fragments = tuple(f"{column} = :{placeholder}" for column, placeholder, _ in pairs)
    bindings = tuple((placeholder, value) for _, placeholder, value in pairs)
    return fragments, bindings


def _where(where: Optional[ColumnValueMap]):
    fragments, bindings = _assignments(where, settings.WHERE_PREFIX)
    clause = f" WHERE {' AND '.join(fragments)}" if fragments else ""
    return clause, bindings


def _statement(sql: str, bindings, kind: OperationKind) -> Statement:
    return Statement(sql=sql, bindings=MappingProxyType(dict(bindings)), kind=kind)


def _order_term(term: object) -> str:
    """Validate ``"col"`` or ``"col ASC|DESC"``."""
    parts = term.split() if isinstance(term, str) else []
    if not 1 <= len(parts) <= 2:
        raise MalformedIdentifierError(term, "order by")
    column = parts[0]
    if not settings.IDENTIFIER_PATTERN.fullmatch(column):
        raise MalformedIdentifierError(term, "order by")
    if len(parts) == 1:
        return column
    direction = parts[1].upper()
    if direction not in settings.ORDER_DIRECTIONS:
        raise MalformedIdentifierError(term, "order by")
    return f"{column} {direction}"


def _order_by(order_by: Union[str, Sequence[str], None]) -> str:
    if not order_by:
        return ""
    terms = [order_by] if isinstance(order_by, str) else list(order_by)
    return " ORDER BY " + ", ".join(_order_term(term) for term in terms)


def _limit(limit: Optional[int]):
    if limit is None:
        return "", ()
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise StatementError(f"limit must be a non-negative integer, got {limit!r}")
    return " LIMIT :limit", (("limit", limit),)


# --------------------------------------------------------------------------- #
# Builders
# --------------------------------------------------------------------------- #

def build_select(
    columns: str,
    table: str,
    where: Optional[ColumnValueMap] = None,
    *,
    order_by: Union[str, Sequence[str], None] = None,
    limit: Optional[int] = None,
) -> Statement:
    """
    Build ``SELECT <columns> FROM <table> [WHERE ...] [ORDER BY ...] [LIMIT ...]``.

    ``columns`` is a projection expression such as ``"*"`` or
    ``"id, name"`` and is used verbatim.  An empty ``where`` selects
    every row.

    ``order_by`` is a column name, optionally followed by ``ASC`` or
    ``DESC``, or a sequence of such terms.  ``limit`` is bound as
    ``:limit``.
    """
    table = _table(table)
    clause, bindings = _where(where)
    order = _order_by(order_by)
    limit_clause, limit_binding = _limit(limit)
    return _statement(
        f"SELECT {columns} FROM {table}{clause}{order}{limit_clause}",
        bindings + limit_binding,
        OperationKind.SELECT,
    )


def build_insert(table: str, data: ColumnValueMap) -> Statement:
    """Build ``INSERT INTO <table> (...) VALUES (...)`` from ``data``."""
    table = _table(table)
    if not data:
        raise EmptyPayloadError(f"Nothing to insert into {table}")
    bindings = tuple((_column(column), _value(column, value)) for column, value in data.items())
    columns = ", ".join(column for column, _ in bindings)
    placeholders = ", ".join(f":{column}" for column, _ in bindings)
    return _statement(
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
        bindings,
        OperationKind.INSERT,
    )


def build_update(table: str, data: ColumnValueMap, where: ColumnValueMap) -> Statement:
    """
    Build ``UPDATE <table> SET ... WHERE ...``.

    An empty ``where`` is always refused with
    :class:`~vaultdb.errors.MissingWhereClauseError`.
    """
    table = _table(table)
    if not where:
        raise MissingWhereClauseError(f"Refusing to update {table} without a WHERE clause")
    if not data:
        raise EmptyPayloadError(f"Nothing to update in {table}")
    set_fragments, set_bindings = _assignments(data, settings.SET_PREFIX)
    clause, where_bindings = _where(where)
    return _statement(
        f"UPDATE {table} SET {', '.join(set_fragments)}{clause}",
        set_bindings + where_bindings,
        OperationKind.UPDATE,
    )


def build_delete(table: str, where: Optional[ColumnValueMap] = None) -> Statement:
    """
    Build ``DELETE FROM <table> [WHERE ...]``.

    An empty ``where`` produces an unconditional DELETE.
    :meth:`Database.destruction <vaultdb.access.database.Database.destruction>`
    only issues one when asked with ``allow_all=True``.
    """
    table = _table(table)
    clause, bindings = _where(where)
    return _statement(f"DELETE FROM {table}{clause}", bindings, OperationKind.DELETE)
