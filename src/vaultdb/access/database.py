"""
access.database
~~~~~~~~~~~~~~~

:class:`Database` owns a single connection opened with credentials
recovered by :func:`~vaultdb.security.resolve_credentials`, and exposes
``select``, ``insert``, ``update`` and ``destruction``.

An instance is not safe to share between threads.  Use one instance per
worker, or check a connection out of an external pool per call and wrap
it with :meth:`Database.from_connection`.

Whether values are bound on the server depends on the DBAPI driver.  The
default ``mysql+pymysql`` escapes and inlines them on the client; values
still never enter the statement text built here.  Set
``DB_DRIVER=mysql+mysqlconnector`` for server-side prepared statements.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Sequence, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from ..config import settings
from ..errors import DatabaseConnectionError, MissingWhereClauseError
from ..security import ConnectionConfig, decrypt_secret, resolve_credentials
from ..security.credentials import Decryptor
from . import statements
from .executor import Row, execute

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[ConnectionConfig], Connection]


def open_connection(config: ConnectionConfig) -> Connection:
    """
    Open one autocommit connection described by ``config``.

    Raises
    ------
    DatabaseConnectionError
        When the driver cannot be loaded or the server cannot be reached.
    """
    if config.driver.startswith("sqlite"):
        # file databases take no server credentials
        url = URL.create(config.driver, database=config.database)
    else:
        query = {"charset": settings.MYSQL_CHARSET} if config.driver.startswith("mysql") else {}
        url = URL.create(
            config.driver,
            username=config.username,
            password=config.password,
            host=config.host,
            port=config.port,
            database=config.database,
            query=query,
        )
    try:
        engine = create_engine(url, isolation_level="AUTOCOMMIT", poolclass=NullPool)
        connection = engine.connect()
    except (SQLAlchemyError, ImportError) as exc:
        raise DatabaseConnectionError(
            f"Could not connect to {config.database} on {config.host}: {exc}"
        ) from exc
    logger.info(
        "Connected to %s on %s using %s", config.database, config.host, config.driver
    )
    return connection


class Database:
    """
    Generic CRUD access over one database connection.

    Parameters
    ----------
    env : Mapping[str, str], optional
        Configuration source, :data:`os.environ` by default.
    decrypt : callable, optional
        Decryption primitive for ``DB_PASS``.
    connect : callable, optional
        Connection factory taking a :class:`ConnectionConfig`.

    Construction either yields a connected instance or raises
    :class:`~vaultdb.errors.ConfigurationError`,
    :class:`~vaultdb.errors.DecryptionError` or
    :class:`~vaultdb.errors.DatabaseConnectionError`.
    """

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        *,
        decrypt: Decryptor = decrypt_secret,
        connect: ConnectionFactory = open_connection,
    ) -> None:
        config = resolve_credentials(env, decrypt)
        self._connection: Optional[Connection] = connect(config)
        self._config: Optional[ConnectionConfig] = config

    @classmethod
    def from_connection(cls, connection: Connection) -> "Database":
        """Wrap an already-open connection; no credentials are resolved."""
        db = cls.__new__(cls)
        db._connection = connection
        db._config = None
        return db

    @property
    def config(self) -> Optional[ConnectionConfig]:
        return self._config

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _run(self, statement: statements.Statement):
        if self._connection is None:
            raise DatabaseConnectionError("Database connection is closed")
        return execute(statement, self._connection)

    # --- Public API -----------------------------------------------------------------

    def select(
        self,
        columns: str,
        table: str,
        where: Optional[statements.ColumnValueMap] = None,
        *,
        order_by: Union[str, Sequence[str], None] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        """Return matching rows as dicts; an empty ``where`` returns every row."""
        return self._run(
            statements.build_select(columns, table, where, order_by=order_by, limit=limit)
        )

    def insert(self, table: str, data: statements.ColumnValueMap) -> int:
        """Insert one row and return its generated id."""
        return self._run(statements.build_insert(table, data))

    def update(
        self,
        table: str,
        data: statements.ColumnValueMap,
        where: statements.ColumnValueMap,
    ) -> int:
        """Update matching rows and return how many were affected."""
        return self._run(statements.build_update(table, data, where))

    def destruction(
        self,
        table: str,
        where: Optional[statements.ColumnValueMap] = None,
        *,
        allow_all: bool = False,
    ) -> int:
        """
        Delete matching rows and return how many were removed.

        Deleting every row requires an empty ``where`` together with
        ``allow_all=True``; an empty ``where`` alone raises
        :class:`~vaultdb.errors.MissingWhereClauseError`.
        """
        if not where:
            if not allow_all:
                raise MissingWhereClauseError(
                    f"Refusing to delete every row of {table}; pass allow_all=True"
                )
            logger.warning("Deleting every row of %s", table)
        return self._run(statements.build_delete(table, where))

    # --- Lifecycle ------------------------------------------------------------------

    def close(self) -> None:
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        connection.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
