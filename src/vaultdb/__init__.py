"""vaultdb: parameterized CRUD over one connection opened with an encrypted password.

>>> from vaultdb import Database
>>> with Database() as db:                                   # doctest: +SKIP
...     user_id = db.insert("users", {"name": "Elliot"})
...     db.select("id, name", "users", {"id": user_id})
"""

from .access import Database
from .errors import (
    ConfigurationError,
    DatabaseConnectionError,
    DecryptionError,
    EmptyPayloadError,
    MalformedIdentifierError,
    MissingWhereClauseError,
    StatementError,
    StatementExecutionError,
    UnsupportedValueError,
    VaultDBError,
)
from .security import ConnectionConfig, resolve_credentials

__version__ = "0.1.0"
