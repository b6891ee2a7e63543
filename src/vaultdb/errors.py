"""
vaultdb.errors
~~~~~~~~~~~~~~

Exception hierarchy shared by every layer of the package.

Construction-time failures (:class:`ConfigurationError`,
:class:`DecryptionError`, :class:`DatabaseConnectionError`) are fatal to
the :class:`~vaultdb.access.database.Database` being built.  Builder
failures derive from :class:`StatementError` and are raised before any
SQL reaches the driver, so callers can catch them apart from
:class:`StatementExecutionError`.
"""

from __future__ import annotations

from typing import Optional


class VaultDBError(Exception):
    """Base class for all vaultdb errors."""


# --------------------------------------------------------------------------- #
# Construction
# --------------------------------------------------------------------------- #

class ConfigurationError(VaultDBError):
    """A required configuration value is missing or unusable."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class DecryptionError(VaultDBError):
    """The encrypted password could not be recovered.

    ``reason`` is ``"authentication"`` when the AES-GCM tag does not
    verify and ``"malformed"`` when the ciphertext, key or nonce cannot
    be decoded.
    """

    AUTHENTICATION = "authentication"
    MALFORMED = "malformed"

    def __init__(self, message: str, reason: str = MALFORMED) -> None:
        super().__init__(message)
        self.reason = reason


class DatabaseConnectionError(VaultDBError):
    """The database could not be reached, or the connection is closed."""


# --------------------------------------------------------------------------- #
# Statement building
# --------------------------------------------------------------------------- #

class StatementError(VaultDBError):
    """A statement was refused before execution."""


class MalformedIdentifierError(StatementError):
    def __init__(self, identifier: object, kind: str = "column") -> None:
        super().__init__(f"Malformed {kind} name: {identifier!r}")
        self.identifier = identifier
        self.kind = kind


class EmptyPayloadError(StatementError):
    pass


class MissingWhereClauseError(StatementError):
    pass


class UnsupportedValueError(StatementError):
    """A bound value is not a ``str``, ``int``, ``float``, ``bool`` or ``None``."""

    def __init__(self, column: str, value_type: type) -> None:
        super().__init__(
            f"Unsupported value type {value_type.__name__} for column {column!r}"
        )
        self.column = column
        self.value_type = value_type


# --------------------------------------------------------------------------- #
# Execution
# --------------------------------------------------------------------------- #

class StatementExecutionError(VaultDBError):
    """The driver rejected a statement.

    Carries the statement text and the driver diagnostic.  Bound values
    found in the diagnostic are replaced with ``***``.
    """

    def __init__(self, sql: str, driver_message: Optional[str]) -> None:
        super().__init__(f"Statement failed: {driver_message} in statement: {sql}")
        self.sql = sql
        self.driver_message = driver_message
