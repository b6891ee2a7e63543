"""Data access package.

Statement builders, the executor and the :class:`Database` facade that
ties them to one connection.
"""

from .database import Database, open_connection
from .executor import execute
from .statements import (
    OperationKind,
    Statement,
    build_delete,
    build_insert,
    build_select,
    build_update,
)
