"""Security package initialization.

The :mod:`vaultdb.security` package recovers the database password from
its encrypted form and produces the connection parameters.
"""

from .crypto import decrypt_secret, encrypt_secret, generate_key
from .credentials import ConnectionConfig, resolve_credentials
