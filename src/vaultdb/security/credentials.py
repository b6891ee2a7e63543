"""
security.credentials
~~~~~~~~~~~~~~~~~~~~

Turns environment values into a :class:`ConnectionConfig`, recovering the
database password from its encrypted form on the way.  Nothing here
talks to the database.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from ..config import settings
from ..errors import ConfigurationError, DecryptionError
from .crypto import decrypt_secret

logger = logging.getLogger(__name__)

#: ``decrypt(ciphertext, key, iv) -> plaintext``
Decryptor = Callable[[str, str, str], str]


@dataclass(frozen=True)
class ConnectionConfig:
    """Everything needed to open the connection.  The password is plaintext."""
    host: str
    username: str
    password: str = field(repr=False)
    database: str
    driver: str = settings.DEFAULT_DRIVER
    port: Optional[int] = None


def _require(env: Mapping[str, str]) -> dict[str, str]:
    values = {}
    missing = []
    for name in settings.REQUIRED_ENV_KEYS:
        value = env.get(name)
        if value is None or not value.strip():
            missing.append(name)
        else:
            values[name] = value
    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}", tuple(missing)
        )
    return values


def _port(env: Mapping[str, str]) -> Optional[int]:
    raw = env.get(settings.ENV_DB_PORT)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{settings.ENV_DB_PORT} must be an integer, got {raw!r}"
        ) from exc


def resolve_credentials(
    env: Optional[Mapping[str, str]] = None,
    decrypt: Decryptor = decrypt_secret,
) -> ConnectionConfig:
    """
    Build a :class:`ConnectionConfig` from ``env``.

    Parameters
    ----------
    env : Mapping[str, str], optional
        Configuration source; defaults to :data:`os.environ`.
    decrypt : callable, optional
        Decryption primitive ``(ciphertext, key, iv) -> plaintext``.

    Raises
    ------
    ConfigurationError
        When any of ``DB_HOST``, ``DB_USER``, ``DB_PASS``, ``DB_NAME``,
        ``KEY`` or ``IV`` is missing or blank.
    DecryptionError
        When the password cannot be decrypted, or decrypts to nothing.
    """
    if env is None:
        env = os.environ
    values = _require(env)
    port = _port(env)
    driver = (env.get(settings.ENV_DB_DRIVER) or "").strip() or settings.DEFAULT_DRIVER

    try:
        password = decrypt(
            values[settings.ENV_DB_PASS], values[settings.ENV_KEY], values[settings.ENV_IV]
        )
    except DecryptionError:
        logger.error("Could not decrypt %s", settings.ENV_DB_PASS)
        raise
    except Exception as exc:
        logger.error("Could not decrypt %s", settings.ENV_DB_PASS)
        raise DecryptionError(f"Could not decrypt {settings.ENV_DB_PASS}: {exc}") from exc

    if not password:
        raise DecryptionError(f"{settings.ENV_DB_PASS} decrypted to an empty password")

    return ConnectionConfig(
        host=values[settings.ENV_DB_HOST],
        username=values[settings.ENV_DB_USER],
        password=password,
        database=values[settings.ENV_DB_NAME],
        driver=driver,
        port=port,
    )
