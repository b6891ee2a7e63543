"""
security.crypto
~~~~~~~~~~~~~~~

AES-GCM helpers for the database password kept encrypted at rest.

The stored secret is the base64 encoding of the AES-GCM output
(ciphertext followed by the 16-byte tag).  Key and nonce are hex
strings, the form they take in an environment file.

The module exposes:

* :func:`decrypt_secret`
* :func:`encrypt_secret`
* :func:`generate_key`
"""

from __future__ import annotations

import base64
import binascii
import os
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..config import settings
from ..errors import DecryptionError


# --------------------------------------------------------------------------- #
# Helper Functions
# --------------------------------------------------------------------------- #

def _generate_random_bytes(n: int) -> bytes:
    """Return ``n`` cryptographically-secure random bytes."""
    return os.urandom(n)


def _decode_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value.strip())
    except ValueError as exc:
        raise DecryptionError(f"{what} is not valid hex", DecryptionError.MALFORMED) from exc


def _cipher(key: str) -> AESGCM:
    raw = _decode_hex(key, "key")
    if len(raw) not in settings.AES_GCM_KEY_SIZES:
        raise DecryptionError(
            f"key must be {', '.join(str(8 * n) for n in settings.AES_GCM_KEY_SIZES)} bits, "
            f"got {8 * len(raw)}",
            DecryptionError.MALFORMED,
        )
    return AESGCM(raw)


def _nonce(iv: str) -> bytes:
    raw = _decode_hex(iv, "iv")
    if not raw:
        raise DecryptionError("iv must not be empty", DecryptionError.MALFORMED)
    return raw


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def decrypt_secret(ciphertext: str, key: str, iv: str) -> str:
    """
    Decrypt ``ciphertext`` using AES-GCM.

    Parameters
    ----------
    ciphertext : str
        Base64 ciphertext with the authentication tag appended.
    key : str
        Hex-encoded 128, 192 or 256-bit key.
    iv : str
        Hex-encoded nonce used during encryption.

    Returns
    -------
    str
        The UTF-8 plaintext.

    Raises
    ------
    DecryptionError
        ``reason="authentication"`` when the tag does not verify,
        ``reason="malformed"`` for undecodable input.
    """
    aesgcm = _cipher(key)
    nonce = _nonce(iv)
    try:
        payload = base64.b64decode(ciphertext, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecryptionError("ciphertext is not valid base64", DecryptionError.MALFORMED) from exc
    if len(payload) < settings.AES_GCM_TAG_SIZE:
        raise DecryptionError("ciphertext is shorter than the GCM tag", DecryptionError.MALFORMED)

    try:
        plaintext = aesgcm.decrypt(nonce, payload, None)
    except InvalidTag as exc:
        raise DecryptionError(
            "ciphertext failed authentication", DecryptionError.AUTHENTICATION
        ) from exc

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionError("plaintext is not UTF-8", DecryptionError.MALFORMED) from exc


def encrypt_secret(plaintext: str, key: str, iv: str) -> str:
    """
    Encrypt ``plaintext`` using AES-GCM.

    Returns the base64 string to store in ``DB_PASS``.  Never reuse a
    nonce with the same key for a different plaintext.
    """
    aesgcm = _cipher(key)
    ct = aesgcm.encrypt(_nonce(iv), plaintext.encode("utf-8"), None)
    return base64.b64encode(ct).decode("ascii")


def generate_key(size: int = settings.AES_GCM_DEFAULT_KEY_SIZE) -> Tuple[str, str]:
    """Return a fresh ``(key, iv)`` pair, both hex-encoded."""
    key = AESGCM.generate_key(bit_length=8 * size)
    return key.hex(), _generate_random_bytes(settings.AES_GCM_NONCE_SIZE).hex()
