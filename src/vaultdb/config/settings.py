"""
Configuration settings for vaultdb.
"""

import re

# ----------------------------------------------------------------------
# Environment Keys
# ----------------------------------------------------------------------
ENV_DB_HOST = "DB_HOST"
ENV_DB_USER = "DB_USER"
ENV_DB_PASS = "DB_PASS"  # AES-GCM ciphertext, base64
ENV_DB_NAME = "DB_NAME"
ENV_KEY = "KEY"  # hex-encoded AES key
ENV_IV = "IV"  # hex-encoded GCM nonce

# Optional keys
ENV_DB_DRIVER = "DB_DRIVER"
ENV_DB_PORT = "DB_PORT"

REQUIRED_ENV_KEYS = (
    ENV_DB_HOST,
    ENV_DB_USER,
    ENV_DB_PASS,
    ENV_DB_NAME,
    ENV_KEY,
    ENV_IV,
)

# ----------------------------------------------------------------------
# Connection Settings
# ----------------------------------------------------------------------
DEFAULT_DRIVER = "mysql+pymysql"
MYSQL_CHARSET = "utf8mb4"

# ----------------------------------------------------------------------
# Statement Settings
# ----------------------------------------------------------------------
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")  # use with fullmatch
ORDER_DIRECTIONS = ("ASC", "DESC")
WHERE_PREFIX = "w_"
SET_PREFIX = "set_"

# ----------------------------------------------------------------------
# Security Settings
# ----------------------------------------------------------------------
AES_GCM_KEY_SIZES = (16, 24, 32)  # 128/192/256-bit keys
AES_GCM_DEFAULT_KEY_SIZE = 32
AES_GCM_NONCE_SIZE = 12
AES_GCM_TAG_SIZE = 16
