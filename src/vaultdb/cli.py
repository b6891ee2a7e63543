"""``vaultdb-encrypt``: produce the encrypted ``DB_PASS`` value for an env file."""

from __future__ import annotations

import argparse
import getpass
import os
import sys
from typing import List, Optional

from .config import settings
from .errors import DecryptionError
from .security import encrypt_secret, generate_key


def parse_args(argv: List[str]) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="vaultdb-encrypt",
        description="Encrypt a database password for the DB_PASS setting",
    )
    ap.add_argument("password", nargs="?", help="Plaintext password (prompted if omitted)")
    ap.add_argument("--key", default=os.environ.get(settings.ENV_KEY), help="Hex AES key (default: $KEY)")
    ap.add_argument("--iv", default=os.environ.get(settings.ENV_IV), help="Hex GCM nonce (default: $IV)")
    ap.add_argument("--generate-key", action="store_true", help="Print a new KEY and IV and exit")
    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    if args.generate_key:
        key, iv = generate_key()
        print(f"{settings.ENV_KEY}={key}")
        print(f"{settings.ENV_IV}={iv}")
        return 0
    if not args.key or not args.iv:
        print("error: --key and --iv (or KEY and IV) are required", file=sys.stderr)
        return 2
    password = args.password if args.password is not None else getpass.getpass("Password: ")
    try:
        token = encrypt_secret(password, args.key, args.iv)
    except DecryptionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    print(f"{settings.ENV_DB_PASS}={token}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
