import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from vaultdb import Database
from vaultdb.security import encrypt_secret

KEY = "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"
IV = "0102030405060708090a0b0c"
PASSWORD = "s3cret-pa55"


@pytest.fixture()
def env():
    return {
        "DB_HOST": "db.internal",
        "DB_USER": "app",
        "DB_PASS": encrypt_secret(PASSWORD, KEY, IV),
        "DB_NAME": "appdb",
        "KEY": KEY,
        "IV": IV,
    }


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        isolation_level="AUTOCOMMIT",
    )
    with eng.connect() as conn:
        conn.execute(text(
            "CREATE TABLE users ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " name TEXT,"
            " status INTEGER DEFAULT 0,"
            " active INTEGER DEFAULT 1,"
            " email TEXT UNIQUE)"
        ))
    yield eng
    eng.dispose()


@pytest.fixture()
def db(env, engine):
    seen = []

    def connect(config):
        seen.append(config)
        return engine.connect()

    database = Database(env, connect=connect)
    database.seen_configs = seen
    yield database
    database.close()
