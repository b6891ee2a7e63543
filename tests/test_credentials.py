import pytest

from vaultdb.errors import ConfigurationError, DecryptionError
from vaultdb.security import ConnectionConfig, resolve_credentials

from conftest import PASSWORD


def test_resolves_plaintext_password(env):
    config = resolve_credentials(env)
    assert config == ConnectionConfig(
        host="db.internal", username="app", password=PASSWORD, database="appdb"
    )
    assert config.driver == "mysql+pymysql"
    assert config.port is None


def test_repr_hides_password(env):
    assert PASSWORD not in repr(resolve_credentials(env))


def test_config_is_immutable(env):
    config = resolve_credentials(env)
    with pytest.raises(AttributeError):
        config.password = "other"


@pytest.mark.parametrize("key", ["DB_HOST", "DB_USER", "DB_PASS", "DB_NAME", "KEY", "IV"])
def test_missing_value(env, key):
    del env[key]
    with pytest.raises(ConfigurationError) as exc:
        resolve_credentials(env)
    assert exc.value.missing == (key,)


def test_blank_values_reported_together(env):
    env["DB_HOST"] = ""
    env["IV"] = "   "
    with pytest.raises(ConfigurationError) as exc:
        resolve_credentials(env)
    assert exc.value.missing == ("DB_HOST", "IV")


def test_missing_value_checked_before_decrypt(env):
    calls = []
    del env["DB_NAME"]
    with pytest.raises(ConfigurationError):
        resolve_credentials(env, decrypt=lambda *a: calls.append(a) or "pw")
    assert calls == []


def test_decrypt_called_once_with_env_values(env):
    calls = []

    def decrypt(ciphertext, key, iv):
        calls.append((ciphertext, key, iv))
        return "plain"

    config = resolve_credentials(env, decrypt=decrypt)
    assert config.password == "plain"
    assert calls == [(env["DB_PASS"], env["KEY"], env["IV"])]


def test_foreign_decrypt_failure_is_wrapped(env):
    def decrypt(ciphertext, key, iv):
        raise ValueError("bad padding")

    with pytest.raises(DecryptionError) as exc:
        resolve_credentials(env, decrypt=decrypt)
    assert isinstance(exc.value.__cause__, ValueError)


def test_empty_plaintext_is_refused(env):
    with pytest.raises(DecryptionError):
        resolve_credentials(env, decrypt=lambda *a: "")


def test_optional_driver_and_port(env):
    env["DB_DRIVER"] = "postgresql+psycopg2"
    env["DB_PORT"] = "5433"
    config = resolve_credentials(env)
    assert config.driver == "postgresql+psycopg2"
    assert config.port == 5433


def test_non_integer_port(env):
    env["DB_PORT"] = "http"
    with pytest.raises(ConfigurationError):
        resolve_credentials(env)
