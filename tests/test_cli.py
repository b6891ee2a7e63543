from vaultdb.cli import main
from vaultdb.security import decrypt_secret

from conftest import IV, KEY


def test_encrypt_prints_db_pass(capsys):
    assert main(["hunter2", "--key", KEY, "--iv", IV]) == 0
    line = capsys.readouterr().out.strip()
    assert line.startswith("DB_PASS=")
    assert decrypt_secret(line[len("DB_PASS="):], KEY, IV) == "hunter2"


def test_key_and_iv_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("KEY", KEY)
    monkeypatch.setenv("IV", IV)
    assert main(["hunter2"]) == 0
    assert capsys.readouterr().out.startswith("DB_PASS=")


def test_missing_key(monkeypatch, capsys):
    monkeypatch.delenv("KEY", raising=False)
    monkeypatch.delenv("IV", raising=False)
    assert main(["hunter2"]) == 2
    assert "required" in capsys.readouterr().err


def test_bad_key(capsys):
    assert main(["hunter2", "--key", "abc", "--iv", IV]) == 2
    assert "error" in capsys.readouterr().err


def test_generate_key(capsys):
    assert main(["--generate-key"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("KEY=") and out[1].startswith("IV=")
