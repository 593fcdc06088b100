import pytest

from vanity_eth import cli
from vanity_eth.cipher import decrypt_string, encrypt_string
from vanity_eth.search import Match

FAKE_MATCH = Match("ab" + "0" * 38, "1" * 64)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("VANITY_WORKERS", "VANITY_REPORT_INTERVAL", "VANITY_START_METHOD", "VANITY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_search(monkeypatch):
    calls = []

    def fake(prefix, **kwargs):
        calls.append((prefix, kwargs))
        return FAKE_MATCH

    monkeypatch.setattr(cli, "find_vanity_address", fake)
    return calls


def feed_input(monkeypatch, line):
    def fake_input(*args):
        if line is None:
            raise EOFError
        return line

    monkeypatch.setattr("builtins.input", fake_input)


@pytest.mark.parametrize("argv", [["-h"], ["--help"], ["-p"], ["--prefix", "ab", "--key"], ["-e"], ["-d"]])
def test_help(argv, capsys, fake_search):
    assert cli.main(argv) == 0
    assert capsys.readouterr().out.startswith("Usage:")
    assert fake_search == []


def test_generate_plain(capsys, fake_search):
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "Generating random private key" in out
    assert f"Address: 0x{FAKE_MATCH.address}" in out
    assert f"Private key not encrypted: {FAKE_MATCH.private_key}" in out
    assert fake_search[0][0] == ""


def test_generate_with_prefix_is_canonicalized(capsys, fake_search):
    assert cli.main(["generate", "--prefix", "Bad"]) == 0
    assert fake_search[0][0] == "8ad"
    assert "addresses starting with: Bad" in capsys.readouterr().out


def test_generate_encrypted(capsys, fake_search):
    assert cli.main(["-p", "ab", "-k", "secret"]) == 0
    out = capsys.readouterr().out
    line = next(l for l in out.splitlines() if l.startswith("Private key encrypted"))
    ciphertext = line.split(": ", 1)[1]
    assert decrypt_string(ciphertext, "secret") == FAKE_MATCH.private_key


def test_invalid_prefix_does_not_search(capsys, fake_search):
    assert cli.main(["--prefix", "monkey"]) == 1
    assert "Invalid prefix" in capsys.readouterr().out
    assert fake_search == []


def test_settings_passed_to_search(monkeypatch, fake_search):
    monkeypatch.setenv("VANITY_WORKERS", "3")
    monkeypatch.setenv("VANITY_REPORT_INTERVAL", "5")
    cli.main(["-p", "ab"])
    kwargs = fake_search[0][1]
    assert kwargs["workers"] == 3
    assert kwargs["interval"] == 5.0


def test_bad_configuration(monkeypatch, capsys, fake_search):
    monkeypatch.setenv("VANITY_WORKERS", "lots")
    assert cli.main([]) == 1
    assert fake_search == []


def test_encrypt(monkeypatch, capsys):
    feed_input(monkeypatch, "hello")
    assert cli.main(["--encrypt", "pw"]) == 0
    out = capsys.readouterr().out
    assert "Enter the string to encrypt:" in out
    assert f"Encrypted string: {encrypt_string('hello', 'pw')}" in out


def test_decrypt(monkeypatch, capsys):
    feed_input(monkeypatch, encrypt_string("hello", "pw"))
    assert cli.main(["-d", "pw"]) == 0
    assert "Decrypted string: hello" in capsys.readouterr().out


def test_decrypt_failure_is_reported(monkeypatch, capsys):
    feed_input(monkeypatch, "definitely not ciphertext")
    assert cli.main(["-d", "pw"]) == 0
    assert "Decryption failed" in capsys.readouterr().out


@pytest.mark.parametrize("flag", ["-e", "-d"])
def test_end_of_input(flag, monkeypatch, capsys):
    feed_input(monkeypatch, None)
    assert cli.main([flag, "pw"]) == 0
    assert "Invalid input" in capsys.readouterr().out


def test_encrypt_wins_over_decrypt(monkeypatch, capsys, fake_search):
    feed_input(monkeypatch, "hello")
    cli.main(["-d", "pw", "-e", "pw"])
    assert "Encrypted string:" in capsys.readouterr().out
    assert fake_search == []


def test_values_may_start_with_dash(monkeypatch, capsys, fake_search):
    assert cli.main(["--prefix", "ab", "--key", "-secret"]) == 0
    out = capsys.readouterr().out
    assert 'encrypted with key "-secret"' in out
    ciphertext = out.strip().splitlines()[-1].split(": ", 1)[1]
    assert decrypt_string(ciphertext, "-secret") == FAKE_MATCH.private_key


def test_short_flag_value_starting_with_dash(monkeypatch, capsys):
    feed_input(monkeypatch, "hello")
    assert cli.main(["-e", "-pw"]) == 0
    assert f"Encrypted string: {encrypt_string('hello', '-pw')}" in capsys.readouterr().out


def test_attach_values():
    assert cli.attach_values(["-k", "-x", "generate", "--prefix", "ab"]) == ["--key=-x", "generate", "--prefix=ab"]
    assert cli.attach_values(["-p", "ab", "-k"]) == ["--prefix=ab", "-k"]


@pytest.mark.parametrize("flag", ["-e", "-d"])
def test_cipher_modes_ignore_search_configuration(flag, monkeypatch, capsys):
    monkeypatch.setenv("VANITY_WORKERS", "lots")
    feed_input(monkeypatch, encrypt_string("hello", "pw"))
    assert cli.main([flag, "pw"]) == 0
    assert "Invalid configuration" not in capsys.readouterr().err


def test_prefix_longer_than_address(capsys, fake_search):
    assert cli.main(["-p", "a" * 41]) == 1
    assert "Invalid prefix" in capsys.readouterr().out
    assert fake_search == []
