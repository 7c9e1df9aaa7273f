import io

import pytest

from crevtools import term
from crevtools.term import (
    Color,
    Term,
    VerificationStatus,
    known_owners_count_color,
    read_new_passphrase,
    read_passphrase,
    verification_status_color,
)


class TtyStream(io.StringIO):
    def isatty(self):
        return True


def test_verification_status_colors():
    assert verification_status_color(VerificationStatus.VERIFIED) is Color.GREEN
    assert verification_status_color(VerificationStatus.LOCAL) is Color.GREEN
    assert verification_status_color(VerificationStatus.NEGATIVE) is Color.YELLOW
    assert verification_status_color(VerificationStatus.INSUFFICIENT) is None


def test_known_owners_count_color():
    assert known_owners_count_color(3) is Color.GREEN
    assert known_owners_count_color(0) is None


def test_print_without_tty_is_plain():
    out = io.StringIO()
    t = Term(stdout=out, stderr=io.StringIO(), stdin=io.StringIO())
    t.print("hello", Color.RED)
    assert out.getvalue() == "hello"
    assert t.stdout_is_tty is False


def test_print_on_tty_is_colored(monkeypatch):
    monkeypatch.setenv("TERM", "xterm")
    out = TtyStream()
    t = Term(stdout=out, stderr=io.StringIO(), stdin=io.StringIO())
    t.print("ok", Color.GREEN)
    assert out.getvalue() == "\x1b[32mok\x1b[0m"


def test_print_on_tty_without_color_is_plain(monkeypatch):
    monkeypatch.setenv("TERM", "xterm")
    out = TtyStream()
    t = Term(stdout=out, stderr=io.StringIO(), stdin=io.StringIO())
    t.print("ok")
    assert out.getvalue() == "ok"


def test_eprint_writes_to_stderr():
    out, err = io.StringIO(), io.StringIO()
    t = Term(stdout=out, stderr=err, stdin=io.StringIO())
    t.eprint("Unclean crate foo 1.0.0\n", Color.RED)
    assert err.getvalue() == "Unclean crate foo 1.0.0\n"
    assert out.getvalue() == ""


def test_read_passphrase_from_env(monkeypatch, capsys):
    monkeypatch.setenv("CREV_PASSPHRASE", "password")
    assert read_passphrase() == "password"
    assert "Using passphrase set in CREV_PASSPHRASE" in capsys.readouterr().err


def test_read_passphrase_from_command(monkeypatch):
    monkeypatch.delenv("CREV_PASSPHRASE", raising=False)
    monkeypatch.setenv("CREV_PASSPHRASE_CMD", "echo password")
    assert read_passphrase() == "password"


def test_read_passphrase_from_prompt(monkeypatch):
    monkeypatch.delenv("CREV_PASSPHRASE", raising=False)
    monkeypatch.delenv("CREV_PASSPHRASE_CMD", raising=False)
    monkeypatch.setattr(term.getpass, "getpass", lambda prompt, stream=None: "secret")
    assert read_passphrase() == "secret"


def test_read_new_passphrase_from_env(monkeypatch):
    monkeypatch.setenv("CREV_PASSPHRASE", "password")
    assert read_new_passphrase() == "password"


def test_read_new_passphrase_retries_on_mismatch(monkeypatch, capsys):
    monkeypatch.delenv("CREV_PASSPHRASE", raising=False)
    replies = iter(["token", "secret", "password", "password"])
    monkeypatch.setattr(term.getpass, "getpass", lambda prompt, stream=None: next(replies))
    assert read_new_passphrase() == "password"
    assert "Passphrases don't match, try again." in capsys.readouterr().err


def test_read_passphrase_command_failure(monkeypatch):
    monkeypatch.delenv("CREV_PASSPHRASE", raising=False)
    monkeypatch.setenv("CREV_PASSPHRASE_CMD", "exit 3")
    with pytest.raises(OSError):
        read_passphrase()