import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from crevtools.interaction import (
    CancelReason,
    CancelledError,
    build_shell_command,
    now,
    run_with_shell_cmd,
    run_with_shell_cmd_capture_stdout,
    run_with_shell_cmd_custom,
    try_again_or_cancel,
    yes_or_no_was_y,
)


def _feed(monkeypatch, text):
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


def test_now_is_aware_and_current():
    moment = now()
    assert abs(moment - datetime.now(timezone.utc)) < timedelta(seconds=5)


@pytest.mark.parametrize(
    "reply, expected",
    [("y\n", True), ("Y\n", True), ("n\n", False), ("N\n", False), ("\n", None)],
)
def test_yes_or_no_answers(monkeypatch, reply, expected):
    _feed(monkeypatch, reply)
    assert yes_or_no_was_y("Continue?") is expected


def test_yes_or_no_repeats_on_unknown(monkeypatch, capsys):
    _feed(monkeypatch, "maybe\nwhat\nY\n")
    assert yes_or_no_was_y("Continue?") is True
    assert capsys.readouterr().err.count("Continue? ") == 3


def test_yes_or_no_eof_raises(monkeypatch):
    _feed(monkeypatch, "")
    with pytest.raises(EOFError):
        yes_or_no_was_y("Continue?")


def test_try_again_no_cancels_by_user(monkeypatch):
    _feed(monkeypatch, "n\n")
    with pytest.raises(CancelledError) as info:
        try_again_or_cancel()
    assert info.value.reason is CancelReason.BY_USER
    assert str(info.value) == "Cancelled by the user"


def test_try_again_no_input_cancels(monkeypatch):
    _feed(monkeypatch, "")
    with pytest.raises(CancelledError) as info:
        try_again_or_cancel()
    assert info.value.reason is CancelReason.NO_INPUT


def test_try_again_default_is_yes(monkeypatch, capsys):
    _feed(monkeypatch, "\n")
    try_again_or_cancel()
    assert "Try again (Y/n) " in capsys.readouterr().err


def test_build_shell_command_quotes_argument():
    argv, env = build_shell_command("ls -l", Path("dir with space"))
    assert argv == ["/bin/sh", "-c", "ls -l 'dir with space'"]
    assert env == {}


def test_build_shell_command_without_argument():
    argv, _ = build_shell_command("echo hi", None)
    assert argv == ["/bin/sh", "-c", "echo hi"]


def test_capture_stdout():
    assert run_with_shell_cmd_capture_stdout("echo hello", None) == b"hello\n"


def test_capture_stdout_passes_argument_intact(tmp_path):
    target = tmp_path / "a b'c"
    assert run_with_shell_cmd_capture_stdout("printf %s", target) == str(target).encode()


def test_capture_stdout_failure_raises():
    with pytest.raises(OSError, match="non-zero"):
        run_with_shell_cmd_capture_stdout("exit 2", None)


def test_run_with_shell_cmd_returns_exit_code():
    assert run_with_shell_cmd("exit 3", None) == 3
    assert run_with_shell_cmd("true", None) == 0


def test_run_custom_without_capture_has_no_stdout():
    result = run_with_shell_cmd_custom("true", None, False)
    assert result.stdout is None
    assert result.returncode == 0