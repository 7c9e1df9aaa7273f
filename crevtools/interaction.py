"""User interaction: clock, yes/no prompts and running shell commands."""

from __future__ import annotations

import enum
import os
import shlex
import subprocess
import sys
from datetime import datetime
from os import PathLike
from typing import Dict, List, Optional, Tuple, Union

StrPath = Union[str, "PathLike[str]"]


class CancelReason(enum.Enum):
    """Why an interactive operation was cancelled."""

    BY_USER = "Cancelled by the user"
    NO_INPUT = "Cancelled due to terminal I/O error"


class CancelledError(Exception):
    """An interactive operation was cancelled."""

    def __init__(self, reason: CancelReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


def now() -> datetime:
    """Return the current time with the fixed offset of the local timezone."""
    return datetime.now().astimezone()


def _prompt_reply_stderr(prompt: str) -> str:
    sys.stderr.write(prompt)
    sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError("no input available")
    return line.rstrip("\r\n")


def yes_or_no_was_y(message: str) -> Optional[bool]:
    """Ask a yes/no question; return True, False, or None on an empty reply."""
    while True:
        reply = _prompt_reply_stderr(f"{message} ")
        if reply in ("y", "Y"):
            return True
        if reply in ("n", "N"):
            return False
        if reply == "":
            return None


def try_again_or_cancel() -> None:
    """Ask whether to try again; raise CancelledError if the answer is no."""
    try:
        answer = yes_or_no_was_y("Try again (Y/n)")
    except (OSError, EOFError) as exc:
        raise CancelledError(CancelReason.NO_INPUT) from exc
    if answer is False:
        raise CancelledError(CancelReason.BY_USER)


def build_shell_command(
    cmd: str, arg: Optional[StrPath]
) -> Tuple[List[str], Dict[str, str]]:
    """Return the argv and extra environment that run ``cmd`` through the shell."""
    if os.name == "nt":
        if arg is not None:
            return (
                ["cmd.exe", "/c", "%CREV_CMD% %CREV_ARG%"],
                {"CREV_CMD": cmd, "CREV_ARG": os.fspath(arg)},
            )
        return ["cmd.exe", "/c", "%CREV_CMD%"], {"CREV_CMD": cmd}
    if os.name == "posix":
        if arg is not None:
            return ["/bin/sh", "-c", f"{cmd} {shlex.quote(os.fspath(arg))}"], {}
        return ["/bin/sh", "-c", cmd], {}
    raise RuntimeError(f"Unsupported platform: {os.name}")


def run_with_shell_cmd_custom(
    cmd: str, arg: Optional[StrPath], capture_stdout: bool
) -> subprocess.CompletedProcess:
    """Run ``cmd`` (with an optional quoted argument) through the system shell."""
    argv, extra_env = build_shell_command(cmd, arg)
    env = {**os.environ, **extra_env} if extra_env else None
    return subprocess.run(
        argv,
        env=env,
        stdout=subprocess.PIPE if capture_stdout else None,
        check=False,
    )


def run_with_shell_cmd(cmd: str, arg: Optional[StrPath]) -> int:
    """Run a shell command and return its exit code."""
    return run_with_shell_cmd_custom(cmd, arg, False).returncode


def run_with_shell_cmd_capture_stdout(cmd: str, arg: Optional[StrPath]) -> bytes:
    """Run a shell command and return its standard output.

    Raises OSError if the command exits with a non-zero status.
    """
    result = run_with_shell_cmd_custom(cmd, arg, True)
    if result.returncode != 0:
        raise OSError("command failed with non-zero status")
    return result.stdout