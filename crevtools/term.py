"""Possibly colored terminal output and passphrase prompts."""

from __future__ import annotations

import enum
import getpass
import os
import sys
from typing import Optional, TextIO

from crevtools.interaction import run_with_shell_cmd_capture_stdout


class VerificationStatus(enum.IntEnum):
    """Result of checking a crate against the web of trust."""

    NEGATIVE = 0
    INSUFFICIENT = 1
    VERIFIED = 2
    LOCAL = 3


class Color(enum.IntEnum):
    """Basic terminal foreground colors."""

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7

    @property
    def escape(self) -> str:
        return f"\x1b[3{int(self)}m"


_RESET = "\x1b[0m"


def verification_status_color(status: VerificationStatus) -> Optional[Color]:
    """Color used to display a verification status."""
    if status in (VerificationStatus.VERIFIED, VerificationStatus.LOCAL):
        return Color.GREEN
    if status is VerificationStatus.NEGATIVE:
        return Color.YELLOW
    return None


def known_owners_count_color(count: int) -> Optional[Color]:
    """Color used to display the count of known owners."""
    return Color.GREEN if count > 0 else None


def _is_tty(stream: TextIO) -> bool:
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def _supports_color() -> bool:
    if os.name == "nt":
        return True
    return os.environ.get("TERM", "") not in ("", "dumb")


class Term:
    """Helper to control (possibly) colored output."""

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        stdin: Optional[TextIO] = None,
    ) -> None:
        self._stdout = stdout if stdout is not None else sys.stdout
        self._stderr = stderr if stderr is not None else sys.stderr
        stdin = stdin if stdin is not None else sys.stdin
        self.stdout_is_tty = _is_tty(self._stdout)
        self.stderr_is_tty = _is_tty(self._stderr)
        self.stdin_is_tty = _is_tty(stdin)

    @staticmethod
    def _output_to(stream: TextIO, text: str, color: Optional[Color], is_tty: bool) -> None:
        use_color = is_tty and _supports_color() and color is not None
        if use_color:
            stream.write(color.escape)
        stream.write(text)
        if use_color:
            stream.write(_RESET)
        stream.flush()

    def print(self, text: str, color: Optional[Color] = None) -> None:
        """Write ``text`` to standard output, colored when possible."""
        self._output_to(self._stdout, text, color, self.stdout_is_tty)

    def eprint(self, text: str, color: Optional[Color] = None) -> None:
        """Write ``text`` to standard error, colored when stdout is a terminal."""
        self._output_to(self._stderr, text, color, self.stdout_is_tty)


def _eprint(text: str) -> None:
    sys.stderr.write(text)
    sys.stderr.flush()


def read_passphrase() -> str:
    """Read the passphrase from the environment, a command, or the terminal."""
    passphrase = os.environ.get("CREV_PASSPHRASE")
    if passphrase is not None:
        _eprint("Using passphrase set in CREV_PASSPHRASE\n")
        return passphrase
    cmd = os.environ.get("CREV_PASSPHRASE_CMD")
    if cmd is not None:
        output = run_with_shell_cmd_capture_stdout(cmd, None)
        return output.decode("utf-8", errors="replace").strip()
    return getpass.getpass("Enter passphrase to unlock: ", stream=sys.stderr)


def read_new_passphrase() -> str:
    """Read a new passphrase, asking twice until both entries match."""
    passphrase = os.environ.get("CREV_PASSPHRASE")
    if passphrase is not None:
        _eprint("Using passphrase set in CREV_PASSPHRASE\n")
        return passphrase
    while True:
        first = getpass.getpass("Enter new passphrase: ", stream=sys.stderr)
        second = getpass.getpass("Enter new passphrase again: ", stream=sys.stderr)
        if first == second:
            return first
        _eprint("\nPassphrases don't match, try again.\n")