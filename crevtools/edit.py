"""Editing text and files interactively in the user's editor."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import time
from os import PathLike
from pathlib import Path
from typing import Optional, Tuple, Union

from crevtools.interaction import CancelledError, CancelReason, run_with_shell_cmd

StrPath = Union[str, "PathLike[str]"]

_EDIT_FILE_NAME = "crev.review.yaml"


def _git_default_editor() -> Optional[str]:
    for scope in ("--global", "--system"):
        try:
            result = subprocess.run(
                ["git", "config", scope, "--get", "core.editor"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError:
            return None
        if result.returncode == 0:
            return result.stdout.strip()
    return None


def get_editor_to_use() -> str:
    """Return the editor from VISUAL, EDITOR, git's core.editor, or ``vi``."""
    for variable in ("VISUAL", "EDITOR"):
        value = os.environ.get(variable)
        if value is not None:
            return value
    editor = _git_default_editor()
    return editor if editor is not None else "vi"


def edit_file(path: StrPath) -> None:
    """Open ``path`` in the editor; raise RuntimeError if the editor fails."""
    editor = get_editor_to_use()
    status = run_with_shell_cmd(editor, path)
    if status != 0:
        raise RuntimeError(f"Can't launch editor {editor}: exit status: {status}")


def _mtime(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return time.time_ns()


def edit_text_interactively_raw(text: str) -> Tuple[str, bool]:
    """Edit ``text`` in a temporary file; return the result and whether it was saved."""
    with tempfile.TemporaryDirectory() as directory:
        path = Path(directory) / _EDIT_FILE_NAME
        path.write_text(text, encoding="utf-8", newline="")
        started = _mtime(path)
        edit_file(path)
        modified = _mtime(path)
        with open(path, encoding="utf-8", newline="") as stream:
            edited = stream.read()
    return edited, started != modified


def edit_text_interactively(text: str) -> str:
    """Edit ``text`` in the editor and return the result."""
    return edit_text_interactively_raw(text)[0]


def _prompt_reply_stderr(prompt: str) -> str:
    sys.stderr.write(prompt)
    sys.stderr.flush()
    line = sys.stdin.readline()
    if not line:
        raise EOFError("no input available")
    return line.rstrip("\r\n")


def edit_text_interactively_until_written_to(text: str) -> str:
    """Edit ``text`` until the file is saved or the user accepts it unsaved.

    Raises CancelledError if the user quits.
    """
    while True:
        edited, modified = edit_text_interactively_raw(text)
        if modified:
            return edited
        sys.stderr.write(
            "File not written to. Make sure to save it at least once to confirm the data.\n"
        )
        reply = _prompt_reply_stderr("Commit anyway? (y/N/q) ")
        if reply in ("y", "Y"):
            return edited
        if reply in ("q", "Q"):
            raise CancelledError(CancelReason.BY_USER)