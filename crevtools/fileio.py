"""Filesystem helpers: atomic writes, YAML files and directory moves."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path
from typing import IO, Any, Callable, Union

import yaml

StrPath = Union[str, "PathLike[str]"]


class YamlIOError(Exception):
    """Reading or writing a YAML file failed."""


def move_dir_content(source: StrPath, destination: StrPath) -> None:
    """Move every entry of ``source`` into ``destination``, creating it if needed."""
    source = Path(source)
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)
    for entry in source.iterdir():
        os.rename(entry, destination / entry.name)


def append_to_path(path: StrPath, suffix: str) -> Path:
    """Append ``suffix`` verbatim to the last component of ``path``."""
    return Path(os.fspath(path) + suffix)


def store_to_file_with(path: StrPath, writer: Callable[[IO[bytes]], Any]) -> None:
    """Atomically write a file: ``writer`` fills a temporary file that replaces ``path``.

    Exceptions raised by ``writer`` propagate and leave ``path`` untouched.
    """
    path = Path(path)
    if path.parent == path:
        raise ValueError("Not a root path")
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(".tmp")
    with open(tmp_path, "wb") as stream:
        writer(stream)
        stream.flush()
        os.fsync(stream.fileno())
    os.replace(tmp_path, path)


def store_str_to_file(path: StrPath, text: str) -> None:
    """Atomically write ``text`` as UTF-8 to ``path``."""
    data = text.encode("utf-8")
    store_to_file_with(path, lambda stream: stream.write(data))


def save_to_yaml_file(path: StrPath, value: Any) -> None:
    """Serialize ``value`` as YAML and store it atomically at ``path``."""
    path = Path(path)
    if path.parent == path:
        raise YamlIOError("Can't save to root path")
    try:
        text = yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
    except yaml.YAMLError as exc:
        raise YamlIOError(f"YAML: {exc}") from exc
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        store_str_to_file(path, text)
    except OSError as exc:
        raise YamlIOError(f"I/O: {exc}") from exc


def read_from_yaml_file(path: StrPath) -> Any:
    """Load and return the YAML document stored at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise YamlIOError(f"I/O: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise YamlIOError(f"YAML: {exc}") from exc