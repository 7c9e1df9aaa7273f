"""Package dependency graphs and lookups of packages by name and version."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Set, Tuple, Union

from semver import Version


@dataclass(frozen=True)
class _Edge:
    source: Hashable
    target: Hashable
    kind: Any


class DependencyGraph:
    """A directed graph of packages; an edge points from a package to its dependency.

    Several edges may connect the same two packages, one per matching
    dependency declaration (for instance a normal and a dev dependency).
    """

    def __init__(self) -> None:
        self._outgoing: Dict[Hashable, List[_Edge]] = {}
        self._incoming: Dict[Hashable, List[_Edge]] = {}

    def add_package(self, pkg_id: Hashable) -> None:
        """Add a package node; adding an existing one does nothing."""
        if pkg_id not in self._outgoing:
            self._outgoing[pkg_id] = []
            self._incoming[pkg_id] = []

    def add_dependency(self, pkg_id: Hashable, dep_id: Hashable, kind: Any = "normal") -> None:
        """Record that ``pkg_id`` depends on ``dep_id``, adding missing nodes."""
        self.add_package(pkg_id)
        self.add_package(dep_id)
        edge = _Edge(pkg_id, dep_id, kind)
        self._outgoing[pkg_id].append(edge)
        self._incoming[dep_id].append(edge)

    def get_all_pkg_ids(self) -> Iterator[Hashable]:
        """Iterate over every package in the graph."""
        return iter(list(self._outgoing))

    def get_dependencies_of(self, pkg_id: Hashable) -> Iterator[Hashable]:
        """Iterate over direct dependencies, most recently added edge first.

        A package that is not in the graph has no dependencies.
        """
        return (edge.target for edge in reversed(self._outgoing.get(pkg_id, [])))

    def get_reverse_dependencies_of(self, pkg_id: Hashable) -> Iterator[Hashable]:
        """Iterate over packages depending directly on ``pkg_id``, most recent first."""
        return (edge.source for edge in reversed(self._incoming.get(pkg_id, [])))

    def get_recursive_dependencies_of(self, root_pkg_id: Hashable) -> Set[Hashable]:
        """Return all transitive dependencies of ``root_pkg_id``, excluding itself."""
        pending = deque([root_pkg_id])
        processed: Set[Hashable] = set()
        while pending:
            pkg_id = pending.popleft()
            if pkg_id in processed:
                continue
            processed.add(pkg_id)
            edges = self._outgoing.get(pkg_id)
            if edges is None:
                sys.stderr.write(
                    f"No node for {pkg_id} when checking recdeps for {root_pkg_id}\n"
                )
                continue
            pending.extend(edge.target for edge in edges)
        processed.discard(root_pkg_id)
        return processed


def split_features(features: Optional[str]) -> List[str]:
    """Split a comma-separated feature list, dropping empty entries."""
    return [feature for feature in (features or "").split(",") if feature]


def _name_and_version(pkg_id: Any) -> Tuple[str, Any]:
    if hasattr(pkg_id, "name") and hasattr(pkg_id, "version"):
        return pkg_id.name, pkg_id.version
    name, version = pkg_id
    return name, version


def find_pkg_id_by_selector(
    pkg_ids: Iterable[Any],
    name: str,
    version: Union[None, str, Version],
) -> Optional[Any]:
    """Find the single package id with ``name`` and, if given, ``version``.

    Package ids are objects with ``name`` and ``version`` attributes or
    ``(name, version)`` pairs. Returns None when nothing matches and raises
    ValueError when more than one package matches.
    """
    wanted = None if version is None else str(version)
    matches = []
    for pkg_id in pkg_ids:
        pkg_name, pkg_version = _name_and_version(pkg_id)
        if pkg_name == name and (wanted is None or str(pkg_version) == wanted):
            matches.append(pkg_id)
    if not matches:
        return None
    if len(matches) == 1:
        return matches[0]
    versions = ", ".join(str(_name_and_version(m)[1]) for m in matches)
    raise ValueError(f"Ambiguous selection: {len(matches)} matches found: {versions}")