from typing import NamedTuple

import pytest
from semver import Version

from crevtools.graph import DependencyGraph, find_pkg_id_by_selector, split_features


class Pkg(NamedTuple):
    name: str
    version: Version


def _chain_graph():
    graph = DependencyGraph()
    graph.add_dependency("root", "a")
    graph.add_dependency("root", "b")
    graph.add_dependency("a", "c")
    graph.add_dependency("b", "c")
    graph.add_dependency("c", "d")
    return graph


def test_all_pkg_ids_contains_every_node():
    graph = _chain_graph()
    graph.add_package("lonely")
    assert set(graph.get_all_pkg_ids()) == {"root", "a", "b", "c", "d", "lonely"}


def test_add_package_is_idempotent():
    graph = DependencyGraph()
    graph.add_package("x")
    graph.add_dependency("x", "y")
    graph.add_package("x")
    assert list(graph.get_dependencies_of("x")) == ["y"]
    assert sorted(graph.get_all_pkg_ids()) == ["x", "y"]


def test_direct_dependencies_most_recent_first():
    graph = _chain_graph()
    assert list(graph.get_dependencies_of("root")) == ["b", "a"]


def test_reverse_dependencies():
    graph = _chain_graph()
    assert set(graph.get_reverse_dependencies_of("c")) == {"a", "b"}
    assert list(graph.get_reverse_dependencies_of("root")) == []


def test_parallel_edges_are_kept():
    graph = DependencyGraph()
    graph.add_dependency("p", "q", "normal")
    graph.add_dependency("p", "q", "development")
    assert list(graph.get_dependencies_of("p")) == ["q", "q"]
    assert list(graph.get_reverse_dependencies_of("q")) == ["p", "p"]


def test_unknown_package_has_no_dependencies():
    graph = _chain_graph()
    assert list(graph.get_dependencies_of("missing")) == []
    assert list(graph.get_reverse_dependencies_of("missing")) == []


def test_recursive_dependencies_exclude_root():
    graph = _chain_graph()
    assert graph.get_recursive_dependencies_of("root") == {"a", "b", "c", "d"}
    assert graph.get_recursive_dependencies_of("c") == {"d"}
    assert graph.get_recursive_dependencies_of("d") == set()


def test_recursive_dependencies_handle_cycles():
    graph = DependencyGraph()
    graph.add_dependency("x", "y")
    graph.add_dependency("y", "z")
    graph.add_dependency("z", "x")
    assert graph.get_recursive_dependencies_of("x") == {"y", "z"}


def test_recursive_dependencies_of_missing_root_reports(capsys):
    graph = _chain_graph()
    assert graph.get_recursive_dependencies_of("ghost") == set()
    assert "No node for ghost when checking recdeps for ghost" in capsys.readouterr().err


def test_recursive_is_superset_of_direct():
    graph = _chain_graph()
    for pkg in graph.get_all_pkg_ids():
        direct = set(graph.get_dependencies_of(pkg)) - {pkg}
        assert direct <= graph.get_recursive_dependencies_of(pkg)


@pytest.mark.parametrize(
    "text, expected",
    [
        (None, []),
        ("", []),
        ("serde", ["serde"]),
        ("serde,derive", ["serde", "derive"]),
        (",serde,,derive,", ["serde", "derive"]),
    ],
)
def test_split_features(text, expected):
    assert split_features(text) == expected


def _pkgs():
    return [
        Pkg("serde", Version.parse("1.0.0")),
        Pkg("serde", Version.parse("1.0.1")),
        Pkg("log", Version.parse("0.4.8")),
    ]


def test_find_by_name_only_unique():
    assert find_pkg_id_by_selector(_pkgs(), "log", None) == Pkg("log", Version.parse("0.4.8"))


def test_find_by_name_and_version():
    found = find_pkg_id_by_selector(_pkgs(), "serde", Version.parse("1.0.1"))
    assert found == Pkg("serde", Version.parse("1.0.1"))


def test_find_accepts_version_string_and_pairs():
    pairs = [("rand", "0.7.3"), ("rand", "0.8.0")]
    assert find_pkg_id_by_selector(pairs, "rand", "0.8.0") == ("rand", "0.8.0")


def test_find_no_match_returns_none():
    assert find_pkg_id_by_selector(_pkgs(), "tokio", None) is None
    assert find_pkg_id_by_selector(_pkgs(), "log", "9.9.9") is None


def test_find_ambiguous_raises():
    with pytest.raises(ValueError, match="Ambiguous selection: 2 matches found: 1.0.0, 1.0.1"):
        find_pkg_id_by_selector(_pkgs(), "serde", None)