"""Tests for reverse dependency lookup."""

from lockshaker.domain.dependants import find_dependants
from lockshaker.domain.lockfile import DependencyGraph
from tests.conftest import nm, pkg


def test_root_dependant() -> None:
    graph = DependencyGraph({"": pkg("a"), nm("a"): pkg()})
    assert find_dependants(graph, nm("a")) == [""]


def test_no_dependants() -> None:
    graph = DependencyGraph({"": pkg(), nm("a"): pkg()})
    assert find_dependants(graph, nm("a")) == []


def test_graph_order_kept() -> None:
    graph = DependencyGraph(
        {
            "": pkg(),
            nm("z"): pkg("lib"),
            nm("a"): pkg("lib"),
            nm("lib"): pkg(),
            nm("m"): pkg("lib"),
        }
    )
    assert find_dependants(graph, nm("lib")) == [nm("z"), nm("a"), nm("m")]


def test_nested_copy_shadows_hoisted_one() -> None:
    graph = DependencyGraph(
        {
            "": pkg("app", "debug"),
            nm("app"): pkg("debug"),
            nm("app", "debug"): pkg(),
            nm("debug"): pkg(),
        }
    )
    assert find_dependants(graph, nm("debug")) == [""]
    assert find_dependants(graph, nm("app", "debug")) == [nm("app")]


def test_nested_scope_limited_to_parent_subtree() -> None:
    graph = DependencyGraph(
        {
            nm("a"): pkg("c"),
            nm("a", "b"): pkg("c"),
            nm("a", "c"): pkg(),
            nm("x"): pkg("c"),
            nm("c"): pkg(),
        }
    )
    assert find_dependants(graph, nm("a", "c")) == [nm("a"), nm("a", "b")]
    assert find_dependants(graph, nm("c")) == [nm("x")]


def test_dependencies_only() -> None:
    graph = DependencyGraph(
        {
            "": {"devDependencies": {"a": "1"}, "peerDependencies": {"a": "1"}},
            nm("a"): pkg(),
        }
    )
    assert find_dependants(graph, nm("a")) == []


def test_scoped_name() -> None:
    graph = DependencyGraph({nm("x"): pkg("@s/y"), nm("@s/y"): pkg()})
    assert find_dependants(graph, nm("@s/y")) == [nm("x")]
