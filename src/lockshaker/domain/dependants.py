"""Reverse dependency lookup over the nested package tree."""

from __future__ import annotations

from lockshaker.domain.lockfile import DependencyGraph
from lockshaker.domain.paths import parse_path, resolve_dependency


def find_dependants(graph: DependencyGraph, path: str) -> list[str]:
    """Return every package whose dependency on this name lands on *path*.

    Only packages inside the parent's subtree can see a nested copy, so the
    scan is limited to paths under ``parent`` (the whole graph for top-level
    packages). A candidate that declares the same name still has to resolve
    to exactly *path*; it may have its own nested copy instead.

    Results keep the graph's key order.
    """
    name, parent = parse_path(path)
    packages = graph.packages
    dependants: list[str] = []
    for candidate in packages:
        if parent and not candidate.startswith(parent):
            continue
        if not graph.declares(candidate, name):
            continue
        if resolve_dependency(packages, candidate, name) == path:
            dependants.append(candidate)
    return dependants
