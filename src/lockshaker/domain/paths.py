"""Lockfile package paths and npm's nested module lookup.

A package path is the key of an entry in the lockfile ``packages`` map.
The root project is ``""``; everything else is nested through
``node_modules`` areas, e.g. ``node_modules/a/node_modules/@scope/b``.

INVARIANT: :func:`resolve_dependency` must mirror the lookup npm performs at
runtime (nearest enclosing ``node_modules`` first, then the top level).
Any deviation misattributes dependants.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

AREA = "node_modules"
_TOP_PREFIX = f"{AREA}/"
_NESTED_SEP = f"/{AREA}/"

type Packages = Mapping[str, Any]


class PackagePath(NamedTuple):
    """A parsed package path.

    Attributes:
        name: Package name as it appears in ``dependencies`` (may be scoped).
        parent: Path of the package whose private ``node_modules`` holds this
            one, or None when the package sits in the top-level area.
    """

    name: str
    parent: str | None


def parse_path(path: str) -> PackagePath:
    """Split *path* into its package name and parent package path.

    Examples:
        >>> parse_path("")
        PackagePath(name='', parent=None)
        >>> parse_path("node_modules/@types/node")
        PackagePath(name='@types/node', parent=None)
        >>> parse_path("node_modules/a/node_modules/b")
        PackagePath(name='b', parent='node_modules/a')
    """
    if not path:
        return PackagePath("", None)

    head, sep, name = path.rpartition(_NESTED_SEP)
    if sep:
        return PackagePath(name, head)
    if path.startswith(_TOP_PREFIX):
        return PackagePath(path[len(_TOP_PREFIX) :], None)
    # Paths outside any node_modules area (workspace folders) name themselves.
    return PackagePath(path, None)


def area_entry(area: str, name: str) -> str:
    """Path of *name* installed inside the ``node_modules`` area of *area*."""
    return f"{area}/{AREA}/{name}" if area else f"{AREA}/{name}"


def lookup_areas(path: str) -> Iterator[str]:
    """Yield the package paths whose ``node_modules`` npm searches from *path*.

    Nearest first: *path* itself, then each enclosing package, ending with
    ``""`` for the top-level area.
    """
    current: str | None = path
    while current:
        yield current
        current = parse_path(current).parent
    yield ""


def resolve_dependency(packages: Packages, from_path: str, name: str) -> str:
    """Return the path a ``require(name)`` issued from *from_path* lands on.

    Falls back to the top-level ``node_modules/<name>`` when no enclosing
    area contains the package, even if that entry does not exist.
    """
    for area in lookup_areas(from_path):
        candidate = area_entry(area, name)
        if candidate in packages:
            return candidate
    return area_entry("", name)


def find_installed_copy(packages: Packages, parent: str, name: str) -> str | None:
    """Locate the installed copy of dependency *name* declared by *parent*.

    Returns None (and logs a warning) when no copy exists anywhere in the
    ancestor chain.
    """
    for area in lookup_areas(parent):
        candidate = area_entry(area, name)
        if candidate in packages:
            return candidate
    logger.warning("Could not find package for dependency %r of %r", name, parent)
    return None
