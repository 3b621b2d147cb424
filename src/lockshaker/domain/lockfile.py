"""In-memory view of a lockfile's ``packages`` map.

The graph wraps the parsed JSON records directly and mutates them in place,
so unknown fields and key order survive the round trip untouched.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

SUPPORTED_VERSIONS = frozenset({2, 3})


class LockfileError(Exception):
    """Base class for lockfile loading and validation failures."""

    code = "INVALID_LOCKFILE"


class LockfileNotFoundError(LockfileError):
    code = "LOCKFILE_NOT_FOUND"


class InvalidLockfileError(LockfileError):
    code = "INVALID_LOCKFILE"


class UnsupportedLockfileError(LockfileError):
    """The lockfile has no ``packages`` map (lockfile version 1, npm < 7)."""

    code = "UNSUPPORTED_LOCKFILE"


class DependencyGraph:
    """Path-addressed package records backed by the lockfile document."""

    def __init__(self, packages: dict[str, dict[str, Any]]) -> None:
        self._packages = packages

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> DependencyGraph:
        """Wrap the ``packages`` map of a parsed lockfile.

        Raises:
            UnsupportedLockfileError: The document has no ``packages`` map.
        """
        packages = document.get("packages")
        if not isinstance(packages, dict):
            version = document.get("lockfileVersion")
            msg = (
                f"Lockfile version {version} is not supported; "
                "regenerate it with npm 7 or later (lockfileVersion 2 or 3)"
            )
            raise UnsupportedLockfileError(msg)
        return cls(packages)

    @property
    def packages(self) -> dict[str, dict[str, Any]]:
        return self._packages

    def __contains__(self, path: object) -> bool:
        return path in self._packages

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._packages)

    def record(self, path: str) -> dict[str, Any]:
        return self._packages[path]

    def is_dev(self, path: str) -> bool:
        return bool(self._packages[path].get("dev"))

    def dependency_names(self, path: str) -> list[str]:
        return list(self._packages[path].get("dependencies") or {})

    def declares(self, path: str, name: str) -> bool:
        return name in (self._packages[path].get("dependencies") or {})

    def mark_dev(self, path: str) -> None:
        """Flag *path* as dev-only. ``devOptional`` is subsumed by ``dev``."""
        record = self._packages[path]
        record["dev"] = True
        record.pop("devOptional", None)

    def dev_paths(self) -> set[str]:
        return {p for p, rec in self._packages.items() if rec.get("dev")}
