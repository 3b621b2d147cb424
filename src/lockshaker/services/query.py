"""QueryService — read-only inspection of dependants and the effective policy."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from lockshaker.domain.dependants import find_dependants
from lockshaker.domain.lockfile import LockfileError
from lockshaker.domain.paths import parse_path
from lockshaker.domain.policy import PolicyError
from lockshaker.services.base import BaseService
from lockshaker.services.result import ServiceResult
from lockshaker.services.telemetry import traced


class QueryService(BaseService):
    """Answers questions about a lockfile without modifying it."""

    @traced
    def dependants(self, package_path: str, lockfile: Path | None = None) -> ServiceResult:
        """List the packages whose dependency actually resolves to *package_path*."""
        path = self._resolve_lockfile(lockfile)
        warnings: list[str] = []
        try:
            _loaded, graph = self._load_graph(path, warnings)
        except LockfileError as exc:
            return ServiceResult.failure("dependants", exc.code, str(exc), lockfile=str(path))

        if package_path not in graph:
            return ServiceResult.failure(
                "dependants",
                "NOT_FOUND",
                f"Package '{package_path}' not found in {path}",
            )

        name, parent = parse_path(package_path)
        items = [
            {"path": dep or "(root)", "dev": graph.is_dev(dep)}
            for dep in find_dependants(graph, package_path)
        ]
        return ServiceResult(
            ok=True,
            op="dependants",
            data={
                "path": package_path,
                "name": name,
                "parent": parent,
                "dev": graph.is_dev(package_path),
                "count": len(items),
                "items": items,
            },
            warnings=warnings,
        )

    @traced
    def policy(self, presets: Sequence[str] = ()) -> ServiceResult:
        """Show the effective merged policy."""
        warnings: list[str] = []
        try:
            policy = self._build_policy(presets, warnings)
        except PolicyError as exc:
            return ServiceResult.failure("policy", "INVALID_CONFIG", str(exc))

        config_path = self._settings.config_path
        return ServiceResult(
            ok=True,
            op="policy",
            data={
                "config": str(config_path) if config_path else None,
                "explicit": self._settings.policy_explicit,
                **policy.describe(),
            },
            warnings=warnings,
        )
