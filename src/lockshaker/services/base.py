"""BaseService — shared foundation for lockshaker services.

Every service receives the resolved :class:`ShakerSettings` and, optionally,
a loaded :class:`PluginManager`. Policy assembly and lockfile loading are
shared here so every command sees the same effective policy.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from lockshaker.config.presets import assemble_policy
from lockshaker.domain.lockfile import SUPPORTED_VERSIONS, DependencyGraph
from lockshaker.infrastructure.lockfile import LoadedLockfile, read_lockfile

if TYPE_CHECKING:
    from lockshaker.config.settings import ShakerSettings
    from lockshaker.domain.policy import Policy
    from lockshaker.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, settings: ShakerSettings, plugins: PluginManager | None = None) -> None:
        self._settings = settings
        self._plugins = plugins

    def _resolve_lockfile(self, path: Path | None) -> Path:
        return path if path is not None else self._settings.lockfile_path

    def _build_policy(self, extra_presets: Sequence[str], warnings: list[str]) -> Policy:
        """Assemble the effective policy.

        Raises:
            PolicyError: Bad regex or unknown preset.
        """
        plugin_policies = []
        if self._plugins is not None and self._settings.plugins.enabled:
            plugin_policies = self._plugins.collect_policies(warnings)
        return assemble_policy(
            self._settings.policy,
            explicit=self._settings.policy_explicit,
            plugin_policies=plugin_policies,
            extra_presets=extra_presets,
        )

    @staticmethod
    def _load_graph(path: Path, warnings: list[str]) -> tuple[LoadedLockfile, DependencyGraph]:
        """Read *path* and wrap its packages.

        Raises:
            LockfileError: Missing file, invalid JSON, or no ``packages`` map.
        """
        loaded = read_lockfile(path)
        graph = DependencyGraph.from_document(loaded.document)
        version = loaded.document.get("lockfileVersion")
        if version not in SUPPORTED_VERSIONS:
            logger.warning("Unexpected lockfileVersion %r in %s", version, path)
            warnings.append(f"Unexpected lockfileVersion {version!r}; continuing")
        return loaded, graph
