"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) in the ``lockshaker.plugins`` group
via pluggy's setuptools loader. Built-in or test plugins can be registered
directly.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

import pluggy
from pydantic import ValidationError

from lockshaker.config.models import PolicyConfig
from lockshaker.plugins.hookspecs import LockshakerHookSpec

PROJECT_NAME = "lockshaker"
ENTRY_POINT_GROUP = "lockshaker.plugins"

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LockshakerHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, disabled: list[str] | None = None) -> list[str]:
        """Load entry-point plugins, skipping any named in *disabled*.

        Returns a list of loaded plugin names.
        """
        for name in disabled or []:
            self._pm.set_blocked(name)
        try:
            self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        except Exception:
            logger.warning("Failed to load entry-point plugins", exc_info=True)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def collect_policies(self, warnings: list[str]) -> list[PolicyConfig]:
        """Gather and validate every plugin's policy fragment.

        Invalid fragments are skipped with a warning appended to *warnings*.
        """
        policies: list[PolicyConfig] = []
        for impl in self._pm.hook.lockshaker_policy.get_hookimpls():
            name = impl.plugin_name
            try:
                fragment = impl.function()
            except Exception:
                logger.warning("Policy hook failed in plugin %s", name, exc_info=True)
                warnings.append(f"Plugin {name} failed to provide a policy")
                continue
            if fragment is None:
                continue
            try:
                policies.append(PolicyConfig.model_validate(fragment))
            except ValidationError as exc:
                logger.warning("Plugin %s returned an invalid policy: %s", name, exc)
                warnings.append(f"Plugin {name} returned an invalid policy")
        return policies

    def notify_shake(self, warnings: list[str], **payload: Any) -> None:
        """Dispatch ``post_shake``. Failures become warnings."""
        try:
            self._pm.hook.post_shake(**payload)
        except Exception:
            logger.warning("post_shake hook failed", exc_info=True)
            warnings.append("A plugin failed while handling post_shake")

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
