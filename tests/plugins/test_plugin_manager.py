"""Tests for PluginManager: registration, policy collection, and notifications."""

from __future__ import annotations

from typing import Any

from lockshaker.config.models import PolicyConfig
from lockshaker.plugins import PluginManager, hookimpl


class _PolicyPlugin:
    def __init__(self, fragment: Any) -> None:
        self.fragment = fragment

    @hookimpl
    def lockshaker_policy(self) -> Any:
        return self.fragment


class _BrokenPlugin:
    @hookimpl
    def lockshaker_policy(self) -> dict[str, Any]:
        raise RuntimeError("boom")

    @hookimpl
    def post_shake(self, lockfile_path: str, changed: list[str], dry_run: bool) -> None:
        raise RuntimeError("boom")


class _Recorder:
    def __init__(self) -> None:
        self.seen: list[tuple[str, list[str], bool]] = []

    @hookimpl
    def post_shake(self, lockfile_path: str, changed: list[str], dry_run: bool) -> None:
        self.seen.append((lockfile_path, changed, dry_run))


class TestRegistration:
    def test_register_and_list(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_Recorder())
        pm.register_plugin(_PolicyPlugin(None), name="custom")
        assert sorted(pm.list_plugin_names()) == ["_Recorder", "custom"]

    def test_discover_marks_loaded(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        names = pm.discover_and_load(disabled=["nothing-here"])
        assert pm.is_loaded
        assert isinstance(names, list)

    def test_blocked_plugin_not_registered(self) -> None:
        pm = PluginManager()
        pm.discover_and_load(disabled=["blocked"])
        pm.register_plugin(_Recorder(), name="blocked")
        assert "blocked" not in pm.list_plugin_names()


class TestCollectPolicies:
    def test_valid_fragment(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PolicyPlugin({"forcePatterns": ["node_modules/x"]}))
        warnings: list[str] = []
        policies = pm.collect_policies(warnings)
        assert len(policies) == 1
        assert isinstance(policies[0], PolicyConfig)
        assert policies[0].force_patterns == ["node_modules/x"]
        assert warnings == []

    def test_none_fragment_skipped(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PolicyPlugin(None))
        warnings: list[str] = []
        assert pm.collect_policies(warnings) == []
        assert warnings == []

    def test_invalid_fragment_warns(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_PolicyPlugin({"patterns": "not-a-list"}), name="bad")
        warnings: list[str] = []
        assert pm.collect_policies(warnings) == []
        assert warnings == ["Plugin bad returned an invalid policy"]

    def test_raising_hook_warns(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        pm.register_plugin(_PolicyPlugin({"presets": ["strapi"]}), name="good")
        warnings: list[str] = []
        policies = pm.collect_policies(warnings)
        assert [p.presets for p in policies] == [["strapi"]]
        assert warnings == ["Plugin broken failed to provide a policy"]


class TestNotifyShake:
    def test_dispatch(self) -> None:
        pm = PluginManager()
        recorder = _Recorder()
        pm.register_plugin(recorder)
        warnings: list[str] = []
        pm.notify_shake(
            warnings, lockfile_path="lock.json", changed=["node_modules/a"], dry_run=True
        )
        assert recorder.seen == [("lock.json", ["node_modules/a"], True)]
        assert warnings == []

    def test_failure_becomes_warning(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin())
        warnings: list[str] = []
        pm.notify_shake(warnings, lockfile_path="lock.json", changed=[], dry_run=False)
        assert warnings == ["A plugin failed while handling post_shake"]
