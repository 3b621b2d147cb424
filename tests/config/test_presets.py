"""Tests for built-in presets and effective policy assembly."""

from typing import Any

import pytest

from lockshaker.config.models import PolicyConfig
from lockshaker.config.presets import PRESETS, assemble_policy, get_preset
from lockshaker.domain.policy import PolicyError

CUSTOM = PolicyConfig.model_validate(
    {"patterns": [{"packages": ["node_modules/custom"]}], "force_patterns": ["node_modules/f"]}
)
PLUGIN = PolicyConfig.model_validate({"force_patterns": ["node_modules/from-plugin"]})


def _forced(config: PolicyConfig, **kwargs: Any) -> list[Any]:
    return [m.describe() for m in assemble_policy(config, **kwargs).force_patterns]


class TestPresets:
    def test_available(self) -> None:
        assert sorted(PRESETS) == ["default", "strapi"]

    def test_default_forces_types(self) -> None:
        policy = get_preset("default").to_policy()
        assert policy.is_forced("node_modules/@types/node")
        assert not policy.is_forced("node_modules/typescript")

    def test_strapi_group(self) -> None:
        policy = get_preset("strapi").to_policy()
        (group,) = policy.patterns
        assert policy.matching_groups("node_modules/react-dom") == (group,)
        assert policy.matching_groups("node_modules/moment") == (group,)
        assert policy.matching_groups("node_modules/momentum") == ()
        assert policy.matching_groups("node_modules/sanitize.css") == (group,)
        assert policy.is_safe_dependant(policy.patterns, "node_modules/strapi-admin")
        assert not policy.is_safe_dependant(policy.patterns, "")

    def test_unknown(self) -> None:
        with pytest.raises(PolicyError, match="Unknown preset 'vue'"):
            get_preset("vue")


class TestAssemble:
    def test_not_explicit_uses_defaults_and_plugins(self) -> None:
        forced = _forced(PolicyConfig(), explicit=False, plugin_policies=[PLUGIN])
        assert forced == [{"regex": "/@types"}, "node_modules/from-plugin"]

    def test_explicit_replaces_defaults(self) -> None:
        forced = _forced(CUSTOM, explicit=True, plugin_policies=[PLUGIN])
        assert forced == ["node_modules/f"]

    def test_extend_defaults(self) -> None:
        config = CUSTOM.model_copy(update={"extend_defaults": True})
        forced = _forced(config, explicit=True, plugin_policies=[PLUGIN])
        assert forced == [{"regex": "/@types"}, "node_modules/from-plugin", "node_modules/f"]

    def test_presets_appended_last(self) -> None:
        config = CUSTOM.model_copy(update={"presets": ["strapi"]})
        policy = assemble_policy(config, explicit=True)
        assert len(policy.patterns) == 2
        assert policy.patterns[1].safe_dependants[0].describe() == {"regex": "/strapi"}

    def test_presets_deduplicated(self) -> None:
        config = CUSTOM.model_copy(update={"presets": ["strapi"]})
        policy = assemble_policy(config, explicit=True, extra_presets=["strapi", "strapi"])
        assert len(policy.patterns) == 2

    def test_implicit_default_not_added_twice(self) -> None:
        policy = assemble_policy(PolicyConfig(), explicit=False, extra_presets=["default"])
        assert len(policy.force_patterns) == 1

    def test_explicit_default_preset(self) -> None:
        config = CUSTOM.model_copy(update={"presets": ["default"]})
        forced = _forced(config, explicit=True)
        assert forced == ["node_modules/f", {"regex": "/@types"}]

    def test_unknown_preset(self) -> None:
        with pytest.raises(PolicyError):
            assemble_policy(PolicyConfig(), explicit=False, extra_presets=["nope"])
