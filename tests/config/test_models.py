"""Tests for the configuration models."""

import pytest
from pydantic import ValidationError

from lockshaker.config.models import (
    LockfileConfig,
    PatternGroupConfig,
    PolicyConfig,
    RegexMatcherConfig,
    compile_matcher,
)
from lockshaker.domain.matchers import LiteralMatcher, PatternMatcher
from lockshaker.domain.policy import PolicyError


class TestCompileMatcher:
    def test_string_is_literal(self) -> None:
        assert compile_matcher("node_modules/a") == LiteralMatcher("node_modules/a")

    def test_regex(self) -> None:
        matcher = compile_matcher(RegexMatcherConfig(regex="^node_modules/a", flags="i"))
        assert isinstance(matcher, PatternMatcher)
        assert matcher.matches("NODE_MODULES/A/x")

    def test_bad_regex_is_policy_error(self) -> None:
        with pytest.raises(PolicyError):
            compile_matcher(RegexMatcherConfig(regex="[unclosed"))

    def test_bad_flag_is_policy_error(self) -> None:
        with pytest.raises(PolicyError, match="Unknown regex flag"):
            compile_matcher(RegexMatcherConfig(regex="a", flags="x"))


class TestPolicyConfig:
    def test_defaults(self) -> None:
        config = PolicyConfig()
        assert config.extend_defaults is False
        assert config.presets == []
        assert config.to_policy().patterns == ()

    def test_to_policy(self) -> None:
        config = PolicyConfig.model_validate(
            {
                "patterns": [{"packages": [{"regex": "babel"}], "safe_dependants": ["^$"]}],
                "force_patterns": ["node_modules/a"],
            }
        )
        policy = config.to_policy()
        assert policy.is_forced("node_modules/a")
        assert policy.matching_groups("node_modules/babel-core")
        # Plain strings are literal paths, never regexes.
        assert not policy.is_safe_dependant(policy.patterns, "")

    def test_mixed_matcher_list(self) -> None:
        group = PatternGroupConfig.model_validate({"packages": ["a", {"regex": "b"}]})
        assert group.packages[0] == "a"
        assert isinstance(group.packages[1], RegexMatcherConfig)

    def test_regex_requires_key(self) -> None:
        with pytest.raises(ValidationError):
            PatternGroupConfig.model_validate({"packages": [{"flags": "i"}]})

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            LockfileConfig().path = "x"  # type: ignore[misc]
