"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, lockshaker.toml only contains
overrides. Matchers are written either as a plain string (exact package
path) or as an inline table ``{ regex = "...", flags = "i" }``.

Both snake_case and the camelCase keys of the JavaScript config format
(``safeDependants``, ``forcePatterns``) are accepted, so plugin fragments
can be ported verbatim.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field

from lockshaker.domain.matchers import LiteralMatcher, Matcher, compile_pattern
from lockshaker.domain.policy import PatternGroup, Policy, PolicyError


class RegexMatcherConfig(BaseModel):
    """A regular expression matcher, tested with search semantics."""

    model_config = {"frozen": True}

    regex: str
    flags: str = ""


type MatcherConfig = str | RegexMatcherConfig


def compile_matcher(entry: MatcherConfig) -> Matcher:
    """Turn one configured matcher into its compiled form."""
    if isinstance(entry, str):
        return LiteralMatcher(entry)
    try:
        return compile_pattern(entry.regex, entry.flags)
    except ValueError as exc:
        raise PolicyError(str(exc)) from exc


class PatternGroupConfig(BaseModel):
    """One ``[[policy.patterns]]`` entry."""

    model_config = {"frozen": True, "populate_by_name": True}

    packages: list[MatcherConfig] = Field(default_factory=list)
    safe_dependants: list[MatcherConfig] = Field(
        default_factory=list,
        validation_alias=AliasChoices("safe_dependants", "safeDependants"),
    )

    def to_group(self) -> PatternGroup:
        return PatternGroup(
            packages=tuple(compile_matcher(m) for m in self.packages),
            safe_dependants=tuple(compile_matcher(m) for m in self.safe_dependants),
        )


class PolicyConfig(BaseModel):
    """[policy] section.

    Attributes:
        extend_defaults: Merge the built-in defaults and plugin policies in
            front of this section instead of replacing them.
        presets: Named built-in presets merged after everything else.
        patterns: Candidate package groups with their safe dependants.
        force_patterns: Packages forced dev-only without any checks. Unsafe.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    extend_defaults: bool = False
    presets: list[str] = Field(default_factory=list)
    patterns: list[PatternGroupConfig] = Field(default_factory=list)
    force_patterns: list[MatcherConfig] = Field(
        default_factory=list,
        validation_alias=AliasChoices("force_patterns", "forcePatterns"),
    )

    def to_policy(self) -> Policy:
        """Compile patterns and force patterns. Presets are resolved elsewhere.

        Raises:
            PolicyError: A regex does not compile.
        """
        return Policy(
            patterns=tuple(g.to_group() for g in self.patterns),
            force_patterns=tuple(compile_matcher(m) for m in self.force_patterns),
        )


class LockfileConfig(BaseModel):
    """[lockfile] section."""

    model_config = {"frozen": True}

    path: str = "package-lock.json"
    skip_on_npm_ci: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    disabled: list[str] = Field(default_factory=list)
