"""Reclassification policy: candidate packages, safe dependants, forced packages.

A :class:`Policy` is the compiled, immutable form of the user configuration.
Policies merge by concatenation, so defaults, presets, and plugin fragments
can be layered in order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from lockshaker.domain.matchers import Matcher, any_match


class PolicyError(ValueError):
    """Raised for configuration that cannot be turned into a policy."""


@dataclass(frozen=True)
class PatternGroup:
    """Packages that may become dev-only, and the dependants that do not block them.

    Attributes:
        packages: Matchers selecting candidate package paths.
        safe_dependants: Matchers selecting dependants that can run without
            the candidate packages.
    """

    packages: tuple[Matcher, ...] = ()
    safe_dependants: tuple[Matcher, ...] = ()


@dataclass(frozen=True)
class Policy:
    """Compiled policy evaluated by the propagation engine."""

    patterns: tuple[PatternGroup, ...] = ()
    force_patterns: tuple[Matcher, ...] = ()

    def is_forced(self, path: str) -> bool:
        """Forced packages skip all dependant checks. Unsafe by nature."""
        return any_match(self.force_patterns, path)

    def matching_groups(self, path: str) -> tuple[PatternGroup, ...]:
        return tuple(g for g in self.patterns if any_match(g.packages, path))

    @staticmethod
    def is_safe_dependant(groups: Iterable[PatternGroup], dependant: str) -> bool:
        """True if any of *groups* declares *dependant* safe."""
        return any(any_match(g.safe_dependants, dependant) for g in groups)

    def merge(self, other: Policy) -> Policy:
        """Return a new policy with *other*'s groups and force patterns appended."""
        return Policy(
            patterns=self.patterns + other.patterns,
            force_patterns=self.force_patterns + other.force_patterns,
        )

    def describe(self) -> dict[str, object]:
        """JSON-friendly view of the policy (same shape as the TOML config)."""
        return {
            "patterns": [
                {
                    "packages": [m.describe() for m in g.packages],
                    "safe_dependants": [m.describe() for m in g.safe_dependants],
                }
                for g in self.patterns
            ],
            "force_patterns": [m.describe() for m in self.force_patterns],
        }


def merge_policies(policies: Iterable[Policy]) -> Policy:
    """Concatenate *policies* in order."""
    merged = Policy()
    for policy in policies:
        merged = merged.merge(policy)
    return merged
