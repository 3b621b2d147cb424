"""Package path matchers: exact literals or compiled regular expressions.

Matchers are compiled once when the policy is built and then evaluated
against every package path. Evaluation is total and never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol


class Matcher(Protocol):
    """Anything that can test a package path."""

    def matches(self, path: str) -> bool: ...

    def describe(self) -> str | dict[str, str]: ...


@dataclass(frozen=True, slots=True)
class LiteralMatcher:
    """Matches one package path exactly."""

    text: str

    def matches(self, path: str) -> bool:
        return path == self.text

    def describe(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    """Matches any package path containing a regex match (search semantics)."""

    pattern: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.pattern.search(path) is not None

    def describe(self) -> dict[str, str]:
        described = {"regex": self.pattern.pattern}
        flags = "".join(
            letter for letter, flag in _FLAG_LETTERS.items() if self.pattern.flags & flag
        )
        if flags:
            described["flags"] = flags
        return described


_FLAG_LETTERS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


def compile_pattern(regex: str, flags: str = "") -> PatternMatcher:
    """Compile a regex matcher.

    *flags* uses single letters (``i``, ``m``, ``s``).

    Raises:
        ValueError: The regex does not compile or a flag letter is unknown.
    """
    value = 0
    for letter in flags:
        flag = _FLAG_LETTERS.get(letter)
        if flag is None:
            msg = f"Unknown regex flag {letter!r} in {flags!r}"
            raise ValueError(msg)
        value |= flag
    try:
        return PatternMatcher(re.compile(regex, value))
    except re.error as exc:
        msg = f"Invalid regex {regex!r}: {exc}"
        raise ValueError(msg) from exc


def any_match(matchers: tuple[Matcher, ...] | list[Matcher], path: str) -> bool:
    """True if any of *matchers* matches *path*."""
    return any(m.matches(path) for m in matchers)
