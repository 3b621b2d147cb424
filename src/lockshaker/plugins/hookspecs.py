"""Pluggy hook specifications for lockshaker.

Plugins either contribute policy (packages they know to be dev-only in some
ecosystem) or observe completed runs.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("lockshaker")


class LockshakerHookSpec:
    """Hook specifications for the lockshaker plugin system."""

    @hookspec
    def lockshaker_policy(self) -> dict[str, Any] | None:
        """Return a policy fragment in the ``[policy]`` TOML schema.

        Fragments are merged after the built-in defaults, and only when the
        project does not configure its own policy (or sets
        ``extend_defaults``).
        """

    @hookspec
    def post_shake(self, lockfile_path: str, changed: list[str], dry_run: bool) -> None:
        """Called after a shake run; *changed* lists the paths made dev-only."""
