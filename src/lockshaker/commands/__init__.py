"""Subcommand modules for lockshaker.

Provides register_commands() which uses deferred imports to keep
``lockshaker --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from lockshaker.commands.dependants import dependants
    from lockshaker.commands.policy import policy
    from lockshaker.commands.shake import shake

    cli.add_command(shake)
    cli.add_command(dependants)
    cli.add_command(policy)
