"""Command: print the effective policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lockshaker.commands._base import ShakerCommand

if TYPE_CHECKING:
    from lockshaker.commands._context import AppContext


@click.command(
    cls=ShakerCommand,
    examples="""\
  lockshaker policy
  lockshaker policy --preset strapi
  lockshaker --json policy""",
)
@click.option(
    "--preset",
    "presets",
    multiple=True,
    help="Merge a built-in policy preset (repeatable).",
)
@click.pass_obj
def policy(app: AppContext, presets: tuple[str, ...]) -> None:
    """Show the merged policy from config, presets, and plugins."""
    from lockshaker.services.query import QueryService

    app.emit(QueryService(app.settings, app.plugins).policy(presets))
