"""Command: list the true dependants of one package."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from lockshaker.commands._base import ShakerCommand

if TYPE_CHECKING:
    from lockshaker.commands._context import AppContext


@click.command(
    cls=ShakerCommand,
    examples="""\
  lockshaker dependants node_modules/debug
  lockshaker dependants node_modules/a/node_modules/debug
  lockshaker -q dependants node_modules/@types/node --lockfile other/package-lock.json""",
)
@click.argument("package_path")
@click.option(
    "--lockfile",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Lockfile to inspect (default: configured lockfile).",
)
@click.pass_obj
def dependants(app: AppContext, package_path: str, lockfile: Path | None) -> None:
    """Show which packages actually resolve to PACKAGE_PATH."""
    from lockshaker.services.query import QueryService

    app.emit(QueryService(app.settings).dependants(package_path, lockfile))
