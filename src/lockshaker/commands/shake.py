"""Command: reclassify dev-only packages in the lockfile."""

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
  lockshaker shake
  lockshaker shake path/to/package-lock.json
  lockshaker shake --dry-run
  lockshaker shake --preset strapi
  lockshaker --json shake --dry-run""",
)
@click.argument(
    "lockfile",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option("--dry-run", is_flag=True, help="Report changes without writing the lockfile.")
@click.option(
    "--preset",
    "presets",
    multiple=True,
    help="Merge a built-in policy preset (repeatable).",
)
@click.option("--force", is_flag=True, help="Run even when invoked from 'npm ci'.")
@click.pass_obj
def shake(
    app: AppContext,
    lockfile: Path | None,
    dry_run: bool,
    presets: tuple[str, ...],
    force: bool,
) -> None:
    """Mark packages that production does not need as dev-only."""
    from lockshaker.services.shake import ShakeService

    svc = ShakeService(app.settings, app.plugins)
    app.emit(svc.shake(lockfile, dry_run=dry_run, presets=presets, force=force))
