"""build — render the site once into the output directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shutterlog.commands._base import SiteCommand

if TYPE_CHECKING:
    from shutterlog.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  # Build into the configured output dir (default: _site)
  shutterlog build

  # Start from an empty output dir
  shutterlog build --clean

  # Build somewhere else, machine-readable summary
  shutterlog --json build --output /tmp/preview""",
)
@click.option("--output", default=None, help="Output directory (overrides [dirs] output).")
@click.option("--clean", is_flag=True, help="Delete the output directory before building.")
@click.pass_obj
def build(app: AppContext, output: str | None, clean: bool) -> None:
    """Build the site from the input directory."""
    from shutterlog.services.build import BuildService

    if output:
        app.with_output_dir(output)
    app.emit(BuildService(app.site).build(clean=clean))
