"""serve — build once, then preview the output over HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shutterlog.commands._base import SiteCommand

if TYPE_CHECKING:
    from shutterlog.commands._context import AppContext


@click.command(
    cls=SiteCommand,
    examples="""\
  # Build and serve on the configured address (default: 127.0.0.1:8080)
  shutterlog serve

  # Listen on all interfaces, custom port
  shutterlog serve --host 0.0.0.0 --port 9000""",
)
@click.option("--host", default=None, help="Bind address (overrides [serve] host).")
@click.option("--port", default=None, type=int, help="Listen port (overrides [serve] port).")
@click.pass_obj
def serve(app: AppContext, host: str | None, port: int | None) -> None:
    """Build the site and serve the output directory."""
    from shutterlog.services.build import BuildService
    from shutterlog.services.serve import ServeService

    result = BuildService(app.site).build()
    if not result.ok:
        app.emit(result)
        return
    for warning in result.warnings:
        click.echo(f"WARNING: {warning}", err=True)

    def announce(url: str) -> None:
        click.echo(f"Serving {app.site.output_dir} at {url} (Ctrl+C to stop)", err=True)

    app.emit(ServeService(app.site).serve(host=host, port=port, on_ready=announce))
