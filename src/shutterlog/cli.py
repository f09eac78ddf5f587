"""``shutterlog`` entry point: output and config flags shared by every command."""

from __future__ import annotations

import click

from shutterlog import __version__
from shutterlog.commands import register_commands
from shutterlog.commands._context import AppContext
from shutterlog.config.settings import SiteSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="shutterlog")
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print a single status line.")
@click.option("-v", "--verbose", is_flag=True, help="Show timings, error detail and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Use this shutterlog.toml instead of searching parent directories.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """shutterlog: build a blog and photo portfolio from markdown."""
    ctx.obj = AppContext(
        SiteSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
