"""Subcommand modules for shutterlog.

Provides register_commands() which uses deferred imports to keep
``shutterlog --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the standalone commands on the root CLI group."""
    from shutterlog.commands.build import build
    from shutterlog.commands.serve import serve

    cli.add_command(build)
    cli.add_command(serve)
