"""
manifest-mirror command-line interface.

Every subcommand reads the same YAML configuration file:

    manifest-mirror run -c config.yaml
    manifest-mirror status -c config.yaml --all

Subcommands live in sibling modules and register themselves on `cli`.
"""

import click

from .. import __version__

_EPILOG = """\
Exit code is zero on success, `1` on failure, and `2` on
command line usage error.
"""


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.version_option(__version__, message="%(version)s")
def cli() -> None:
    """Mirror the package manifests of a bucket and combine them per project."""


@cli.command(hidden=True)
@click.pass_context
def help(ctx: click.Context) -> None:
    """Show the available subcommands."""
    group = ctx.parent.command if ctx.parent is not None else cli
    for name in group.list_commands(ctx):
        command = group.get_command(ctx, name)
        if command is not None and not command.hidden:
            click.echo(f"  {name:<10} {command.get_short_help_str()}")
    click.echo('Use "manifest-mirror <command> --help" for help on a specific command.')


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(__version__)


# Register subcommands (must be after cli is defined)
from . import run as _run  # noqa: E402, F401
from . import status as _status  # noqa: E402, F401
