"""Options and helpers shared by the subcommands."""

from __future__ import annotations

import click

from ..config import Config, load_config
from ..errors import ConfigError

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Path to the YAML configuration file.",
)

verbose_option = click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")


def load_or_fail(config_path: str) -> Config:
    """Load the configuration, converting errors into a usage failure."""
    try:
        return load_config(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
