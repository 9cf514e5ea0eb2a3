"""The status command."""

import click
from rich.console import Console

from .. import orchestrator
from ..cache import DiffState, diff
from ..errors import ManifestMirrorError
from ..remote import remote_key_set
from . import cli
from .logger import configure_logging
from .options import config_option, load_or_fail, verbose_option

_STATE_CHARS: dict[DiffState, tuple[str, str]] = {
    DiffState.ONLY_REMOTE: ("D", "red"),
    DiffState.ONLY_LOCAL: ("E", "yellow"),
    DiffState.MATCHING: (" ", "dim"),
}


@cli.command()
@config_option
@click.option("-a", "--all", "show_all", is_flag=True, help="Include matching (unchanged) files")
@verbose_option
def status(config_path: str, show_all: bool, verbose: bool) -> None:
    """Show each project's cache status relative to the bucket.

    Each file name is prefixed with a status letter:

    \b
      'D'  needs download (in the bucket, not on disk)
      'E'  will be evicted (on disk, not in the bucket)

    Use `-a, --all` to see matching files as well, which are
    printed using the following status letter:

    \b
      ' '  matching (in the bucket and on disk)
    """
    configure_logging(verbose)
    config = load_or_fail(config_path)
    runner = orchestrator.create(config)
    try:
        remote_keys = remote_key_set(runner.lister.list())
    except ManifestMirrorError as exc:
        raise click.ClickException(str(exc)) from exc

    console = Console()
    for project in config.projects:
        cache = runner.project_cache(project)
        console.print(f"[bold]{project.name}[/] ({cache.cache_dir})")
        for entry in diff(remote_keys, cache.cache_dir, prefix=project.prefix):
            if entry.state == DiffState.MATCHING and not show_all:
                continue
            char, color = _STATE_CHARS[entry.state]
            console.print(f"[{color}]{char}[/] {entry.file}")
