"""The run command."""

import click

from .. import orchestrator
from . import cli
from .interceptor import Interceptor
from .logger import configure_logging, log
from .options import config_option, load_or_fail, verbose_option


@cli.command()
@config_option
@verbose_option
def run(config_path: str, verbose: bool) -> None:
    """Sync the caches and write the combined manifests once."""
    configure_logging(verbose)
    config = load_or_fail(config_path)
    interceptor = Interceptor()
    with interceptor:
        report = orchestrator.create(config).run()
        for sync in report.syncs:
            log.info(
                "%s: %d remote, %d fetched, %d evicted",
                sync.project,
                sync.remote_count,
                len(sync.fetched),
                len(sync.evicted),
            )
    raise SystemExit(interceptor.exitcode())
