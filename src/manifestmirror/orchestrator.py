"""Module driving a complete mirror run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Protocol

from .cache import ProjectCache, SyncReport
from .combine import ManifestCombiner
from .config import Config, ProjectConfig
from .downgrade import downgrade
from .output import write_bytes, write_json
from .remote import Fetcher, HTTPFetcher, RemoteObject, S3KeyLister, remote_key_set

log = logging.getLogger("orchestrator")


class KeyLister(Protocol):
    """Enumerate the objects currently stored remotely."""

    def list(self) -> list[RemoteObject]: ...


@dataclass(kw_only=True)
class RunReport:
    """Summary of a completed run."""

    syncs: list[SyncReport] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)


class Orchestrator:
    """
    Run sync, combine, downgrade, and write for every configured project.

    The remote bucket is listed once per run and the resulting key set is
    handed to each project's cache.
    """

    def __init__(self, *, config: Config, lister: KeyLister, fetcher: Fetcher) -> None:
        self.config = config
        self.lister = lister
        self.fetcher = fetcher

    def project_cache(self, project: ProjectConfig) -> ProjectCache:
        """Return the cache for the given project."""
        return ProjectCache(
            name=project.name,
            prefix=project.prefix,
            cache_dir=Path(self.config.cache_dir) / project.name,
            fetcher=self.fetcher,
            jobs=self.config.fetch_jobs,
        )

    def run(self, *, now: datetime | None = None) -> RunReport:
        """
        Perform a complete run.

        Raises:
            ManifestMirrorError: on any failure; the run stops at the first one.
        """
        log.info("run... start")
        report = RunReport()
        remote_keys = remote_key_set(self.lister.list())

        for project in self.config.projects:
            cache = self.project_cache(project)
            cache.ensure_dirs()
            report.syncs.append(cache.sync(remote_keys))

            tree = ManifestCombiner(cache.cache_dir).combine()
            report.written.append(write_json(tree, project.outputs.v2, now=now))
            report.written.append(write_json(downgrade(tree), project.outputs.v1, now=now))
            log.info("wrote %s and %s", project.outputs.v2, project.outputs.v1)

        for entry in self.config.platform_names:
            log.info("mirroring %s... start", entry.key)
            report.written.append(write_bytes(self.fetcher.get(entry.key), entry.output))
            log.info("mirroring %s... ok", entry.key)

        log.info("run... ok")
        return report


def create(config: Config) -> Orchestrator:
    """Return an Orchestrator talking to the bucket described by `config`."""
    bucket = config.bucket
    return Orchestrator(
        config=config,
        lister=S3KeyLister(
            bucket=bucket.name,
            prefix=bucket.list_prefix,
            anonymous=bucket.anonymous,
            region=bucket.region,
            endpoint_url=bucket.endpoint_url,
        ),
        fetcher=HTTPFetcher(base_url=bucket.base_url, timeout=bucket.timeout),
    )
