"""Module containing the ProjectCache implementation."""

from __future__ import annotations

import logging
import posixpath
import shutil
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from ..errors import FilesystemError
from ..output import TMP_DIR_PREFIX, write_bytes
from ..remote.fetch import Fetcher
from .diff import DiffState, diff, scan_local_files

log = logging.getLogger("cache/project")


@dataclass(frozen=True, kw_only=True)
class SyncReport:
    """
    Outcome of a ProjectCache.sync call.

    Attributes:
        project: the name of the project
        remote_count: number of remote keys belonging to the project
        fetched: sorted filenames downloaded into the cache
        evicted: sorted filenames removed from the cache
    """

    project: str
    remote_count: int
    fetched: tuple[str, ...] = ()
    evicted: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        """Whether the sync touched the cache directory at all."""
        return bool(self.fetched or self.evicted)


class ProjectCache:
    """
    On-disk mirror of the manifests of a single project.

    The remote store is authoritative: files missing remotely are evicted
    and keys missing locally are fetched. Files are compared by name only.
    """

    def __init__(
        self,
        *,
        name: str,
        prefix: str,
        cache_dir: str | Path,
        fetcher: Fetcher,
        jobs: int = 4,
    ) -> None:
        if jobs < 1:
            raise ValueError(f"jobs must be >= 1, got {jobs}")
        self.name = name
        self.prefix = prefix
        self.cache_dir = Path(cache_dir)
        self.fetcher = fetcher
        self.jobs = jobs

    def __repr__(self) -> str:
        return f"ProjectCache(name={self.name!r}, cache_dir={str(self.cache_dir)!r})"

    def path_for(self, key: str) -> Path:
        """Return the local path where the given remote key is cached."""
        return self.cache_dir / posixpath.basename(key)

    def ensure_dirs(self) -> None:
        """
        Create the cache directory and its parent with restrictive permissions.

        Temporary directories left behind by an interrupted write are removed.
        """
        try:
            self.cache_dir.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            self.cache_dir.mkdir(mode=0o700, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"cannot create cache directory {self.cache_dir}: {exc}") from exc
        for path in self.cache_dir.iterdir():
            if path.is_dir() and path.name.startswith(TMP_DIR_PREFIX):
                log.debug("removing stale %s", path)
                try:
                    shutil.rmtree(path)
                except OSError as exc:
                    raise FilesystemError(f"cannot remove {path}: {exc}") from exc

    def list_local(self) -> set[str]:
        """Return the filenames currently in the cache directory."""
        return scan_local_files(self.cache_dir)

    def fetch_one(self, key: str) -> bytes:
        """
        Fetch the given key into the cache and return its bytes.

        If anything goes wrong, the destination path is removed before
        re-raising, so the cache never contains a truncated entry.
        """
        dest = self.path_for(key)
        log.debug("fetching %s... start", key)
        try:
            data = self.fetcher.get(key)
            write_bytes(data, dest)
        except Exception:
            dest.unlink(missing_ok=True)
            log.debug("fetching %s... failure", key)
            raise
        log.debug("fetching %s... ok", key)
        return data

    def evict(self, filename: str) -> None:
        """Remove the given file from the cache."""
        log.debug("evicting %s... start", filename)
        try:
            (self.cache_dir / filename).unlink(missing_ok=True)
        except OSError as exc:
            raise FilesystemError(f"cannot evict {filename}: {exc}") from exc
        log.debug("evicting %s... ok", filename)

    def sync(self, remote_keys: Iterable[str]) -> SyncReport:
        """
        Make the cache directory mirror the project's slice of `remote_keys`.

        Stale files are evicted first, then new keys are fetched using up to
        `jobs` parallel downloads. All the downloads settle before returning.

        Raises:
            TransportError: if a fetch fails (already fetched files remain).
            FilesystemError: if a local file cannot be written or removed.
        """
        log.info("syncing %s... start", self.name)
        to_fetch: list[str] = []
        to_evict: list[str] = []
        remote_count = 0
        for entry in diff(remote_keys, self.cache_dir, prefix=self.prefix):
            if entry.state == DiffState.ONLY_LOCAL:
                to_evict.append(entry.file)
                continue
            remote_count += 1
            if entry.state == DiffState.ONLY_REMOTE:
                assert entry.key is not None
                to_fetch.append(entry.key)

        if remote_count == 0:
            log.warning(
                "syncing %s... no remote keys under %r: is the prefix correct?",
                self.name,
                self.prefix,
            )

        for filename in to_evict:
            self.evict(filename)
        self._fetch_all(to_fetch)

        report = SyncReport(
            project=self.name,
            remote_count=remote_count,
            fetched=tuple(sorted(posixpath.basename(key) for key in to_fetch)),
            evicted=tuple(sorted(to_evict)),
        )
        log.info(
            "syncing %s... ok (%d fetched, %d evicted)",
            self.name,
            len(report.fetched),
            len(report.evicted),
        )
        return report

    def _fetch_all(self, keys: list[str]) -> None:
        if self.jobs == 1 or len(keys) <= 1:
            for key in keys:
                self.fetch_one(key)
            return

        with ThreadPoolExecutor(max_workers=self.jobs) as pool:
            futures = [pool.submit(self.fetch_one, key) for key in keys]
            try:
                for future in as_completed(futures):
                    future.result()
            except Exception:
                # Exiting the pool waits for the downloads already in flight.
                for future in futures:
                    future.cancel()
                raise
