"""Diff between the remote key set and a project's cache directory."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..remote.listing import keys_for_prefix


class DiffState(str, Enum):
    """State of a diff entry comparing remote keys vs local cache."""

    ONLY_REMOTE = "only_remote"
    ONLY_LOCAL = "only_local"
    MATCHING = "matching"


@dataclass(frozen=True, kw_only=True)
class DiffEntry:
    """Single entry in a remote-vs-local diff."""

    file: str
    key: str | None
    state: DiffState


def scan_local_files(cache_dir: Path) -> set[str]:
    """Return the names of the regular, non-hidden files in `cache_dir`."""
    if not cache_dir.is_dir():
        return set()
    return {
        path.name
        for path in cache_dir.iterdir()
        if path.is_file() and not path.name.startswith(".")
    }


def diff(
    remote_keys: Iterable[str],
    cache_dir: Path,
    *,
    prefix: str,
) -> Iterator[DiffEntry]:
    """
    Compare the project's remote keys against the local cache directory.

    Only filenames are compared: content is never inspected.

    Yields ``DiffEntry`` objects in two phases:

    1. Remote keys under ``prefix``, in sorted filename order, either
       ``MATCHING`` (present locally) or ``ONLY_REMOTE``.
    2. Local-only files (``ONLY_LOCAL``, ``key=None``), in sorted order.
    """
    local_files = scan_local_files(cache_dir)
    by_name = {posixpath.basename(key): key for key in keys_for_prefix(remote_keys, prefix)}

    for name in sorted(by_name):
        state = DiffState.MATCHING if name in local_files else DiffState.ONLY_REMOTE
        yield DiffEntry(file=name, key=by_name[name], state=state)

    for name in sorted(local_files - by_name.keys()):
        yield DiffEntry(file=name, key=None, state=DiffState.ONLY_LOCAL)
