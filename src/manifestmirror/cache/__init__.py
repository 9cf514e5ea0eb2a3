"""
Local on-disk mirror of the manifests of each project.

Every project owns one directory below the cache root, containing one
file per remote key named after the key's basename:

    $cache_dir/$project/$filename

The directory is kept in sync with the remote key set by `ProjectCache.sync`,
which evicts files that are gone remotely and fetches new ones.
"""

from .diff import DiffEntry, DiffState, diff
from .project import ProjectCache, SyncReport

__all__ = [
    "DiffEntry",
    "DiffState",
    "ProjectCache",
    "SyncReport",
    "diff",
]
