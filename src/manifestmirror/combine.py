"""
Combine the manifests of a project into a single tree.

Each manifest describes a slice of the available builds, nested as:

    platform -> platform version -> architecture -> version -> metadata

Combining deep-merges all the manifests of a project, so that the result
describes every build. On true leaf collisions the manifest processed last
wins; manifests are processed in sorted filename order.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from .cache.diff import scan_local_files
from .errors import DataShapeError, FilesystemError

log = logging.getLogger("combine")


def deep_merge(base: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """
    Merge `incoming` into `base` and return `base`.

    When both sides hold a mapping for a key we recurse, otherwise the
    incoming value replaces the existing one. Values taken from `incoming`
    are copied so `base` never aliases it.
    """
    for key, value in incoming.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def load_manifest(path: Path) -> dict[str, Any]:
    """
    Load a single manifest document.

    Raises:
        DataShapeError: if the file is not a UTF-8 encoded JSON object.
        FilesystemError: if the file cannot be read.
    """
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise FilesystemError(f"cannot read manifest {path}: {exc}") from exc
    try:
        data = json.loads(content.decode("utf-8"))
    except ValueError as exc:
        # Covers both JSONDecodeError and UnicodeDecodeError.
        raise DataShapeError(f"malformed manifest {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DataShapeError(f"manifest {path} is not a JSON object")
    return data


class ManifestCombiner:
    """Combines the manifests cached in a directory."""

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)

    def combine(self) -> dict[str, Any]:
        """Return a freshly built tree merging every cached manifest."""
        log.info("combining %s... start", self.cache_dir)
        tree: dict[str, Any] = {}
        names = sorted(scan_local_files(self.cache_dir))
        for name in names:
            deep_merge(tree, load_manifest(self.cache_dir / name))
        log.info("combining %s... ok (%d manifests)", self.cache_dir, len(names))
        return tree
