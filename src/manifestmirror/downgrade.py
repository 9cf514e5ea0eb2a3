"""
Downgrade a combined tree from the v2 schema to the legacy v1 schema.

In v2 each version maps to a metadata object:

    {"ubuntu": {"14.04": {"x86_64": {"12.1.0": {"relpath": "...", "md5": "..."}}}}}

In v1 each version maps to the relative path only:

    {"ubuntu": {"14.04": {"x86_64": {"12.1.0": "..."}}}}
"""

from __future__ import annotations

import copy
from typing import Any

from .errors import DataShapeError
from .output import RUN_DATA_KEY

# Depth, below each platform, of the mappings from version to metadata.
_VERSIONS_DEPTH = 2


def downgrade(tree: dict[str, Any]) -> dict[str, Any]:
    """
    Return a new v1 tree built from the given v2 tree.

    The input is not modified. The top-level `run_data` key is copied
    as is, without being walked.

    Raises:
        DataShapeError: if a branch is shallower than four levels or a
            metadata object lacks a string `relpath`.
    """
    result: dict[str, Any] = {}
    for platform, versions in tree.items():
        if platform == RUN_DATA_KEY:
            result[platform] = copy.deepcopy(versions)
            continue
        result[platform] = _downgrade_level(versions, path=(platform,), depth=0)
    return result


def _downgrade_level(node: Any, *, path: tuple[str, ...], depth: int) -> dict[str, Any]:
    if not isinstance(node, dict):
        raise DataShapeError(f"expected a mapping at {_format(path)}, got {type(node).__name__}")
    if depth < _VERSIONS_DEPTH:
        return {
            key: _downgrade_level(child, path=path + (key,), depth=depth + 1)
            for key, child in node.items()
        }
    return {key: _relpath(meta, path=path + (key,)) for key, meta in node.items()}


def _relpath(meta: Any, *, path: tuple[str, ...]) -> str:
    if not isinstance(meta, dict):
        raise DataShapeError(f"expected metadata at {_format(path)}, got {type(meta).__name__}")
    relpath = meta.get("relpath")
    if not isinstance(relpath, str):
        raise DataShapeError(f"missing relpath at {_format(path)}")
    return relpath


def _format(path: tuple[str, ...]) -> str:
    return "/".join(path)
