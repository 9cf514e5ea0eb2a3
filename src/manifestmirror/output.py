"""Module writing the produced manifests to disk."""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any, Final

from .errors import FilesystemError

RUN_DATA_KEY: Final[str] = "run_data"
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S %z"

# Prefix of the temporary directories used while writing a file.
TMP_DIR_PREFIX: Final[str] = ".partial-"


def stamp(tree: dict[str, Any], *, now: datetime | None = None) -> dict[str, Any]:
    """Return a shallow copy of `tree` carrying the `run_data` timestamp."""
    now = now if now is not None else datetime.now().astimezone()
    result = dict(tree)
    result[RUN_DATA_KEY] = {"timestamp": now.strftime(TIMESTAMP_FORMAT)}
    return result


def write_json(tree: dict[str, Any], path: str | Path, *, now: datetime | None = None) -> Path:
    """Write `tree` as pretty-printed JSON with a `run_data` timestamp."""
    content = json.dumps(stamp(tree, now=now), indent=2) + "\n"
    return write_bytes(content.encode("utf-8"), path)


def write_bytes(data: bytes, path: str | Path) -> Path:
    """
    Replace the file at `path` with `data`.

    The parent directory is created if needed. Readers never observe a
    partially written file.

    Raises:
        FilesystemError: if the file cannot be written.
    """
    dest = Path(path)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        # Operate inside a temporary directory in the destination directory so
        # `os.replace()` is atomic and we avoid cross-filesystem moves.
        with TemporaryDirectory(prefix=TMP_DIR_PREFIX, dir=dest.parent) as tmp_dir:
            tmp_file = Path(tmp_dir) / dest.name
            tmp_file.write_bytes(data)
            os.replace(tmp_file, dest)
    except OSError as exc:
        raise FilesystemError(f"cannot write {dest}: {exc}") from exc
    return dest
