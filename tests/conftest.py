"""Shared pytest fixtures for manifest-mirror tests."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from manifestmirror.errors import TransportError


class FakeFetcher:
    """In-memory fetcher serving the given objects and recording requests."""

    def __init__(self, objects: dict[str, bytes] | None = None):
        self.objects = dict(objects or {})
        self.failing: set[str] = set()
        self.requested: list[str] = []
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes:
        with self._lock:
            self.requested.append(key)
        if key in self.failing or key not in self.objects:
            raise TransportError(f"cannot fetch {key}: 404 Not Found")
        return self.objects[key]


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Return an empty FakeFetcher; tests populate `objects`."""
    return FakeFetcher()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the manifest fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def manifest_objects(fixtures_dir: Path) -> dict[str, bytes]:
    """Return the fixture manifests keyed as they would be in the bucket."""
    objects = {}
    for path in sorted((fixtures_dir / "client").glob("*.json")):
        objects[f"client-metadata/{path.name}"] = path.read_bytes()
    objects["client-platform-names.json"] = json.dumps({"el": "Enterprise Linux"}).encode()
    return objects
