"""Tests for the manifestmirror.orchestrator module."""

import json
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from manifestmirror.config import (
    BucketConfig,
    Config,
    PlatformNamesConfig,
    ProjectConfig,
    ProjectOutputs,
)
from manifestmirror.errors import DataShapeError, TransportError
from manifestmirror.orchestrator import Orchestrator, create
from manifestmirror.remote import HTTPFetcher, RemoteObject, S3KeyLister

_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)
_TIMESTAMP = "2026-10-17 12:00:00 +0000"


class StaticLister:
    def __init__(self, keys):
        self.keys = list(keys)
        self.calls = 0

    def list(self):
        self.calls += 1
        return [RemoteObject(key=key, checksum="0" * 32) for key in self.keys]


def _config(tmp_path: Path, *, with_platform_names: bool = True) -> Config:
    out = tmp_path / "out"
    platform_names = []
    if with_platform_names:
        platform_names = [
            PlatformNamesConfig(
                key="client-platform-names.json",
                output=str(out / "client-platform-names.json"),
            )
        ]
    return Config(
        version=0,
        cache_dir=str(tmp_path / "cache"),
        bucket=BucketConfig(name="packages", base_url="https://packages.example.com"),
        projects=[
            ProjectConfig(
                name="client",
                prefix="client-metadata",
                outputs=ProjectOutputs(
                    v1=str(out / "client.json"),
                    v2=str(out / "client-v2.json"),
                ),
            ),
            ProjectConfig(
                name="server",
                prefix="server-metadata",
                outputs=ProjectOutputs(
                    v1=str(out / "server.json"),
                    v2=str(out / "server-v2.json"),
                ),
            ),
        ],
        platform_names=platform_names,
        fetch_jobs=2,
    )


class TestOrchestratorRun:
    """Tests for Orchestrator.run."""

    def test_full_run(self, tmp_path, fake_fetcher, manifest_objects):
        fake_fetcher.objects = manifest_objects
        lister = StaticLister(manifest_objects)
        orch = Orchestrator(config=_config(tmp_path), lister=lister, fetcher=fake_fetcher)

        report = orch.run(now=_NOW)

        assert lister.calls == 1
        assert [sync.project for sync in report.syncs] == ["client", "server"]
        assert len(report.syncs[0].fetched) == 3
        assert report.syncs[1].remote_count == 0
        assert len(report.written) == 5

        out = tmp_path / "out"
        v2 = json.loads((out / "client-v2.json").read_text())
        v1 = json.loads((out / "client.json").read_text())
        assert v2["run_data"] == {"timestamp": _TIMESTAMP}
        assert v1["run_data"] == {"timestamp": _TIMESTAMP}
        assert v2["ubuntu"]["14.04"]["x86_64"]["12.1.0"]["md5"] == (
            "4f3b1e8bd3b2a2d3a1f3c1d2e5f6a7b8"
        )
        assert v1["ubuntu"]["14.04"]["x86_64"]["12.1.0"] == (
            "/ubuntu/14.04/x86_64/chef_12.1.0-1_amd64.deb"
        )
        assert v1["el"]["6"]["x86_64"]["12.1.0"] == "/el/6/x86_64/chef-12.1.0-1.el6.x86_64.rpm"

        server = json.loads((out / "server-v2.json").read_text())
        assert server == {"run_data": {"timestamp": _TIMESTAMP}}

        names = out / "client-platform-names.json"
        assert names.read_bytes() == manifest_objects["client-platform-names.json"]

    def test_second_run_fetches_only_new_keys(self, tmp_path, fake_fetcher, manifest_objects):
        fake_fetcher.objects = manifest_objects
        config = _config(tmp_path, with_platform_names=False)
        first = Orchestrator(
            config=config, lister=StaticLister(manifest_objects), fetcher=fake_fetcher
        )
        first.run()
        fake_fetcher.requested.clear()

        keys = set(manifest_objects) - {"client-metadata/el-6-x86_64.json"}
        report = Orchestrator(config=config, lister=StaticLister(keys), fetcher=fake_fetcher).run()

        assert fake_fetcher.requested == []
        assert report.syncs[0].evicted == ("el-6-x86_64.json",)
        v1 = json.loads((tmp_path / "out" / "client.json").read_text())
        assert "el" not in v1

    def test_fetch_failure_propagates(self, tmp_path, fake_fetcher, manifest_objects):
        fake_fetcher.objects = manifest_objects
        fake_fetcher.failing.add("client-metadata/ubuntu-12.04-i686.json")
        orch = Orchestrator(
            config=_config(tmp_path),
            lister=StaticLister(manifest_objects),
            fetcher=fake_fetcher,
        )

        with pytest.raises(TransportError):
            orch.run()

        assert not (tmp_path / "cache" / "client" / "ubuntu-12.04-i686.json").exists()
        assert not (tmp_path / "out").exists()

    def test_bad_manifest_shape_propagates(self, tmp_path, fake_fetcher):
        fake_fetcher.objects = {
            "client-metadata/bad.json": b'{"el": {"6": {"x86_64": {"1": {}}}}}',
        }
        orch = Orchestrator(
            config=_config(tmp_path, with_platform_names=False),
            lister=StaticLister(fake_fetcher.objects),
            fetcher=fake_fetcher,
        )

        with pytest.raises(DataShapeError, match="missing relpath"):
            orch.run()

        # The v2 output is written before the downgrade fails.
        assert (tmp_path / "out" / "client-v2.json").exists()
        assert not (tmp_path / "out" / "client.json").exists()

    def test_listing_failure_propagates(self, tmp_path, fake_fetcher):
        lister = MagicMock()
        lister.list.side_effect = TransportError("cannot list bucket packages")
        orch = Orchestrator(config=_config(tmp_path), lister=lister, fetcher=fake_fetcher)

        with pytest.raises(TransportError):
            orch.run()

        assert not (tmp_path / "cache").exists()


@patch("manifestmirror.remote.listing.boto3.client")
def test_create_uses_bucket_config(mock_client, tmp_path):
    config = _config(tmp_path)
    orch = create(config)
    mock_client.assert_called_once()
    assert isinstance(orch.lister, S3KeyLister)
    assert orch.lister.bucket == "packages"
    assert isinstance(orch.fetcher, HTTPFetcher)
    assert orch.fetcher.base_url == "https://packages.example.com"
    assert orch.project_cache(config.projects[1]).cache_dir == tmp_path / "cache" / "server"
