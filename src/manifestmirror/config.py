"""Module loading the YAML configuration of a mirror run."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path

import dacite
import yaml

from .errors import ConfigError


@dataclass(frozen=True, kw_only=True)
class BucketConfig:
    """Where the manifests live remotely."""

    name: str
    base_url: str
    anonymous: bool = False
    region: str | None = None
    endpoint_url: str | None = None
    list_prefix: str = ""
    timeout: float = 30


@dataclass(frozen=True, kw_only=True)
class ProjectOutputs:
    """Output paths for the legacy (v1) and current (v2) combined manifests."""

    v1: str
    v2: str


@dataclass(frozen=True, kw_only=True)
class ProjectConfig:
    """A project whose manifests live under a single remote prefix."""

    name: str
    prefix: str
    outputs: ProjectOutputs


@dataclass(frozen=True, kw_only=True)
class PlatformNamesConfig:
    """A document mirrored verbatim from `key` to `output`."""

    key: str
    output: str


@dataclass(frozen=True, kw_only=True)
class Config:
    version: int
    cache_dir: str
    bucket: BucketConfig
    projects: list[ProjectConfig]
    platform_names: list[PlatformNamesConfig] = field(default_factory=list)
    fetch_jobs: int = 4


def load_config(config_path: str | Path) -> Config:
    """
    Load and validate the configuration at `config_path`.

    Relative paths are resolved against the directory containing the file.

    Raises:
        ConfigError: if the file is missing or invalid.
    """
    config_path = Path(config_path)
    try:
        content = config_path.read_text()
    except FileNotFoundError as exc:
        raise ConfigError(f"config not found: {config_path}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config {config_path}: {exc}") from exc

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("config must be a mapping.")

    try:
        config = dacite.from_dict(
            Config,
            data,
            config=dacite.Config(strict=True, type_hooks={float: float}),
        )
    except (dacite.DaciteError, TypeError, ValueError) as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    if config.version != 0:
        raise ConfigError(f"unsupported config version: {config.version}")
    if not config.projects:
        raise ConfigError("config must include at least one project.")
    names = [project.name for project in config.projects]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigError(f"duplicate project names: {', '.join(duplicates)}")
    if config.fetch_jobs < 1:
        raise ConfigError(f"fetch_jobs must be >= 1, got {config.fetch_jobs}")

    return _resolve_paths(config, config_path.parent)


def _resolve_paths(config: Config, base: Path) -> Config:
    def resolve(value: str) -> str:
        path = Path(value).expanduser()
        return str(path if path.is_absolute() else base / path)

    return replace(
        config,
        cache_dir=resolve(config.cache_dir),
        projects=[
            replace(
                project,
                outputs=ProjectOutputs(
                    v1=resolve(project.outputs.v1),
                    v2=resolve(project.outputs.v2),
                ),
            )
            for project in config.projects
        ],
        platform_names=[
            replace(entry, output=resolve(entry.output)) for entry in config.platform_names
        ],
    )
