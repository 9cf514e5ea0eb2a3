"""Mirror remote package manifests and combine them per project.

The library keeps a local copy of the JSON manifests stored in a bucket,
deep-merges the manifests of each project into a single tree, and can
downgrade that tree to the legacy flat schema.
"""

from importlib.metadata import PackageNotFoundError, version

from .cache import ProjectCache, SyncReport
from .combine import ManifestCombiner, deep_merge
from .config import Config, load_config
from .downgrade import downgrade
from .errors import (
    ConfigError,
    DataShapeError,
    FilesystemError,
    ManifestMirrorError,
    TransportError,
)
from .orchestrator import Orchestrator, RunReport

try:
    __version__ = version("manifest-mirror")
except PackageNotFoundError:  # pragma: no cover - running from a source tree
    __version__ = "0.0.0"

__all__ = [
    "Config",
    "ConfigError",
    "DataShapeError",
    "FilesystemError",
    "ManifestCombiner",
    "ManifestMirrorError",
    "Orchestrator",
    "ProjectCache",
    "RunReport",
    "SyncReport",
    "TransportError",
    "__version__",
    "deep_merge",
    "downgrade",
    "load_config",
]
