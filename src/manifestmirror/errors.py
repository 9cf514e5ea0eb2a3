"""Errors raised by the manifest mirror."""


class ManifestMirrorError(RuntimeError):
    """Base class for all the errors emitted by this package."""


class TransportError(ManifestMirrorError):
    """Listing or fetching remote objects failed. Re-running may help."""


class FilesystemError(ManifestMirrorError):
    """Creating, deleting, or writing local files failed."""


class DataShapeError(ManifestMirrorError):
    """A manifest is malformed or lacks an expected field."""


class ConfigError(ManifestMirrorError):
    """The configuration file is missing or invalid."""
