"""
Custom exception hierarchy for the photo manifest builder.

Everything except OptimizerUnavailableError is fatal to a build: the CLI
turns it into a non-zero exit and no manifest is written.
"""


class PhotoManifestError(Exception):
    """Base exception for all photo manifest errors."""
    pass


class ConfigurationError(PhotoManifestError):
    """Raised when a build setting has an unusable value."""
    pass


class MalformedImageError(PhotoManifestError):
    """Raised when JPEG dimensions cannot be read from a byte stream."""
    pass


class CannotDeriveSlugError(PhotoManifestError):
    """Raised when neither the slug hint nor the file name yields a slug."""
    pass


class MetadataError(PhotoManifestError):
    """Raised when a sidecar file exists but is not a YAML mapping."""
    pass


class OptimizationFailedError(PhotoManifestError):
    """Raised when an optimized output has no readable dimensions."""
    pass


class OptimizerUnavailableError(PhotoManifestError):
    """Raised by the optimizing backend when Pillow cannot be used."""
    pass
