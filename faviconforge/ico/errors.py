from __future__ import annotations


class IcoError(Exception):
    """Base class for icon container failures."""


class BackendUnavailable(IcoError):
    """The raster backend could not decode or encode images."""


class UnreadableSource(IcoError):
    """The source path is missing or not a decodable image."""


class ResampleFailed(IcoError):
    """The raster could not be resampled to the requested size."""


class NoLayers(IcoError):
    """An icon was requested before any layer had been added."""


class WriteFailed(IcoError):
    """Writing the icon data to disk failed."""
