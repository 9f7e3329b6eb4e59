"""Shared fixtures: an in-memory raster source and a few canned rasters."""

import pytest

from faviconforge.diagnostics import RecordingDiagnostics
from faviconforge.ico import Raster, ResampleFailed, UnreadableSource, pack_argb
from faviconforge.rendering.renderer import RasterSource

OPAQUE_RED = pack_argb(255, 0, 0, 0)
OPAQUE_BLUE = pack_argb(0, 0, 255, 0)
TRANSPARENT = pack_argb(0, 0, 0, 127)


class FakeRasterSource(RasterSource):
    """Nearest-neighbour resampling over Raster values only."""

    def __init__(self, available=True):
        self._available = available
        self.resample_calls = []

    @property
    def available(self):
        return self._available

    def resolve(self, source):
        if isinstance(source, Raster):
            return source
        raise UnreadableSource(f"Cannot decode {source!r}")

    def resample(self, raster, width, height):
        self.resample_calls.append((width, height))
        if width <= 0 or height <= 0:
            raise ResampleFailed(f"Invalid target size {width}x{height}")
        pixels = tuple(
            raster.pixel(x * raster.width // width, y * raster.height // height)
            for y in range(height)
            for x in range(width)
        )
        return Raster(width, height, pixels)


@pytest.fixture
def source():
    return FakeRasterSource()


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def red_raster():
    return Raster.filled(16, 16, OPAQUE_RED)
