from __future__ import annotations

import io
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError, features

from ..ico.errors import ResampleFailed, UnreadableSource
from ..ico.types import Raster, alpha7_to_alpha8, alpha8_to_alpha7
from .converters import RasterConverter, SourceLoader

RasterInput = Union[Raster, Image.Image, bytes, str, Path]


@dataclass(frozen=True)
class ImageRaster(Raster):
    """Raster that remembers the RGBA image it was decoded from.

    Resampling starts from ``image`` so the 8-bit alpha survives and the
    pixel tuple is never turned back into an image.
    """

    image: Optional[Image.Image] = field(default=None, compare=False, repr=False)


def image_to_raster(img: Image.Image) -> ImageRaster:
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    red, green, blue, alpha = img.split()
    # B, G, R, A7 bytes read as little-endian words give 0xAARRGGBB.
    packed = Image.merge("RGBA", (blue, green, red, alpha.point(alpha8_to_alpha7))).tobytes()
    pixels = struct.unpack(f"<{img.width * img.height}I", packed)
    return ImageRaster(img.width, img.height, pixels, img)


def raster_to_image(raster: Raster) -> Image.Image:
    packed = struct.pack(f"<{len(raster.pixels)}I", *raster.pixels)
    blue, green, red, alpha7 = Image.frombytes("RGBA", raster.size, packed).split()
    return Image.merge("RGBA", (red, green, blue, alpha7.point(alpha7_to_alpha8)))


class RasterSource:
    """Decodes sources into rasters and resamples them. Backends override all three members."""

    @property
    def available(self) -> bool:
        return False

    def resolve(self, source: RasterInput) -> Raster:
        raise NotImplementedError

    def resample(self, raster: Raster, width: int, height: int) -> Raster:
        raise NotImplementedError


class PillowRasterSource(RasterSource):
    def __init__(self, loader: Optional[SourceLoader] = None) -> None:
        self._loader = loader or SourceLoader()

    @property
    def available(self) -> bool:
        # PNG decoding and encoding both go through zlib.
        return bool(features.check_codec("zlib"))

    def resolve(self, source: RasterInput) -> Raster:
        if isinstance(source, Raster):
            return source
        if isinstance(source, Image.Image):
            return image_to_raster(source)
        return image_to_raster(self.open(source))

    def open(self, source: Union[bytes, str, Path]) -> Image.Image:
        try:
            if isinstance(source, (bytes, bytearray)):
                with Image.open(io.BytesIO(source)) as img:
                    img.load()
                    return img.convert("RGBA")
            path = os.fspath(source)
            if not os.path.isfile(path):
                raise UnreadableSource(f"File not found: {path}")
            return self._loader.load(path)
        except UnreadableSource:
            raise
        except (UnidentifiedImageError, OSError, TypeError, ValueError, RuntimeError) as exc:
            raise UnreadableSource(f"Cannot decode image: {exc}") from exc

    def resample(self, raster: Raster, width: int, height: int) -> Raster:
        if width <= 0 or height <= 0:
            raise ResampleFailed(f"Invalid target size {width}x{height}")
        image = raster.image if isinstance(raster, ImageRaster) else None
        try:
            if image is None:
                image = raster_to_image(raster)
            img = RasterConverter.resize(image, width, height)
        except (OSError, ValueError, MemoryError) as exc:
            raise ResampleFailed(f"Resize to {width}x{height} failed: {exc}") from exc
        return image_to_raster(img)
