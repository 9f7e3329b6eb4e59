from __future__ import annotations

import os
from typing import Dict, Optional, Set

from PIL import Image

from .base import RasterConverter, SourceConverter
from .image import ImageConverter
from .svg import SvgConverter

RASTER_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")
SUPPORTED_EXTENSIONS: Set[str] = set(RASTER_EXTENSIONS) | {".svg"}


class SourceLoader:
    def __init__(self, converters: Optional[Dict[str, SourceConverter]] = None) -> None:
        if converters is None:
            converters = {}
            image_converter = ImageConverter()
            for ext in RASTER_EXTENSIONS:
                converters[ext] = image_converter
            converters[".svg"] = SvgConverter()
        self._converters = converters

    def load(self, path: str) -> Image.Image:
        ext = os.path.splitext(path)[1].lower()
        converter = self._converters.get(ext)
        if not converter:
            # Unknown extensions still get a chance with Pillow's own format sniffing.
            converter = self._converters.get(".png") or ImageConverter()
        return converter.load(path)


__all__ = [
    "ImageConverter",
    "RasterConverter",
    "SUPPORTED_EXTENSIONS",
    "SourceConverter",
    "SourceLoader",
    "SvgConverter",
]
