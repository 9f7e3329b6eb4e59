from __future__ import annotations

from PIL import Image

from .base import RasterConverter


class ImageConverter(RasterConverter):
    def load(self, path: str) -> Image.Image:
        return self._normalize_image(self._load_image(path))
