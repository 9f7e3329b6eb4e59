from __future__ import annotations

import io

from PIL import Image

from .base import RasterConverter

DEFAULT_SVG_SIZE = 512


class SvgConverter(RasterConverter):
    """Rasterises SVG sources with cairosvg, installed through the ``svg`` extra."""

    def __init__(self, size: int = DEFAULT_SVG_SIZE) -> None:
        self._size = size

    def load(self, path: str) -> Image.Image:
        try:
            import cairosvg  # type: ignore
        except Exception as exc:
            raise RuntimeError(
                "SVG sources need cairosvg. Install with: pip install 'faviconforge[svg]'"
            ) from exc
        png = cairosvg.svg2png(url=path, output_width=self._size, output_height=self._size)
        with Image.open(io.BytesIO(png)) as img:
            img.load()
            return self._normalize_image(img).copy()
