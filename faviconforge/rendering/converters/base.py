from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageOps


class SourceConverter:
    def load(self, path: str) -> Image.Image:
        raise NotImplementedError


class RasterConverter(SourceConverter):
    @staticmethod
    def _load_image(path: str) -> Image.Image:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            return img.copy()

    @staticmethod
    def _normalize_image(img: Image.Image) -> Image.Image:
        if img.mode != "RGBA":
            return img.convert("RGBA")
        return img

    @staticmethod
    def resize(img: Image.Image, width: int, height: int) -> Image.Image:
        if img.size == (width, height):
            return img.copy()
        return img.resize((width, height), Image.LANCZOS)

    @staticmethod
    def _fit_within(img: Image.Image, width: int, height: int) -> Tuple[int, int]:
        """Largest aspect-preserving size inside the box, capped at the original size."""
        ratio = min(width / float(img.width), height / float(img.height), 1.0)
        return max(1, int(round(img.width * ratio))), max(1, int(round(img.height * ratio)))

    @classmethod
    def scale_down(cls, img: Image.Image, width: int, height: int) -> Image.Image:
        fit_width, fit_height = cls._fit_within(img, width, height)
        return cls.resize(cls._normalize_image(img), fit_width, fit_height)
