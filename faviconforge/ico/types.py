from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

ALPHA7_OPAQUE = 0
ALPHA7_TRANSPARENT = 127


def alpha8_to_alpha7(alpha8: int) -> int:
    """Map an 8-bit alpha (255 = opaque) onto the 7-bit scale (0 = opaque)."""
    return ALPHA7_TRANSPARENT - ((alpha8 & 0xFF) >> 1)


def alpha7_to_alpha8(alpha7: int) -> int:
    """Return round((1 - alpha7 / 127) * 255) using integer arithmetic."""
    alpha7 = max(ALPHA7_OPAQUE, min(ALPHA7_TRANSPARENT, alpha7))
    return (510 * (ALPHA7_TRANSPARENT - alpha7) + ALPHA7_TRANSPARENT) // 254


def pack_argb(red: int, green: int, blue: int, alpha7: int = ALPHA7_OPAQUE) -> int:
    """Pack a colour into the 0xAARRGGBB layout used by Raster.pixel()."""
    return ((alpha7 & 0x7F) << 24) | ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF)


@dataclass(frozen=True)
class Raster:
    """Row-major, top-down pixel grid with 7-bit alpha (0 = opaque, 127 = transparent)."""

    width: int
    height: int
    pixels: Tuple[int, ...]

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Raster dimensions must be greater than zero")
        if len(self.pixels) != self.width * self.height:
            raise ValueError("Pixels length must equal width * height")

    def pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")
        return self.pixels[y * self.width + x]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_rgba(cls, width: int, height: int, rgba: bytes) -> "Raster":
        """Build a raster from packed 8-bit RGBA bytes (Pillow's "RGBA" mode)."""
        if len(rgba) != width * height * 4:
            raise ValueError("RGBA buffer length must equal width * height * 4")
        pixels = tuple(
            pack_argb(rgba[i], rgba[i + 1], rgba[i + 2], alpha8_to_alpha7(rgba[i + 3]))
            for i in range(0, len(rgba), 4)
        )
        return cls(width, height, pixels)

    @classmethod
    def filled(cls, width: int, height: int, color: int) -> "Raster":
        return cls(width, height, (color,) * (width * height))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]]) -> "Raster":
        grid = [tuple(row) for row in rows]
        height = len(grid)
        width = len(grid[0]) if grid else 0
        if any(len(row) != width for row in grid):
            raise ValueError("All rows must have the same width")
        return cls(width, height, tuple(p for row in grid for p in row))


@dataclass(frozen=True)
class EncodedLayer:
    """One embedded bitmap: sub-header, colour mask and opacity mask."""

    width: int
    height: int
    data: bytes = field(repr=False)
    bits_per_pixel: int = 32
    palette_colors: int = 0

    @property
    def size(self) -> int:
        return len(self.data)
