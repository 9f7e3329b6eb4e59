from __future__ import annotations

from typing import TYPE_CHECKING, List

from .errors import ResampleFailed
from .types import ALPHA7_OPAQUE, EncodedLayer, Raster, alpha7_to_alpha8

if TYPE_CHECKING:
    from ..rendering.renderer import RasterSource

BITMAP_HEADER_SIZE = 40
BITS_PER_PIXEL = 32
# Directory entries hold each dimension in one byte, with 0 standing for 256.
MAX_DIMENSION = 256


def u16_le(value: int) -> bytes:
    return (value & 0xFFFF).to_bytes(2, "little", signed=False)


def u32_le(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "little", signed=False)


def u32_be(value: int) -> bytes:
    return (value & 0xFFFFFFFF).to_bytes(4, "big", signed=False)


def mask_row_bytes(width: int) -> int:
    """Return the padded byte count of one opacity mask row."""
    return ((width + 31) // 32) * 4


def layer_size(width: int, height: int) -> int:
    return BITMAP_HEADER_SIZE + width * height * 4 + mask_row_bytes(width) * height


def color_word(argb: int) -> int:
    """Swap the 7-bit alpha of a raster pixel for an 8-bit alpha (255 = opaque)."""
    alpha8 = alpha7_to_alpha8((argb >> 24) & 0x7F)
    return (argb & 0xFFFFFF) | (alpha8 << 24)


def is_transparent(argb: int) -> bool:
    """Mask bit rule: anything that is not fully opaque is transparent."""
    return ((argb >> 24) & 0x7F) != ALPHA7_OPAQUE


def bitmap_header(width: int, height: int) -> bytes:
    """Build the 40-byte BITMAPINFOHEADER for a layer.

    The height is doubled because it covers both the colour and the mask plane.
    """
    return b"".join(
        [
            u32_le(BITMAP_HEADER_SIZE),
            u32_le(width),
            u32_le(height * 2),
            u16_le(1),
            u16_le(BITS_PER_PIXEL),
            u32_le(0),
            u32_le(0),
            u32_le(0),
            u32_le(0),
            u32_le(0),
            u32_le(0),
        ]
    )


def pack_mask_row(bits: List[int]) -> List[int]:
    """Pack a row of 0/1 values MSB-first into 32-bit words, zero padding the last word."""
    words = []
    for i in range(0, len(bits), 32):
        chunk = bits[i : i + 32]
        value = 0
        for bit in chunk:
            value = (value << 1) | (1 if bit else 0)
        value <<= 32 - len(chunk)
        words.append(value)
    return words


def encode_masks(raster: Raster) -> bytes:
    """Return colour mask followed by opacity mask, both in bottom-up row order.

    Colour words are little-endian while opacity mask words are big-endian.
    Readers depend on this exact layout, so the two writers must stay different.
    """
    color = bytearray()
    opacity = bytearray()
    for y in range(raster.height - 1, -1, -1):
        row_bits = []
        for x in range(raster.width):
            argb = raster.pixel(x, y)
            color += u32_le(color_word(argb))
            row_bits.append(1 if is_transparent(argb) else 0)
        for word in pack_mask_row(row_bits):
            opacity += u32_be(word)
    return bytes(color + opacity)


def encode_layer(raster: Raster) -> EncodedLayer:
    """Encode an already resampled raster as a 32-bit icon layer."""
    raster.validate()
    data = bitmap_header(raster.width, raster.height) + encode_masks(raster)
    return EncodedLayer(
        width=raster.width,
        height=raster.height,
        data=data,
        bits_per_pixel=BITS_PER_PIXEL,
        palette_colors=0,
    )


def encode_layer_at(source: RasterSource, raster: Raster, width: int, height: int) -> EncodedLayer:
    """Resample through the raster source, then encode at the requested size."""
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ResampleFailed(f"Icon layers are at most {MAX_DIMENSION}x{MAX_DIMENSION}, got {width}x{height}")
    resampled = source.resample(raster, width, height)
    if resampled.size != (width, height):
        raise ResampleFailed(f"Resampled raster is {resampled.width}x{resampled.height}, expected {width}x{height}")
    return encode_layer(resampled)
