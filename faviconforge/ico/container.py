from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .encoding import MAX_DIMENSION, u16_le, u32_le
from .errors import NoLayers
from .types import EncodedLayer

ICON_HEADER_SIZE = 6
DIRECTORY_ENTRY_SIZE = 16
ICON_TYPE = 1


def dimension_byte(value: int) -> int:
    """Directory fields are one byte wide, so 256 is stored as 0."""
    if not 0 < value <= MAX_DIMENSION:
        raise ValueError(f"Icon dimension {value} does not fit a directory entry")
    return value % MAX_DIMENSION


def icon_header(count: int) -> bytes:
    """Build the 6-byte icon directory header (reserved, type, count)."""
    return u16_le(0) + u16_le(ICON_TYPE) + u16_le(count)


def directory_entry(layer: EncodedLayer, offset: int) -> bytes:
    """Build one 16-byte directory entry pointing at a layer payload."""
    return b"".join(
        [
            bytes(
                [
                    dimension_byte(layer.width),
                    dimension_byte(layer.height),
                    layer.palette_colors & 0xFF,
                    0x00,
                ]
            ),
            u16_le(1),
            u16_le(layer.bits_per_pixel),
            u32_le(layer.size),
            u32_le(offset),
        ]
    )


def layer_offsets(layers: Sequence[EncodedLayer]) -> List[int]:
    """Return the payload offset of every layer, in order."""
    offsets = []
    offset = ICON_HEADER_SIZE + DIRECTORY_ENTRY_SIZE * len(layers)
    for layer in layers:
        offsets.append(offset)
        offset += layer.size
    return offsets


def build_directory(layers: Sequence[EncodedLayer]) -> List[Tuple[EncodedLayer, bytes]]:
    return [(layer, directory_entry(layer, offset)) for layer, offset in zip(layers, layer_offsets(layers))]


def build_icon(layers: Iterable[EncodedLayer]) -> bytes:
    """Concatenate header, directory entries and payloads into one icon file."""
    layers = list(layers)
    if not layers:
        raise NoLayers("No layers to write")
    out = bytearray(icon_header(len(layers)))
    directory = build_directory(layers)
    for _, entry in directory:
        out += entry
    for layer, _ in directory:
        out += layer.data
    return bytes(out)


def icon_size(layers: Sequence[EncodedLayer]) -> int:
    return ICON_HEADER_SIZE + DIRECTORY_ENTRY_SIZE * len(layers) + sum(layer.size for layer in layers)
