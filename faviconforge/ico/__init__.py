from .container import build_icon, dimension_byte, directory_entry, icon_header, icon_size, layer_offsets
from .encoding import (
    bitmap_header,
    color_word,
    encode_layer,
    encode_layer_at,
    encode_masks,
    layer_size,
    mask_row_bytes,
    pack_mask_row,
)
from .errors import BackendUnavailable, IcoError, NoLayers, ResampleFailed, UnreadableSource, WriteFailed
from .generator import CONTENT_TYPE, DEFAULT_SIZES, IcoFileGenerator, normalize_sizes
from .types import EncodedLayer, Raster, alpha7_to_alpha8, alpha8_to_alpha7, pack_argb

__all__ = [
    "BackendUnavailable",
    "bitmap_header",
    "build_icon",
    "color_word",
    "CONTENT_TYPE",
    "DEFAULT_SIZES",
    "dimension_byte",
    "directory_entry",
    "encode_layer",
    "encode_layer_at",
    "encode_masks",
    "EncodedLayer",
    "icon_header",
    "icon_size",
    "IcoError",
    "IcoFileGenerator",
    "layer_offsets",
    "layer_size",
    "mask_row_bytes",
    "NoLayers",
    "normalize_sizes",
    "pack_argb",
    "pack_mask_row",
    "Raster",
    "ResampleFailed",
    "UnreadableSource",
    "WriteFailed",
    "alpha7_to_alpha8",
    "alpha8_to_alpha7",
]
