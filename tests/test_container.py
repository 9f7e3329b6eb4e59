import struct

import pytest

from faviconforge.ico import (
    NoLayers,
    Raster,
    build_icon,
    dimension_byte,
    directory_entry,
    encode_layer,
    icon_header,
    icon_size,
    layer_offsets,
)

from .conftest import OPAQUE_RED


def _layers(*sizes):
    return [encode_layer(Raster.filled(width, height, OPAQUE_RED)) for width, height in sizes]


def test_icon_header_bytes():
    assert icon_header(1) == bytes([0x00, 0x00, 0x01, 0x00, 0x01, 0x00])
    assert struct.unpack("<HHH", icon_header(3)) == (0, 1, 3)


def test_dimension_byte_maps_256_to_zero():
    assert dimension_byte(256) == 0
    assert dimension_byte(255) == 255
    assert dimension_byte(16) == 16


def test_dimension_byte_rejects_sizes_a_byte_cannot_hold():
    for value in (0, 257, 300):
        with pytest.raises(ValueError):
            dimension_byte(value)


def test_directory_entry_layout():
    (layer,) = _layers((16, 16))
    entry = directory_entry(layer, 22)
    assert len(entry) == 16
    assert struct.unpack("<BBBBHHII", entry) == (16, 16, 0, 0, 1, 32, 1128, 22)


def test_single_layer_icon_size():
    data = build_icon(_layers((16, 16)))
    assert len(data) == 1150
    assert data[:6] == bytes([0x00, 0x00, 0x01, 0x00, 0x01, 0x00])


def test_offsets_are_contiguous_and_increasing():
    layers = _layers((16, 16), (24, 24), (32, 32))
    offsets = layer_offsets(layers)
    assert offsets == [54, 54 + 1128, 54 + 1128 + 2440]
    data = build_icon(layers)
    assert len(data) == icon_size(layers) == 6 + 16 * 3 + 1128 + 2440 + 4264
    for index, layer in enumerate(layers):
        entry = data[6 + 16 * index : 6 + 16 * (index + 1)]
        width, height, _, _, _, _, size, offset = struct.unpack("<BBBBHHII", entry)
        assert (width, height) == (layer.width, layer.height)
        assert size == layer.size
        assert offset == offsets[index]
        assert data[offset : offset + size] == layer.data


def test_duplicate_dimensions_are_kept():
    layers = _layers((16, 16), (16, 16))
    data = build_icon(layers)
    assert struct.unpack("<HHH", data[:6])[2] == 2


def test_build_icon_without_layers_raises():
    with pytest.raises(NoLayers):
        build_icon([])
