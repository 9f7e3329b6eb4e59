import pytest
from PIL import Image

from faviconforge.ico import IcoFileGenerator, Raster, ResampleFailed, UnreadableSource, pack_argb
from faviconforge.rendering import renderer
from faviconforge.rendering.renderer import ImageRaster, PillowRasterSource, image_to_raster, raster_to_image


def _png(tmp_path, name="source.png", size=(64, 64), color=(255, 0, 0, 255)):
    path = tmp_path / name
    Image.new("RGBA", size, color).save(path)
    return path


def test_image_to_raster_converts_alpha_to_seven_bit_scale():
    img = Image.new("RGBA", (2, 1))
    img.putpixel((0, 0), (255, 0, 0, 255))
    img.putpixel((1, 0), (0, 255, 0, 0))
    raster = image_to_raster(img)
    assert raster.size == (2, 1)
    assert raster.pixel(0, 0) == pack_argb(255, 0, 0, 0)
    assert raster.pixel(1, 0) == pack_argb(0, 255, 0, 127)


def test_raster_to_image_restores_full_alpha_extremes():
    raster = Raster.from_rows([[pack_argb(1, 2, 3, 0), pack_argb(4, 5, 6, 127)]])
    img = raster_to_image(raster)
    assert img.mode == "RGBA"
    assert img.getpixel((0, 0)) == (1, 2, 3, 255)
    assert img.getpixel((1, 0)) == (4, 5, 6, 0)


def test_pillow_source_is_available():
    assert PillowRasterSource().available


def test_resolve_path(tmp_path):
    raster = PillowRasterSource().resolve(_png(tmp_path, size=(8, 4)))
    assert raster.size == (8, 4)
    assert raster.pixel(0, 0) == pack_argb(255, 0, 0, 0)


def test_resolve_bytes_and_image(tmp_path):
    path = _png(tmp_path, size=(3, 3))
    adapter = PillowRasterSource()
    assert adapter.resolve(path.read_bytes()).size == (3, 3)
    assert adapter.resolve(Image.new("RGB", (5, 2))).size == (5, 2)


def test_resolve_missing_file(tmp_path):
    with pytest.raises(UnreadableSource):
        PillowRasterSource().resolve(tmp_path / "missing.png")


def test_resolve_non_image(tmp_path):
    path = tmp_path / "notes.png"
    path.write_text("not an image")
    with pytest.raises(UnreadableSource):
        PillowRasterSource().resolve(path)


def test_resample_to_exact_size():
    raster = Raster.filled(10, 10, pack_argb(0, 0, 255, 0))
    out = PillowRasterSource().resample(raster, 4, 6)
    assert out.size == (4, 6)
    assert out.pixel(2, 3) == pack_argb(0, 0, 255, 0)


def test_resample_degenerate_target():
    with pytest.raises(ResampleFailed):
        PillowRasterSource().resample(Raster.filled(2, 2, 0), 0, 16)


def test_generated_icon_opens_in_pillow(tmp_path):
    ico = IcoFileGenerator(_png(tmp_path))
    path = tmp_path / "favicon.ico"
    assert ico.save(path)
    with Image.open(path) as img:
        assert img.format == "ICO"
        assert img.info["sizes"] == {(16, 16), (24, 24), (32, 32)}
        img.load()
        assert img.size == (32, 32)
        assert img.convert("RGBA").getpixel((0, 0)) == (255, 0, 0, 255)


def test_decoded_raster_resamples_from_its_image(tmp_path, monkeypatch):
    adapter = PillowRasterSource()
    raster = adapter.resolve(_png(tmp_path, size=(512, 512)))
    assert isinstance(raster, ImageRaster)
    assert raster.image.size == (512, 512)

    def fail(_raster):
        raise AssertionError("decoded rasters must not be rebuilt into an image")

    monkeypatch.setattr(renderer, "raster_to_image", fail)
    out = adapter.resample(raster, 16, 16)
    assert out.size == (16, 16)
    assert out.pixel(8, 8) == pack_argb(255, 0, 0, 0)


def test_image_to_raster_matches_per_pixel_conversion():
    img = Image.new("RGBA", (3, 2))
    values = [(10, 20, 30, 255), (40, 50, 60, 128), (70, 80, 90, 0), (1, 2, 3, 1), (4, 5, 6, 254), (7, 8, 9, 127)]
    img.putdata(values)
    raster = image_to_raster(img)
    assert raster.pixels == Raster.from_rgba(3, 2, img.tobytes()).pixels
    assert raster_to_image(raster).getpixel((0, 0)) == (10, 20, 30, 255)
