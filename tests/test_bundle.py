import json
import struct

import pytest
from PIL import Image

from faviconforge.assets import AssetRegistry
from faviconforge.bundle import BundleSettings, FaviconBundle
from faviconforge.manifest import WebManifest


@pytest.fixture
def source_png(tmp_path):
    path = tmp_path / "logo.png"
    Image.new("RGBA", (256, 256), (20, 40, 200, 255)).save(path)
    return path


@pytest.fixture
def public_root(tmp_path):
    root = tmp_path / "public"
    root.mkdir()
    return root


def _manifest():
    return WebManifest(name="Example").colors("#112233", "#ffffff")


def test_generate_writes_every_asset(source_png, public_root):
    bundle = FaviconBundle(public_root, manifest=_manifest()).set_source(source_png)
    document = bundle.generate()

    for name in AssetRegistry.load().names:
        assert (public_root / name).is_file(), name
    for name in ("favicon.ico", "apple-touch-icon.png", "manifest.json", "browserconfig.xml"):
        assert (public_root / name).is_file(), name
    assert not (public_root / "favicon.svg").exists()

    assert document.link["favicon.ico"] == {"rel": "shortcut icon", "type": "image/x-icon", "href": "/favicon.ico"}
    assert document.link["apple-touch-icon"]["href"] == "/apple-touch-icon.png"
    assert document.link["favicon-32x32"]["sizes"] == "32x32"
    assert document.link["manifest"]["href"] == "/manifest.json"
    assert document.meta["theme-color"]["content"] == "#112233"
    assert document.meta["msapplication-TileColor"]["content"] == "#ffffff"
    assert document.meta["msapplication-TileImage"]["content"] == "/mstile-144x144.png"


def test_png_assets_are_scaled_down_only(source_png, public_root):
    FaviconBundle(public_root).set_source(source_png).generate()
    with Image.open(public_root / "favicon-32x32.png") as img:
        assert img.size == (32, 32)
    with Image.open(public_root / "android-chrome-512x512.png") as img:
        assert img.size == (256, 256)
    with Image.open(public_root / "mstile-310x150.png") as img:
        assert img.size == (150, 150)


def test_favicon_ico_layers(source_png, public_root):
    FaviconBundle(public_root, settings=BundleSettings(ico_sizes=(16, 48))).set_source(source_png).generate()
    data = (public_root / "favicon.ico").read_bytes()
    assert struct.unpack("<HHH", data[:6]) == (0, 1, 2)
    assert (data[6], data[7]) == (16, 16)
    assert (data[22], data[23]) == (48, 48)


def test_manifest_and_browserconfig(source_png, public_root):
    FaviconBundle(public_root, manifest=_manifest()).set_source(source_png).generate()
    manifest = json.loads((public_root / "manifest.json").read_text(encoding="utf-8"))
    assert len(manifest["icons"]) == 9
    assert manifest["icons"][0] == {"src": "/android-chrome-36x36.png", "sizes": "36x36", "type": "image/png"}
    xml = (public_root / "browserconfig.xml").read_text(encoding="utf-8")
    assert '<square70x70logo src="/mstile-70x70.png"/>' in xml
    assert '<wide310x150logo src="/mstile-310x150.png"/>' in xml
    assert "<TileColor>#112233</TileColor>" in xml


def test_purge_removes_stale_files(source_png, public_root):
    (public_root / "site.webmanifest").write_text("{}")
    (public_root / "favicon-16x16.png").write_bytes(b"stale")
    (public_root / "keep.txt").write_text("keep")
    purged = FaviconBundle(public_root).purge()
    assert set(purged) == {"site.webmanifest", "favicon-16x16.png"}
    assert (public_root / "keep.txt").exists()


def test_head_document_html(source_png, public_root):
    document = FaviconBundle(public_root, manifest=_manifest()).set_source(source_png).generate()
    html = document.html()
    assert '<meta name="theme-color" content="#112233">' in html
    assert '<link rel="shortcut icon" type="image/x-icon" href="/favicon.ico">' in html
    assert '<link rel="manifest" type="application/manifest+json" href="/manifest.json">' in html


def test_href_prefix(source_png, public_root):
    settings = BundleSettings(href_prefix="/static")
    document = FaviconBundle(public_root, settings=settings).set_source(source_png).generate()
    assert document.link["favicon.ico"]["href"] == "/static/favicon.ico"
    xml = (public_root / "browserconfig.xml").read_text(encoding="utf-8")
    assert 'src="/static/mstile-70x70.png"' in xml


def test_generate_requires_directory(source_png, tmp_path):
    bundle = FaviconBundle(tmp_path / "missing").set_source(source_png)
    with pytest.raises(NotADirectoryError):
        bundle.generate()


def test_generate_requires_source(public_root):
    with pytest.raises(RuntimeError):
        FaviconBundle(public_root).generate()


def test_set_source_validation(tmp_path, public_root):
    bundle = FaviconBundle(public_root)
    with pytest.raises(ValueError):
        bundle.set_source(tmp_path / "notes.txt")
    with pytest.raises(FileNotFoundError):
        bundle.set_source(tmp_path / "missing.png")
