from __future__ import annotations

import html
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from PIL import Image

from .assets import AssetRegistry, FaviconAsset
from .browserconfig import BrowserConfig
from .diagnostics import DiagnosticsSink, LoggingDiagnostics
from .ico import CONTENT_TYPE, IcoFileGenerator
from .manifest import WebManifest
from .rendering.converters import SUPPORTED_EXTENSIONS, RasterConverter, SourceLoader

logger = logging.getLogger(__name__)

DEFAULT_ICO_SIZES = (16, 24, 32)
APPLE_TOUCH_SOURCE = "apple-touch-icon-180x180.png"
TILE_IMAGE = "mstile-144x144.png"
GENERATED_FILES = (
    "favicon.ico",
    "favicon.svg",
    "safari-pinned-tab.svg",
    "manifest.json",
    # Never generated, but a stale one would shadow manifest.json.
    "site.webmanifest",
    "browserconfig.xml",
    "apple-touch-icon.png",
)

Attributes = Dict[str, str]
IcoSize = Union[int, Tuple[int, int]]


@dataclass
class BundleSettings:
    ico_sizes: Sequence[IcoSize] = DEFAULT_ICO_SIZES
    href_prefix: str = "/"


@dataclass
class HeadDocument:
    """``<meta>`` and ``<link>`` attributes for the generated assets, keyed by asset."""

    meta: Dict[str, Attributes] = field(default_factory=dict)
    link: Dict[str, Attributes] = field(default_factory=dict)

    def html(self) -> str:
        lines = []
        for attributes in self.meta.values():
            lines.append(_tag("meta", attributes))
        for attributes in self.link.values():
            lines.append(_tag("link", attributes))
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Dict[str, Attributes]]:
        return {"meta": dict(self.meta), "link": dict(self.link)}


class FaviconBundle:
    def __init__(
        self,
        public_root: Union[str, Path],
        settings: Optional[BundleSettings] = None,
        manifest: Optional[WebManifest] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        registry: Optional[AssetRegistry] = None,
        loader: Optional[SourceLoader] = None,
    ) -> None:
        self.public_root = Path(public_root)
        self.settings = settings or BundleSettings()
        self.manifest = manifest or WebManifest()
        self.diagnostics = diagnostics or LoggingDiagnostics(logger)
        self.registry = registry or AssetRegistry.load()
        self._loader = loader or SourceLoader()
        self._image: Optional[Image.Image] = None
        self._svg_path: Optional[Path] = None

    @property
    def svg_path(self) -> Optional[Path]:
        return self._svg_path

    def set_source(self, source: Union[str, Path, Image.Image]) -> "FaviconBundle":
        if isinstance(source, Image.Image):
            self._image = RasterConverter._normalize_image(source)
            self._svg_path = None
            return self
        path = Path(source)
        self._validate_input_path(path)
        self._image = self._loader.load(str(path))
        self._svg_path = path if path.suffix.lower() == ".svg" else None
        logger.debug("Loaded %s source %s (%dx%d)", path.suffix.lower(), path, *self._image.size)
        return self

    def purge(self) -> List[str]:
        """Delete previously generated files from the public root. Returns the removed names."""
        purged = []
        for name in list(GENERATED_FILES) + self.registry.names:
            path = self.public_root / name
            if path.is_file():
                path.unlink()
                purged.append(name)
        if purged:
            logger.info("Purged %d existing favicon files from %s", len(purged), self.public_root)
        return purged

    def generate(self, ico_sizes: Optional[Sequence[IcoSize]] = None) -> HeadDocument:
        if not self.public_root.is_dir():
            raise NotADirectoryError(f"Public root is not a directory: {self.public_root}")
        if self._image is None:
            raise RuntimeError("No source image set")
        self.purge()
        document = HeadDocument()

        if self._write_ico(ico_sizes or self.settings.ico_sizes):
            document.link["favicon.ico"] = {"rel": "shortcut icon", "type": CONTENT_TYPE, "href": self._href("favicon.ico")}

        if self._svg_path is not None:
            shutil.copyfile(self._svg_path, self.public_root / "favicon.svg")
            document.link["favicon.svg"] = {"rel": "icon", "type": "image/svg+xml", "href": self._href("favicon.svg")}

        if self.manifest.theme_color:
            document.meta["theme-color"] = {"name": "theme-color", "content": self.manifest.theme_color}

        icons = []
        tiles: Dict[str, str] = {}
        for asset in self.registry.assets:
            image = self._write_png(asset)
            if asset.name.startswith("favicon"):
                document.link[asset.stem] = {
                    "rel": "icon",
                    "type": "image/png",
                    "sizes": asset.sizes,
                    "href": self._href(asset.name),
                }
            if asset.name == APPLE_TOUCH_SOURCE:
                image.save(self.public_root / "apple-touch-icon.png", format="PNG")
                document.link["apple-touch-icon"] = {
                    "rel": "apple-touch-icon",
                    "sizes": asset.sizes,
                    "href": self._href("apple-touch-icon.png"),
                }
            if asset.name.startswith("android-chrome"):
                icons.append({"src": self._href(asset.name), "sizes": asset.sizes, "type": "image/png"})
            if asset.name.startswith("mstile"):
                tiles[_tile_element(asset)] = asset.name
            if asset.name == TILE_IMAGE:
                document.meta["msapplication-TileImage"] = {
                    "name": "msapplication-TileImage",
                    "content": self._href(asset.name),
                }

        if self.manifest.background_color:
            document.meta["msapplication-TileColor"] = {
                "name": "msapplication-TileColor",
                "content": self.manifest.background_color,
            }

        self.manifest.set_icons(icons)
        (self.public_root / "manifest.json").write_text(self.manifest.generate(), encoding="utf-8")
        browserconfig = BrowserConfig(self.manifest.theme_color, tiles, self.settings.href_prefix)
        (self.public_root / "browserconfig.xml").write_text(browserconfig.xml(), encoding="utf-8")
        document.link["manifest"] = {
            "rel": "manifest",
            "type": "application/manifest+json",
            "href": self._href("manifest.json"),
        }
        logger.info("Generated favicon bundle in %s", self.public_root)
        return document

    def _write_ico(self, sizes: Sequence[IcoSize]) -> bool:
        pairs = [(size, size) if isinstance(size, int) else tuple(size) for size in sizes]
        ico = IcoFileGenerator(self._image, pairs, diagnostics=self.diagnostics)
        if not ico.save(self.public_root / "favicon.ico"):
            logger.warning("favicon.ico was not written")
            return False
        return True

    def _write_png(self, asset: FaviconAsset) -> Image.Image:
        image = RasterConverter.scale_down(self._image, asset.width, asset.height)
        image.save(self.public_root / asset.name, format="PNG")
        return image

    def _href(self, name: str) -> str:
        prefix = self.settings.href_prefix
        if not prefix.endswith("/"):
            prefix += "/"
        return prefix + name

    @staticmethod
    def _validate_input_path(path: Path) -> None:
        ext = path.suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise ValueError("Supported formats: " + ", ".join(sorted(SUPPORTED_EXTENSIONS)))
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")


def _tile_element(asset: FaviconAsset) -> str:
    if asset.is_square:
        return f"square{asset.sizes}logo"
    return f"wide{asset.sizes}logo"


def _tag(name: str, attributes: Attributes) -> str:
    rendered = " ".join(f'{key}="{html.escape(value, quote=True)}"' for key, value in attributes.items())
    return f"<{name} {rendered}>"
