from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

DATA_PATH = Path(__file__).resolve().parent / "data" / "favicon_assets.json"


@dataclass(frozen=True)
class FaviconAsset:
    name: str
    width: int
    height: int

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    @property
    def sizes(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def stem(self) -> str:
        return self.name.rsplit(".", 1)[0]


class AssetRegistry:
    _cache: Dict[Path, "AssetRegistry"] = {}

    def __init__(self, assets: Iterable[FaviconAsset]) -> None:
        self._assets = list(assets)

    @classmethod
    def load(cls, path: Path = DATA_PATH) -> "AssetRegistry":
        key = path.resolve()
        cached = cls._cache.get(key)
        if cached:
            return cached
        raw = json.loads(path.read_text(encoding="utf-8"))
        assets = [FaviconAsset(**item) for item in raw]
        registry = cls(assets)
        cls._cache[key] = registry
        return registry

    @property
    def assets(self) -> List[FaviconAsset]:
        return list(self._assets)

    @property
    def names(self) -> List[str]:
        return [asset.name for asset in self._assets]

    def get(self, name: str) -> Optional[FaviconAsset]:
        for asset in self._assets:
            if asset.name == name:
                return asset
        return None

    def by_prefix(self, prefix: str) -> List[FaviconAsset]:
        return [asset for asset in self._assets if asset.name.startswith(prefix)]
