from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_QUERY = "?source=pwa"

JsonList = Union[str, List[Dict[str, Any]], None]


class Display(str, Enum):
    FULLSCREEN = "fullscreen"
    STANDALONE = "standalone"
    MINIMAL_UI = "minimal-ui"
    OVERLAY_UI = "window-controls-overlay"
    BROWSER = "browser"


@dataclass
class WebManifest:
    """Web app manifest fields; ``generate()`` renders ``manifest.json``."""

    name: Optional[str] = None
    short_name: Optional[str] = None
    description: Optional[str] = None
    icons: List[Dict[str, Any]] = field(default_factory=list)
    id: str = "/"
    start_url: Optional[str] = None
    scope: Optional[str] = None
    theme_color: Optional[str] = None
    background_color: Optional[str] = None
    display: Display = Display.STANDALONE
    screenshots: List[Dict[str, Any]] = field(default_factory=list)
    shortcuts: List[Dict[str, Any]] = field(default_factory=list)
    source: str = DEFAULT_SOURCE_QUERY

    def set_title(self, short_name: str, name: Optional[str] = None, description: Optional[str] = None) -> "WebManifest":
        self.short_name = short_name
        self.name = name
        self.description = description
        return self

    def colors(self, theme_color: str, background_color: Optional[str] = None) -> "WebManifest":
        self.theme_color = theme_color
        if background_color:
            self.background_color = background_color
        return self

    def application(self, app_id: str, start_url: Optional[str] = None, scope: Optional[str] = None) -> "WebManifest":
        self.id = app_id
        self.start_url = start_url
        self.scope = scope
        return self

    def set_icons(self, icons: JsonList) -> "WebManifest":
        self.icons = _decode_list(icons, "icons")
        return self

    def set_shortcuts(self, shortcuts: JsonList) -> "WebManifest":
        self.shortcuts = _decode_list(shortcuts, "shortcuts")
        return self

    def set_screenshots(self, screenshots: JsonList) -> "WebManifest":
        self.screenshots = _decode_list(screenshots, "screenshots")
        return self

    def _with_source(self, value: str) -> str:
        if not self.source or value.endswith(self.source):
            return value
        return value + self.source

    def to_dict(self) -> Dict[str, Any]:
        display = Display(self.display)
        display_override = None
        if display is Display.OVERLAY_UI:
            display_override = [Display.OVERLAY_UI.value, Display.MINIMAL_UI.value]
            display = Display.STANDALONE
        manifest: Dict[str, Any] = {
            "name": self.name,
            "short_name": self.short_name or self.name,
            "description": self.description,
            "icons": list(self.icons),
            "id": self._with_source(self.id),
            "start_url": self._with_source(self.start_url or self.id),
            "scope": self.scope or self.id,
            "theme_color": self.theme_color,
            "background_color": self.background_color,
            "display_override": display_override,
            "display": display.value,
            "screenshots": list(self.screenshots),
            "shortcuts": list(self.shortcuts),
        }
        return {key: value for key, value in manifest.items() if value}

    def generate(self) -> str:
        return json.dumps(self.to_dict(), indent=4, ensure_ascii=False)


def _decode_list(value: JsonList, label: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, str):
        return list(value)
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as exc:
        logger.error("Manifest %s JSON decoding failed: %s", label, exc)
        return []
    if not isinstance(decoded, list):
        logger.error("Manifest %s must be a JSON list, got %s", label, type(decoded).__name__)
        return []
    return decoded
