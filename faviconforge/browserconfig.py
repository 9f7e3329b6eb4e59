from __future__ import annotations

import logging
import re
from typing import Dict, Optional
from xml.dom import minidom

logger = logging.getLogger(__name__)

_ELEMENT_NAME_RE = re.compile(r"^[A-Za-z_][\w.-]*$")


class BrowserConfig:
    """Builds ``browserconfig.xml`` for Windows tiles.

    ``icons`` maps element names (``square70x70logo``) to image paths, which
    are resolved against ``directory``.
    """

    def __init__(
        self,
        tile_color: Optional[str] = None,
        icons: Optional[Dict[str, str]] = None,
        directory: str = "/",
    ) -> None:
        self.tile_color = tile_color
        self.icons = dict(icons or {})
        self.directory = directory if directory.endswith("/") else directory + "/"

    def document(self) -> minidom.Document:
        doc = minidom.Document()
        browserconfig = doc.createElement("browserconfig")
        application = doc.createElement("msapplication")
        tile = doc.createElement("tile")
        if self.tile_color:
            color = doc.createElement("TileColor")
            color.appendChild(doc.createTextNode(self.tile_color))
            tile.appendChild(color)
        for local_name, icon_path in self.icons.items():
            if not _ELEMENT_NAME_RE.match(local_name):
                logger.error("Unable to create %s element: invalid XML name", local_name)
                continue
            icon = doc.createElement(local_name)
            icon.setAttribute("src", self.directory + icon_path.lstrip("/"))
            tile.appendChild(icon)
        application.appendChild(tile)
        browserconfig.appendChild(application)
        doc.appendChild(browserconfig)
        return doc

    def xml(self, pretty: bool = True) -> str:
        doc = self.document()
        if pretty:
            return doc.toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8").strip()
        return doc.toxml(encoding="UTF-8").decode("utf-8")

    def __str__(self) -> str:
        return self.xml()
