from .bundle import BundleSettings, FaviconBundle, HeadDocument
from .diagnostics import DiagnosticEvent, DiagnosticsSink, LoggingDiagnostics
from .ico import IcoFileGenerator, Raster
from .manifest import Display, WebManifest

__version__ = "0.1.0"

__all__ = [
    "BundleSettings",
    "DiagnosticEvent",
    "DiagnosticsSink",
    "Display",
    "FaviconBundle",
    "HeadDocument",
    "IcoFileGenerator",
    "LoggingDiagnostics",
    "Raster",
    "WebManifest",
]
