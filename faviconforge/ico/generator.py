from __future__ import annotations

import logging
import os
import stat
import sys
import tempfile
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, List, Optional, Sequence, Tuple, Union

from ..diagnostics import NULL_DIAGNOSTICS, DiagnosticEvent, DiagnosticsSink
from .container import build_icon
from .encoding import encode_layer_at
from .errors import BackendUnavailable, IcoError, NoLayers, WriteFailed
from .types import EncodedLayer, Raster

if TYPE_CHECKING:
    from ..rendering.renderer import RasterInput, RasterSource

CONTENT_TYPE = "image/x-icon"
DEFAULT_SIZES: Tuple[Tuple[int, int], ...] = ((16, 16), (24, 24), (32, 32))

Size = Tuple[int, int]
SizeSpec = Union[int, Sequence[int], Sequence[Union[int, Sequence[int]]]]


def normalize_sizes(sizes: Optional[SizeSpec], raster: Optional[Raster] = None) -> List[Size]:
    """Turn the accepted size shapes into a list of (width, height) pairs.

    ``None`` means the default sizes, an empty sequence means the raster's own
    dimensions and a bare int ``n`` means ``(n, n)``. Only a tuple of two ints
    is read as a single ``(w, h)`` size; a list of ints is always a list of
    squares, so ``[16, 32]`` gives two layers.
    """
    if sizes is None:
        return list(DEFAULT_SIZES)
    if isinstance(sizes, int):
        return [(sizes, sizes)]
    if isinstance(sizes, tuple) and len(sizes) == 2 and all(isinstance(value, int) for value in sizes):
        return [(sizes[0], sizes[1])]
    sizes = list(sizes)
    if not sizes:
        if raster is None:
            return []
        return [raster.size]
    out: List[Size] = []
    for size in sizes:
        if isinstance(size, int):
            out.append((size, size))
        else:
            width, height = size
            out.append((int(width), int(height)))
    return out


class IcoFileGenerator:
    """Collects encoded layers and writes them out as a single ``.ico`` file.

    Every public method returns a success flag instead of raising; failures go
    to the diagnostics sink.
    """

    def __init__(
        self,
        source: Optional[RasterInput] = None,
        sizes: Optional[SizeSpec] = DEFAULT_SIZES,
        *,
        source_adapter: Optional[RasterSource] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
    ) -> None:
        if source_adapter is None:
            from ..rendering.renderer import PillowRasterSource

            source_adapter = PillowRasterSource()
        self._source = source_adapter
        self._diagnostics = diagnostics or NULL_DIAGNOSTICS
        self._layers: List[EncodedLayer] = []
        self._ready = bool(source_adapter.available)
        if not self._ready:
            self._report(
                BackendUnavailable("A raster backend with PNG support is required to generate .ico files"),
                "No .ico data can be generated",
                backend=type(source_adapter).__name__,
            )
        if source is not None:
            self.add(source, sizes)

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def layers(self) -> Tuple[EncodedLayer, ...]:
        return tuple(self._layers)

    def __len__(self) -> int:
        return len(self._layers)

    def reset(self) -> None:
        self._layers = []

    def add(self, source: RasterInput, sizes: Optional[SizeSpec] = DEFAULT_SIZES) -> bool:
        """Resample ``source`` to each size and append one layer per size.

        Can be called repeatedly, e.g. a crisp small image for 16x16 and a
        detailed one for 256x256. ``sizes`` is a list of ``(w, h)`` pairs or
        ints; a bare ``(w, h)`` tuple is one size while ``[16, 32]`` is two
        squares. Sizes above 256 are skipped and reported. Returns True if at
        least one layer was added.
        """
        if not self._ready:
            return False
        try:
            raster = self._source.resolve(source)
        except IcoError as exc:
            self._report(exc, "Unable to read icon source", source=_describe(source))
            return False
        try:
            targets = normalize_sizes(sizes, raster)
        except (TypeError, ValueError) as exc:
            self._report(exc, "Invalid icon sizes", source=_describe(source), sizes=repr(sizes))
            return False
        added = 0
        for width, height in targets:
            try:
                layer = encode_layer_at(self._source, raster, width, height)
            except (IcoError, ValueError) as exc:
                self._report(exc, "Skipped icon size", source=_describe(source), size=f"{width}x{height}")
                continue
            self._layers.append(layer)
            added += 1
        return added > 0

    def data(self) -> Optional[bytes]:
        """Return the complete icon file, or None when nothing was added."""
        try:
            return build_icon(self._layers)
        except NoLayers as exc:
            self._report(exc, "No icon layers have been added")
            return None

    def save(self, path: Union[str, Path]) -> bool:
        """Write the icon file to ``path``, creating parent directories first."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._report(WriteFailed(str(exc)), "Unable to create icon directory", path=str(path.parent))
            return False
        if not self._ready:
            return False
        data = self.data()
        if data is None:
            return False
        try:
            _write_atomic(path, data)
        except OSError as exc:
            self._report(WriteFailed(str(exc)), "Unable to write icon file", path=str(path))
            return False
        return True

    def render(self, stream: Optional[IO[bytes]] = None) -> bool:
        """Emit the icon as a CGI-style response: content type header, blank line, body."""
        if not self._ready:
            return False
        data = self.data()
        if data is None:
            return False
        if stream is None:
            stream = sys.stdout.buffer
        try:
            stream.write(f"Content-Type: {CONTENT_TYPE}\r\n".encode("ascii"))
            stream.write(f"Content-Length: {len(data)}\r\n\r\n".encode("ascii"))
            stream.write(data)
            stream.flush()
        except (OSError, ValueError) as exc:
            self._report(WriteFailed(str(exc)), "Unable to stream icon data")
            return False
        return True

    def _report(self, error: Exception, message: str, **context: Any) -> None:
        context.setdefault("error", str(error))
        context["kind"] = type(error).__name__
        self._diagnostics.report(DiagnosticEvent(message, context, logging.ERROR))


def _file_mode(path: Path) -> int:
    """Mode a plain ``open(path, "wb")`` would leave: the existing one, else 0666 less the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _write_atomic(path: Path, data: bytes) -> None:
    mode = _file_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        # mkstemp creates the file owner-only.
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


def _describe(source: Any) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    if isinstance(source, Raster):
        return f"Raster({source.width}x{source.height})"
    return type(source).__name__
