"""Protocol definitions for the external rendering engine."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Protocol, Union
from urllib.parse import urlsplit, urlunsplit

from tiledump.core.models import TileResponse, Viewport
from tiledump.fetch.background import BackgroundRequestHandler

RasterBytes = Union[bytes, bytearray, memoryview]


class RenderError(RuntimeError):
    """Raised when the engine returns an unusable raster."""


class TileSource(Protocol):
    """Resolve a resource the engine asks for while rendering."""

    def request(self, url: str) -> TileResponse:
        """Return the resource at ``url``; never raise for upstream failures."""


class RasterRenderer(Protocol):
    """Interface for map rendering engines.

    Implementations draw ``style`` for ``viewport`` and pull tiles, glyphs and
    sprites through ``source``. The result is a premultiplied RGBA buffer of
    ``viewport.buffer_size`` bytes.
    """

    def render(
        self,
        style: Dict[str, Any],
        source: TileSource,
        viewport: Viewport,
    ) -> RasterBytes:
        """Return the rendered premultiplied RGBA pixels."""


def _strip_query(url: str) -> str:
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class PrimedTileSource:
    """Serve already fetched tiles, deferring everything else upstream."""

    def __init__(
        self,
        primed: Mapping[str, bytes],
        background: BackgroundRequestHandler,
    ) -> None:
        self._primed = {_strip_query(url): data for url, data in primed.items()}
        self._background = background

    def request(self, url: str) -> TileResponse:
        data: Optional[bytes] = self._primed.get(_strip_query(url))
        if data is not None:
            return TileResponse(data=data)
        return self._background.fetch(url)
