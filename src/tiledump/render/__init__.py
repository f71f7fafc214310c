"""Rendering engine interfaces and raster post-processing."""

from .alpha import premultiply, unpremultiply
from .base import PrimedTileSource, RasterRenderer, RenderError, TileSource
from .loader import load_renderer

__all__ = [
    "PrimedTileSource",
    "RasterRenderer",
    "RenderError",
    "TileSource",
    "load_renderer",
    "premultiply",
    "unpremultiply",
]
