"""Core data models for tiledump."""

from .models import (
    RGBA_CHANNELS,
    RenderedRaster,
    RenderPlan,
    TileCoordinate,
    TileResponse,
    Viewport,
)

__all__ = [
    "RGBA_CHANNELS",
    "RenderedRaster",
    "RenderPlan",
    "TileCoordinate",
    "TileResponse",
    "Viewport",
]
