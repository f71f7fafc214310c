"""Dataclasses describing core tiledump entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

RGBA_CHANNELS = 4


@dataclass(frozen=True)
class TileCoordinate:
    """Address of a tile in the standard XYZ web-map pyramid."""

    z: int
    x: int
    y: int

    def __post_init__(self) -> None:
        if self.z < 0:
            raise ValueError(f"zoom level must be non-negative, got {self.z}")
        limit = 1 << self.z
        if not (0 <= self.x < limit and 0 <= self.y < limit):
            raise ValueError(
                f"tile {self.x}/{self.y} is outside the zoom {self.z} grid [0, {limit})"
            )

    def parent(self, levels: int = 1) -> "TileCoordinate":
        """Return the ancestor tile ``levels`` zoom levels up."""

        if levels < 0 or levels > self.z:
            raise ValueError(f"cannot go up {levels} levels from zoom {self.z}")
        return TileCoordinate(z=self.z - levels, x=self.x >> levels, y=self.y >> levels)

    def __str__(self) -> str:
        return f"{self.z}/{self.x}/{self.y}"


@dataclass(frozen=True)
class Viewport:
    """Virtual camera handed to the rendering engine."""

    zoom: float
    center: Tuple[float, float]
    width: int
    height: int
    bearing: float = 0.0
    pitch: float = 0.0
    pixel_ratio: int = 1

    @property
    def pixel_width(self) -> int:
        return self.width * self.pixel_ratio

    @property
    def pixel_height(self) -> int:
        return self.height * self.pixel_ratio

    @property
    def buffer_size(self) -> int:
        return self.pixel_width * self.pixel_height * RGBA_CHANNELS


@dataclass
class RenderedRaster:
    """Raw RGBA pixels, row-major, 8 bits per channel."""

    data: bytearray
    width: int
    height: int
    channels: int = RGBA_CHANNELS

    def __post_init__(self) -> None:
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"raster buffer holds {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height}x{self.channels}"
            )


@dataclass
class TileResponse:
    """Resource handed back to the renderer for one of its requests."""

    data: bytes = b""
    modified: Optional[datetime] = None
    expires: Optional[datetime] = None
    etag: Optional[str] = None


@dataclass(frozen=True)
class RenderPlan:
    """Everything needed to render and size one output tile."""

    tile: TileCoordinate
    source_tile: TileCoordinate
    viewport: Viewport
    output_size: Tuple[int, int]
    downscale: bool = False
