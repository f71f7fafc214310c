"""Spherical mercator helpers for planning a single tile render."""

from __future__ import annotations

import math
from typing import Tuple

from tiledump.core.models import RenderPlan, TileCoordinate, Viewport
from tiledump.logging import get_logger

LOGGER = get_logger(__name__)

TILE_PIXELS = 256


def pixel_to_lonlat(px: float, py: float, zoom: int) -> Tuple[float, float]:
    """Return the lon/lat of a global pixel position at ``zoom``."""

    size = TILE_PIXELS * (1 << zoom)
    lon = px / size * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * py / size))))
    return lon, lat


def tile_center(tile: TileCoordinate) -> Tuple[float, float]:
    """Return the lon/lat at the middle of ``tile``."""

    return pixel_to_lonlat(
        (tile.x + 0.5) * TILE_PIXELS,
        (tile.y + 0.5) * TILE_PIXELS,
        tile.z,
    )


def plan_render(tile: TileCoordinate, *, tile_size: int = 128, pixel_ratio: int = 1) -> RenderPlan:
    """Work out the viewport and post-processing for ``tile``.

    The engine draws 512px tiles, so it renders one zoom level below the
    requested tile. Zoom 0 has no level below it: the viewport is doubled at
    zoom 0 and the raster is shrunk back to ``tile_size`` after rendering.
    """

    if tile_size <= 0 or pixel_ratio <= 0:
        raise ValueError("tile_size and pixel_ratio must be positive")

    render_zoom = max(0, tile.z - 1)
    width = height = tile_size
    downscale = tile.z == 0
    if downscale:
        width *= 2
        height *= 2

    viewport = Viewport(
        zoom=render_zoom,
        center=tile_center(tile),
        width=width,
        height=height,
        pixel_ratio=pixel_ratio,
    )
    plan = RenderPlan(
        tile=tile,
        source_tile=tile.parent(tile.z - render_zoom),
        viewport=viewport,
        output_size=(tile_size * pixel_ratio, tile_size * pixel_ratio),
        downscale=downscale,
    )
    LOGGER.debug(
        "render plan",
        extra={
            "tile": str(tile),
            "source_tile": str(plan.source_tile),
            "render_zoom": render_zoom,
            "center": viewport.center,
            "viewport": f"{viewport.pixel_width}x{viewport.pixel_height}",
            "downscale": downscale,
        },
    )
    return plan
