"""Tile addressing and viewport planning."""

from .mercator import TILE_PIXELS, pixel_to_lonlat, plan_render, tile_center

__all__ = ["TILE_PIXELS", "pixel_to_lonlat", "plan_render", "tile_center"]
