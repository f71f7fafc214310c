"""Render a single vector map tile to a straight-alpha image."""

from __future__ import annotations

import importlib
from typing import Any

__all__ = [
    "BackgroundRequestHandler",
    "BasemapsClient",
    "EmptyResponseCache",
    "ImageEncoder",
    "RasterRenderer",
    "RenderConfig",
    "TileCoordinate",
    "TileDumpPipeline",
    "Viewport",
    "load_config",
    "plan_render",
    "premultiply",
    "unpremultiply",
]

_MODULE_MAP = {
    "BackgroundRequestHandler": ("tiledump.fetch", "BackgroundRequestHandler"),
    "BasemapsClient": ("tiledump.fetch", "BasemapsClient"),
    "EmptyResponseCache": ("tiledump.fetch", "EmptyResponseCache"),
    "ImageEncoder": ("tiledump.encode", "ImageEncoder"),
    "RasterRenderer": ("tiledump.render", "RasterRenderer"),
    "RenderConfig": ("tiledump.config", "RenderConfig"),
    "TileCoordinate": ("tiledump.core", "TileCoordinate"),
    "TileDumpPipeline": ("tiledump.pipeline", "TileDumpPipeline"),
    "Viewport": ("tiledump.core", "Viewport"),
    "load_config": ("tiledump.config", "load_config"),
    "plan_render": ("tiledump.tiling", "plan_render"),
    "premultiply": ("tiledump.render", "premultiply"),
    "unpremultiply": ("tiledump.render", "unpremultiply"),
}


def __getattr__(name: str) -> Any:
    if name not in _MODULE_MAP:
        raise AttributeError(f"module 'tiledump' has no attribute '{name}'")
    module_name, attr = _MODULE_MAP[name]
    module = importlib.import_module(module_name)
    return getattr(module, attr)
