"""Fetch, render, correct and encode one map tile."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from tiledump.config.loader import RenderConfig
from tiledump.core.models import RenderedRaster, RenderPlan, TileCoordinate
from tiledump.encode import ImageEncoder
from tiledump.fetch import BackgroundRequestHandler, BasemapsClient
from tiledump.logging import get_logger
from tiledump.render import PrimedTileSource, RasterRenderer, RenderError, unpremultiply
from tiledump.tiling import plan_render

LOGGER = get_logger(__name__)


class TileDumpPipeline:
    """Run the fetch → render → unpremultiply → encode sequence.

    Collaborators default to ones built from ``config``; tests and embedding
    code can pass their own.
    """

    def __init__(
        self,
        config: RenderConfig,
        renderer: RasterRenderer,
        *,
        client: Optional[BasemapsClient] = None,
        background: Optional[BackgroundRequestHandler] = None,
        encoder: Optional[ImageEncoder] = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._client = client or BasemapsClient(config.basemaps)
        self._background = background or BackgroundRequestHandler(
            session=self._client.session,
            timeout=config.basemaps.timeout_seconds,
            empty_color=config.output.background_color,
        )
        self._encoder = encoder or ImageEncoder(config.output.format, quality=config.output.quality)

    def plan(self, tile: Optional[TileCoordinate] = None) -> RenderPlan:
        return plan_render(
            tile or self._config.tile,
            tile_size=self._config.tile_size,
            pixel_ratio=self._config.pixel_ratio,
        )

    def render(self, plan: RenderPlan) -> RenderedRaster:
        """Fetch inputs for ``plan`` and return the straight-alpha raster."""

        data = self._client.fetch_tile(plan.source_tile)
        style = self._client.fetch_style()
        source = PrimedTileSource({self._client.tile_url(plan.source_tile): data}, self._background)

        viewport = plan.viewport
        start = time.perf_counter()
        pixels = self._renderer.render(style, source, viewport)
        LOGGER.debug(
            "render finished",
            extra={"tile": str(plan.tile), "duration_s": f"{time.perf_counter() - start:.2f}"},
        )
        if len(pixels) != viewport.buffer_size:
            raise RenderError(
                f"renderer returned {len(pixels)} bytes, expected {viewport.buffer_size} "
                f"for a {viewport.pixel_width}x{viewport.pixel_height} RGBA raster"
            )

        raster = RenderedRaster(bytearray(pixels), viewport.pixel_width, viewport.pixel_height)
        unpremultiply(raster.data)
        return raster

    def run(self, tile: Optional[TileCoordinate] = None) -> Optional[Path]:
        """Render ``tile`` (default: the configured one) to the output file."""

        plan = self.plan(tile)
        LOGGER.info(
            "rendering tile",
            extra={"tile": str(plan.tile), "format": self._encoder.format},
        )
        raster = self.render(plan)
        destination = self._config.output.directory / f"output.{self._encoder.format}"
        return self._encoder.write(
            raster,
            destination,
            resize_to=plan.output_size if plan.downscale else None,
        )
