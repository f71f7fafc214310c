"""Client for the Basemaps vector tile and style endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from tiledump.config.loader import BasemapsConfig
from tiledump.core.models import TileCoordinate
from tiledump.logging import get_logger

from .base import RequestKind, UpstreamError, get_checked, redact_url

LOGGER = get_logger(__name__)

TILE_PATH_TEMPLATE = "/v1/tiles/{layer}/{crs}/{z}/{x}/{y}.pbf?api={key}"
STYLE_PATH_TEMPLATE = "/v1/tiles/{layer}/{crs}/style/{name}.json?api={key}"


def build_tile_url(config: BasemapsConfig, tile: TileCoordinate, api_key: str) -> str:
    path = TILE_PATH_TEMPLATE.format(
        layer=config.layer,
        crs=config.crs,
        z=tile.z,
        x=tile.x,
        y=tile.y,
        key=api_key,
    )
    return config.host.rstrip("/") + path


def build_style_url(config: BasemapsConfig, api_key: str) -> str:
    path = STYLE_PATH_TEMPLATE.format(
        layer=config.layer,
        crs=config.crs,
        name=config.style_name,
        key=api_key,
    )
    return config.host.rstrip("/") + path


class BasemapsClient:
    """Fetch the tile data and style document a render cannot do without.

    The API key is resolved on construction, so a missing key fails before
    any request is sent. Every failure here is a primary failure.
    """

    def __init__(
        self,
        config: BasemapsConfig,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._api_key = config.require_api_key()
        self._session = session or requests.Session()

    @property
    def session(self) -> requests.Session:
        return self._session

    def tile_url(self, tile: TileCoordinate) -> str:
        return build_tile_url(self._config, tile, self._api_key)

    def style_url(self) -> str:
        return build_style_url(self._config, self._api_key)

    def fetch_tile(self, tile: TileCoordinate) -> bytes:
        """Return the encoded vector tile bytes for ``tile``."""

        url = self.tile_url(tile)
        LOGGER.info("fetching tile data", extra={"tile": str(tile), "url": redact_url(url)})
        response = get_checked(
            self._session,
            url,
            kind=RequestKind.PRIMARY,
            timeout=self._config.timeout_seconds,
        )
        return response.content

    def fetch_style(self) -> Dict[str, Any]:
        """Return the decoded style document."""

        url = self.style_url()
        LOGGER.info("fetching style", extra={"style": self._config.style_name, "url": redact_url(url)})
        response = get_checked(
            self._session,
            url,
            kind=RequestKind.PRIMARY,
            timeout=self._config.timeout_seconds,
        )
        try:
            style = response.json()
        except ValueError as exc:
            raise UpstreamError(
                RequestKind.PRIMARY,
                url,
                status=response.status_code,
                reason=f"invalid style JSON: {exc}",
            ) from exc
        if not isinstance(style, dict):
            raise UpstreamError(
                RequestKind.PRIMARY,
                url,
                status=response.status_code,
                reason="style document is not a JSON object",
            )
        return style
