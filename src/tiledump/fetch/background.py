"""Resource requests issued by the rendering engine while it draws."""

from __future__ import annotations

import threading
from datetime import datetime
from email.utils import parsedate_to_datetime
from pathlib import PurePosixPath
from typing import Callable, Dict, Optional
from urllib.parse import urlsplit

import requests
from PIL import ImageColor

from tiledump.core.models import TileResponse
from tiledump.logging import get_logger

from .base import RequestKind, UpstreamError, get_checked

LOGGER = get_logger(__name__)

DEFAULT_EMPTY_COLOR = "rgba(255,255,255,0)"
EXTENSION_FORMATS = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".webp": "webp",
}
EMPTY_DATA = b""


def format_for_url(url: str) -> str:
    """Return the image format implied by the URL path, or ``""``."""

    suffix = PurePosixPath(urlsplit(url).path).suffix.lower()
    return EXTENSION_FORMATS.get(suffix, "")


def encode_solid_pixel(image_format: str, color: str) -> bytes:
    """Encode a 1x1 image filled with ``color``."""

    import pyvips

    rgba = ImageColor.getrgb(color)
    channels = 4 if len(rgba) == 4 and image_format != "jpeg" else 3
    image = pyvips.Image.new_from_memory(bytes(rgba[:channels]), 1, 1, channels, "uchar")
    return image.write_to_buffer(f".{image_format}")


class EmptyResponseCache:
    """Placeholder payloads, generated at most once per (format, color)."""

    def __init__(self, encoder: Callable[[str, str], bytes] = encode_solid_pixel) -> None:
        self._encoder = encoder
        self._cache: Dict[str, bytes] = {"": EMPTY_DATA}
        self._lock = threading.Lock()

    def get(self, image_format: str = "", color: str = "") -> bytes:
        if not image_format or image_format == "pbf":
            return self._cache[""]
        if image_format == "jpg":
            image_format = "jpeg"
        color = color or DEFAULT_EMPTY_COLOR

        key = f"{image_format},{color}"
        with self._lock:
            data = self._cache.get(key)
            if data is not None:
                return data
            try:
                data = self._encoder(image_format, color)
            except Exception as exc:
                LOGGER.warning(
                    "empty response encoding failed",
                    extra={"format": image_format, "color": color, "error": str(exc)},
                )
                return EMPTY_DATA
            self._cache[key] = data
            return data


# Shared by every handler that is not given its own cache.
SHARED_EMPTY_RESPONSES = EmptyResponseCache()


class BackgroundRequestHandler:
    """Answer renderer requests, substituting placeholders for failures."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        cache: Optional[EmptyResponseCache] = None,
        timeout: Optional[int] = 30,
        empty_color: str = "",
    ) -> None:
        self._session = session or requests.Session()
        self._cache = cache or SHARED_EMPTY_RESPONSES
        self._timeout = timeout
        self._empty_color = empty_color

    @property
    def cache(self) -> EmptyResponseCache:
        return self._cache

    def fetch(self, url: str) -> TileResponse:
        try:
            response = get_checked(
                self._session,
                url,
                kind=RequestKind.BACKGROUND,
                timeout=self._timeout,
            )
        except UpstreamError as exc:
            LOGGER.debug("background request failed; using empty response", extra={"error": str(exc)})
            return TileResponse(data=self._cache.get(format_for_url(url), self._empty_color))

        headers = response.headers
        return TileResponse(
            data=response.content,
            modified=_parse_http_date(headers.get("Last-Modified")),
            expires=_parse_http_date(headers.get("Expires")),
            etag=headers.get("ETag"),
        )


def _parse_http_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
