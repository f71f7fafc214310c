"""Upstream HTTP access for tiledump."""

from tiledump.fetch.background import (
    BackgroundRequestHandler,
    EmptyResponseCache,
    encode_solid_pixel,
    format_for_url,
)
from tiledump.fetch.base import RequestKind, UpstreamError, redact_url
from tiledump.fetch.basemaps import BasemapsClient, build_style_url, build_tile_url

__all__ = [
    "BackgroundRequestHandler",
    "BasemapsClient",
    "EmptyResponseCache",
    "RequestKind",
    "UpstreamError",
    "build_style_url",
    "build_tile_url",
    "encode_solid_pixel",
    "format_for_url",
    "redact_url",
]
