"""Conversion between premultiplied and straight alpha RGBA buffers.

Rendering engines composite in premultiplied alpha, where every colour channel
has already been scaled by ``A / 255``. Image encoders expect straight alpha;
writing premultiplied pixels as-is leaves dark, semi-transparent fringes on
antialiased edges.

Both functions work in place on a writable byte buffer of RGBA pixels and
return the same buffer.
"""

from __future__ import annotations

import numpy as np

from tiledump.core.models import RGBA_CHANNELS

MAX_CHANNEL = 255.0


def _pixels(buffer: bytearray | memoryview) -> np.ndarray:
    if len(buffer) % RGBA_CHANNELS:
        raise ValueError(
            f"RGBA buffer length must be a multiple of {RGBA_CHANNELS}, got {len(buffer)}"
        )
    pixels = np.frombuffer(buffer, dtype=np.uint8)
    if not pixels.flags.writeable:
        raise TypeError("RGBA buffer must be writable (use a bytearray)")
    return pixels.reshape(-1, RGBA_CHANNELS)


def unpremultiply(buffer: bytearray | memoryview) -> bytearray | memoryview:
    """Divide the alpha back out of every colour channel.

    Fully transparent pixels carry no colour and are zeroed. Every other
    channel becomes ``channel / (A / 255)``, computed in double precision and
    truncated toward zero when stored. Results above 255 only arise from input
    that was never premultiplied; they saturate at 255.
    """

    pixels = _pixels(buffer)
    alpha = pixels[:, 3].astype(np.float64)
    norm = alpha / MAX_CHANNEL
    transparent = alpha == 0

    with np.errstate(divide="ignore", invalid="ignore"):
        straight = pixels[:, :3].astype(np.float64) / norm[:, np.newaxis]
    straight[transparent] = 0.0
    np.clip(straight, 0.0, MAX_CHANNEL, out=straight)
    pixels[:, :3] = straight.astype(np.uint8)
    return buffer


def premultiply(buffer: bytearray | memoryview) -> bytearray | memoryview:
    """Scale every colour channel by ``A / 255``, rounding to nearest."""

    pixels = _pixels(buffer)
    alpha = pixels[:, 3].astype(np.float64)[:, np.newaxis]
    scaled = np.rint(pixels[:, :3].astype(np.float64) * alpha / MAX_CHANNEL)
    pixels[:, :3] = scaled.astype(np.uint8)
    return buffer
