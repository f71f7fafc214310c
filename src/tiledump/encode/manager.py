"""Image encoding built on libvips."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from tiledump.config.loader import normalize_format
from tiledump.core.models import RenderedRaster
from tiledump.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_QUALITY = {"jpeg": 80, "webp": 90}
# VIPS_FOREIGN_PNG_FILTER_NONE: disable adaptive row filtering
PNG_FILTER_NONE = 0x08


class ImageEncoder:
    """Turn a straight-alpha raster into a PNG, JPEG or WEBP file."""

    def __init__(self, image_format: str = "png", *, quality: Optional[int] = None) -> None:
        self._format = normalize_format(image_format)
        self._quality = quality

    @property
    def format(self) -> str:
        return self._format

    def save_options(self) -> Dict[str, Any]:
        if self._format == "png":
            return {"filter": PNG_FILTER_NONE}
        return {"Q": self._quality or DEFAULT_QUALITY[self._format]}

    def to_image(self, raster: RenderedRaster, *, resize_to: Optional[Tuple[int, int]] = None):
        """Wrap ``raster`` in a ``pyvips.Image`` ready for saving."""

        import pyvips

        image = pyvips.Image.new_from_memory(
            bytes(raster.data),
            raster.width,
            raster.height,
            raster.channels,
            "uchar",
        ).copy(interpretation="srgb")
        if resize_to is not None:
            image = _resize(image, *resize_to)
        if self._format == "jpeg":
            image = image.flatten()
        return image

    def write(
        self,
        raster: RenderedRaster,
        destination: Path,
        *,
        resize_to: Optional[Tuple[int, int]] = None,
    ) -> Optional[Path]:
        """Encode and write ``raster``; return ``None`` if that fails."""

        try:
            import pyvips
        except (ImportError, OSError) as exc:
            LOGGER.error("libvips is unavailable", extra={"error": str(exc)})
            return None

        options = self.save_options()
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            image = self.to_image(raster, resize_to=resize_to)
            image.write_to_file(str(destination), **options)
        except (OSError, pyvips.Error) as exc:
            LOGGER.error(
                "failed to write image",
                extra={"path": str(destination), "format": self._format, "error": str(exc)},
            )
            return None
        LOGGER.info(
            "wrote image",
            extra={
                "path": str(destination),
                "format": self._format,
                "size": f"{image.width}x{image.height}",
                "options": options,
            },
        )
        return destination


def _resize(image, width: int, height: int):  # type: ignore[no-untyped-def]
    hscale = width / image.width
    vscale = height / image.height
    if image.bands != 4:
        return image.resize(hscale, vscale=vscale)
    # resample in premultiplied space so transparent pixels carry no colour
    return image.premultiply().resize(hscale, vscale=vscale).unpremultiply().cast("uchar")
