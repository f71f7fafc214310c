"""Image encoding for rendered tiles."""

from .manager import DEFAULT_QUALITY, ImageEncoder

__all__ = ["DEFAULT_QUALITY", "ImageEncoder"]
