"""Single-tile render pipeline."""

from .manager import TileDumpPipeline

__all__ = ["TileDumpPipeline"]
