"""Configuration loading utilities for tiledump."""

from .loader import (
    API_KEY_ENV,
    BasemapsConfig,
    ConfigLoader,
    ConfigurationError,
    OutputConfig,
    RenderConfig,
    load_config,
    normalize_format,
)

__all__ = [
    "API_KEY_ENV",
    "BasemapsConfig",
    "ConfigLoader",
    "ConfigurationError",
    "OutputConfig",
    "RenderConfig",
    "load_config",
    "normalize_format",
]
