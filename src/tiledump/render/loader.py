"""Resolve a rendering engine from a ``module:attribute`` reference."""

from __future__ import annotations

import importlib
import inspect

from tiledump.config.loader import ConfigurationError
from tiledump.logging import get_logger

from .base import RasterRenderer

LOGGER = get_logger(__name__)


def load_renderer(reference: str) -> RasterRenderer:
    """Import ``reference`` and return a renderer instance.

    Classes and other factories are called without arguments; anything else
    is used as-is. The result must provide a ``render`` method.
    """

    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Renderer reference must look like 'package.module:attribute', got {reference!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import renderer module {module_name!r}: {exc}") from exc

    target = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigurationError(f"Renderer {reference!r} not found") from exc

    renderer = target() if inspect.isclass(target) or _is_factory(target) else target
    if not callable(getattr(renderer, "render", None)):
        raise ConfigurationError(f"Renderer {reference!r} has no render() method")
    LOGGER.debug("loaded renderer", extra={"renderer": reference})
    return renderer


def _is_factory(target: object) -> bool:
    return callable(target) and not hasattr(target, "render")
