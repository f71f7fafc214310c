"""Configuration management with YAML and JSON support."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tiledump.core.models import TileCoordinate

API_KEY_ENV = "BASEMAPS_API_KEY"
DEFAULT_HOST = "https://tiles.basemaps.linz.govt.nz"
DEFAULT_TILE = TileCoordinate(z=13, x=8071, y=5128)

FORMAT_ALIASES = {"png": "png", "jpeg": "jpeg", "jpg": "jpeg", "webp": "webp"}


class ConfigurationError(RuntimeError):
    """Raised when settings are missing or invalid."""


def normalize_format(value: str) -> str:
    """Return the canonical output format name for ``value``."""

    fmt = FORMAT_ALIASES.get(value.strip().lower())
    if fmt is None:
        raise ConfigurationError(
            f"Unsupported output format: {value} (expected one of png, jpeg, webp)"
        )
    return fmt


@dataclass
class BasemapsConfig:
    """Upstream tile and style service settings."""

    host: str = DEFAULT_HOST
    layer: str = "topographic"
    crs: str = "EPSG:3857"
    style_name: str = "topographic"
    api_key: Optional[str] = None
    timeout_seconds: Optional[int] = 30

    def require_api_key(self) -> str:
        """Return the API key, preferring ``$BASEMAPS_API_KEY``."""

        key = os.getenv(API_KEY_ENV) or self.api_key
        if not key:
            raise ConfigurationError(f"Missing environment variable ${API_KEY_ENV}")
        return key


@dataclass
class OutputConfig:
    """Where and how the rendered tile is written."""

    format: str = "png"
    quality: Optional[int] = None
    directory: Path = Path(".")
    background_color: str = ""


@dataclass
class RenderConfig:
    """Top-level configuration object for a tiledump run."""

    tile: TileCoordinate = DEFAULT_TILE
    tile_size: int = 128
    pixel_ratio: int = 1
    renderer: Optional[str] = None
    basemaps: BasemapsConfig = field(default_factory=BasemapsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def resolve_relative_paths(self, base_dir: Path) -> None:
        """Resolve relative directories against the provided base directory."""

        if not self.output.directory.is_absolute():
            self.output.directory = base_dir / self.output.directory


class ConfigLoader:
    """Load run configuration files in YAML or JSON format."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = base_dir or Path.cwd()

    def load(self, path: Path | str) -> RenderConfig:
        """Parse a configuration file and return a populated dataclass."""

        config_path = self._resolve_path(Path(path))
        payload = self._load_payload(config_path)
        config = self._build_config(payload)
        config.resolve_relative_paths(config_path.parent)
        return config

    def _resolve_path(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return (self._base_dir / path).resolve()

    def _load_payload(self, path: Path) -> Dict[str, Any]:
        suffix = path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            with path.open("r", encoding="utf-8") as handle:
                payload = yaml.safe_load(handle) or {}
        elif suffix == ".json":
            with path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle) or {}
        else:
            raise ConfigurationError(f"Unsupported configuration format: {suffix}")
        if not isinstance(payload, dict):
            raise ConfigurationError("configuration root must be a mapping")
        return payload

    def _build_config(self, payload: Dict[str, Any]) -> RenderConfig:
        tile_payload = _section(payload, "tile")
        tile = DEFAULT_TILE
        if tile_payload:
            try:
                tile = TileCoordinate(
                    z=_as_int(tile_payload["z"], "tile.z"),
                    x=_as_int(tile_payload["x"], "tile.x"),
                    y=_as_int(tile_payload["y"], "tile.y"),
                )
            except KeyError as exc:
                raise ConfigurationError(f"tile section is missing {exc.args[0]!r}") from exc
            except ValueError as exc:
                raise ConfigurationError(f"invalid tile: {exc}") from exc

        basemaps_data = dict(_section(payload, "basemaps"))
        if basemaps_data.get("timeout_seconds") is not None:
            basemaps_data["timeout_seconds"] = _as_int(basemaps_data["timeout_seconds"], "basemaps.timeout_seconds")
        try:
            basemaps = BasemapsConfig(**basemaps_data)
        except TypeError as exc:
            raise ConfigurationError(f"invalid basemaps section: {exc}") from exc

        output_data = dict(_section(payload, "output"))
        if "format" in output_data:
            output_data["format"] = normalize_format(str(output_data["format"]))
        if output_data.get("quality") is not None:
            output_data["quality"] = _as_int(output_data["quality"], "output.quality")
        if "directory" in output_data:
            output_data["directory"] = Path(output_data["directory"])
        try:
            output = OutputConfig(**output_data)
        except TypeError as exc:
            raise ConfigurationError(f"invalid output section: {exc}") from exc

        return RenderConfig(
            tile=tile,
            tile_size=_as_int(payload.get("tile_size", 128), "tile_size"),
            pixel_ratio=_as_int(payload.get("pixel_ratio", 1), "pixel_ratio"),
            renderer=payload.get("renderer"),
            basemaps=basemaps,
            output=output,
        )


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _section(payload: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = payload.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{name} section must be a mapping")
    return section


def load_config(path: Path | str, *, base_dir: Optional[Path] = None) -> RenderConfig:
    """Convenience wrapper around :class:`ConfigLoader`."""

    loader = ConfigLoader(base_dir=base_dir)
    return loader.load(path)
