"""CLI entry point for tiledump."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Iterable

from tiledump.config import ConfigurationError, RenderConfig, load_config, normalize_format
from tiledump.core.models import TileCoordinate
from tiledump.fetch import UpstreamError, build_style_url, build_tile_url
from tiledump.logging import configure_logging, get_logger
from tiledump.pipeline import TileDumpPipeline
from tiledump.render import RenderError, load_renderer
from tiledump.tiling import plan_render

LOGGER = get_logger(__name__)

REDACTED_KEY = "***"


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if "=" not in stripped:
                continue
            key, value = stripped.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"')
            os.environ.setdefault(key, value)
    except OSError as exc:  # pragma: no cover - filesystem errors
        LOGGER.warning("Failed to load .env file", extra={"path": str(env_path), "error": str(exc)})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a single vector map tile to an image")
    parser.add_argument("--log-json", action="store_true", help="Emit logs in JSON format")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    subcommands = parser.add_subparsers(dest="command", required=True)

    render = subcommands.add_parser("render", help="Fetch, render and write one tile")
    render.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a configuration file (YAML or JSON); defaults are used when omitted",
    )
    render.add_argument("--z", type=int, default=None, help="Tile zoom level")
    render.add_argument("--x", type=int, default=None, help="Tile column")
    render.add_argument("--y", type=int, default=None, help="Tile row")
    render.add_argument(
        "--format",
        choices=["png", "jpeg", "jpg", "webp"],
        default=None,
        help="Output image format (default: png)",
    )
    render.add_argument(
        "--quality",
        type=int,
        default=None,
        help="Compression quality for JPEG/WEBP output",
    )
    render.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory that receives output.<format>",
    )
    render.add_argument(
        "--renderer",
        default=None,
        help="Rendering engine as 'package.module:attribute'",
    )
    render.add_argument("--tile-size", type=int, default=None, help="Output tile size in pixels")
    render.add_argument("--pixel-ratio", type=int, default=None, help="Render scale factor")
    render.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the render plan and URLs without fetching anything",
    )
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    _load_env()
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    configure_logging(level=args.log_level, json_logs=args.log_json, log_file=args.log_file)

    if args.command == "render":
        return _handle_render(args)
    parser.error("Unknown command")
    return 1


def _build_config(args: argparse.Namespace) -> RenderConfig:
    if args.config is not None:
        config_path = args.config.resolve()
        if not config_path.exists():
            raise SystemExit(f"Configuration file not found: {config_path}")
        cfg = load_config(config_path)
    else:
        cfg = RenderConfig()

    coords = (args.z, args.x, args.y)
    if any(value is not None for value in coords):
        if any(value is None for value in coords):
            raise SystemExit("--z, --x and --y must be given together")
        try:
            cfg.tile = TileCoordinate(z=args.z, x=args.x, y=args.y)
        except ValueError as exc:
            raise SystemExit(str(exc)) from exc

    if args.format is not None:
        cfg.output.format = normalize_format(args.format)
    if args.quality is not None:
        cfg.output.quality = args.quality
    if args.output_dir is not None:
        cfg.output.directory = args.output_dir
    if args.renderer is not None:
        cfg.renderer = args.renderer
    if args.tile_size is not None:
        cfg.tile_size = args.tile_size
    if args.pixel_ratio is not None:
        cfg.pixel_ratio = args.pixel_ratio
    if cfg.tile_size <= 0 or cfg.pixel_ratio <= 0:
        raise SystemExit("--tile-size and --pixel-ratio must be positive")
    return cfg


def _handle_render(args: argparse.Namespace) -> int:
    try:
        cfg = _build_config(args)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    if args.dry_run:
        return _handle_dry_run(cfg)

    if not cfg.renderer:
        raise SystemExit("No renderer configured; pass --renderer or set 'renderer' in the config file")

    try:
        renderer = load_renderer(cfg.renderer)
        pipeline = TileDumpPipeline(cfg, renderer)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        output = pipeline.run()
    except UpstreamError as exc:
        LOGGER.error("upstream request failed: %s", exc)
        return 1
    except RenderError as exc:
        LOGGER.error("render failed: %s", exc)
        return 1

    if output is None:
        return 1
    LOGGER.info("render complete", extra={"tile": str(cfg.tile), "output": str(output)})
    return 0


def _handle_dry_run(cfg: RenderConfig) -> int:
    plan = plan_render(cfg.tile, tile_size=cfg.tile_size, pixel_ratio=cfg.pixel_ratio)
    viewport = plan.viewport
    summary = {
        "tile": str(plan.tile),
        "source_tile": str(plan.source_tile),
        "zoom": viewport.zoom,
        "center": viewport.center,
        "viewport": f"{viewport.pixel_width}x{viewport.pixel_height}",
        "output_size": "x".join(str(value) for value in plan.output_size),
        "downscale": plan.downscale,
        "tile_url": build_tile_url(cfg.basemaps, plan.source_tile, REDACTED_KEY),
        "style_url": build_style_url(cfg.basemaps, REDACTED_KEY),
        "output": str(cfg.output.directory / f"output.{cfg.output.format}"),
    }
    LOGGER.info("render dry-run", extra=summary)
    print(summary)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
