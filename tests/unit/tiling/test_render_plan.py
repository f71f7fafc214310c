import pytest

from tiledump.core.models import TileCoordinate
from tiledump.tiling import pixel_to_lonlat, plan_render, tile_center


def test_zoom_zero_renders_doubled_viewport_and_downscales() -> None:
    plan = plan_render(TileCoordinate(z=0, x=0, y=0))

    assert plan.viewport.zoom == 0
    assert (plan.viewport.width, plan.viewport.height) == (256, 256)
    assert plan.viewport.buffer_size == 256 * 256 * 4
    assert plan.downscale is True
    assert plan.output_size == (128, 128)
    assert plan.source_tile == TileCoordinate(z=0, x=0, y=0)
    assert plan.viewport.center == pytest.approx((0.0, 0.0), abs=1e-9)


def test_regular_tile_renders_one_level_up() -> None:
    plan = plan_render(TileCoordinate(z=13, x=8071, y=5128))

    assert plan.viewport.zoom == 12
    assert (plan.viewport.width, plan.viewport.height) == (128, 128)
    assert plan.downscale is False
    assert plan.output_size == (128, 128)
    assert plan.source_tile == TileCoordinate(z=12, x=4035, y=2564)
    assert plan.viewport.bearing == 0.0
    assert plan.viewport.pitch == 0.0


def test_pixel_ratio_scales_buffer_and_output() -> None:
    plan = plan_render(TileCoordinate(z=3, x=1, y=2), tile_size=256, pixel_ratio=2)

    assert (plan.viewport.pixel_width, plan.viewport.pixel_height) == (512, 512)
    assert plan.viewport.buffer_size == 512 * 512 * 4
    assert plan.output_size == (512, 512)


def test_tile_center_matches_spherical_mercator() -> None:
    lon, lat = tile_center(TileCoordinate(z=1, x=0, y=0))

    assert lon == pytest.approx(-90.0)
    assert lat == pytest.approx(66.51326, abs=1e-4)


def test_pixel_to_lonlat_edges() -> None:
    assert pixel_to_lonlat(0, 256, 1) == pytest.approx((-180.0, 0.0), abs=1e-9)
    assert pixel_to_lonlat(512, 256, 1)[0] == pytest.approx(180.0)


def test_tile_center_is_inside_new_zealand_for_default_tile() -> None:
    lon, lat = tile_center(TileCoordinate(z=13, x=8071, y=5128))

    assert 174.0 < lon < 175.5
    assert -42.0 < lat < -40.5


@pytest.mark.parametrize("z,x,y", [(-1, 0, 0), (0, 1, 0), (2, 0, 4), (3, -1, 0)])
def test_out_of_range_coordinates_are_rejected(z: int, x: int, y: int) -> None:
    with pytest.raises(ValueError):
        TileCoordinate(z=z, x=x, y=y)


def test_parent_walks_up_the_pyramid() -> None:
    tile = TileCoordinate(z=13, x=8071, y=5128)

    assert tile.parent() == TileCoordinate(z=12, x=4035, y=2564)
    assert tile.parent(13) == TileCoordinate(z=0, x=0, y=0)
    with pytest.raises(ValueError):
        tile.parent(14)


def test_non_positive_tile_size_is_rejected() -> None:
    with pytest.raises(ValueError):
        plan_render(TileCoordinate(z=1, x=0, y=0), tile_size=0)
