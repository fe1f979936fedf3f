from __future__ import annotations

import pytest

from engine.core.frame import FrameConfig, compute_frame
from engine.core.marker import HEAD_Z_INDEX
from engine.core.rows import build_rows
from engine.render.tiles import TileLayer, TileMetrics, build_tiles
from engine.render.types import RendererAdapter


def test_metrics_for_unit() -> None:
    m = TileMetrics.for_unit(40.0)
    assert m.block == pytest.approx(34.0)
    assert m.vertical_offset == pytest.approx(3.0)
    assert m.font_size == pytest.approx(15.3)
    assert m.padding == pytest.approx(10.2)
    assert m.width == pytest.approx(35.7)
    assert m.radius == pytest.approx(3.4)
    assert m.head_border == pytest.approx(1.7)


def test_metrics_minimums() -> None:
    m = TileMetrics.for_unit(8.0)
    assert m.font_size == 6.0
    assert m.head_border == 1.0


@pytest.mark.smoke
def test_tiles_heads_drawn_last(small_config: FrameConfig) -> None:
    frame = compute_frame(20.0, build_rows(small_config.row_count), small_config)
    tiles = build_tiles(frame)
    assert len(tiles) == frame.marker_count
    n_heads = len(frame.rows)
    assert all(t.is_head for t in tiles[-n_heads:])
    assert all(not t.is_head for t in tiles[:-n_heads])
    assert all(t.z_index == HEAD_Z_INDEX for t in tiles[-n_heads:])


def test_tile_geometry_and_color(small_config: FrameConfig) -> None:
    frame = compute_frame(20.0, build_rows(small_config.row_count), small_config)
    tiles = build_tiles(frame)
    head2 = next(t for t in tiles if t.is_head and t.row_index == 2)
    assert head2.y == pytest.approx(2 * 40.0 + 3.0)
    assert head2.text == "3"
    assert head2.color[3] == 255
    assert head2.border == pytest.approx(1.7)
    tail = next(t for t in tiles if not t.is_head and t.row_index == 0)
    assert tail.border == 0.0
    assert tail.color[3] == round(0.4 * (1 - 1 / 40) * 255)


def test_tile_layer_is_adapter(small_config: FrameConfig) -> None:
    layer = TileLayer()
    assert isinstance(layer, RendererAdapter)
    assert layer.metrics is None
    layer.present(compute_frame(1.0, build_rows(3), small_config))
    assert layer.frames == 1
    assert layer.metrics == TileMetrics.for_unit(40.0)
    assert len(layer.tiles) > 0
