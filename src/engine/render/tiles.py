"""
どこで: `engine.render.tiles`。
何を: `FrameResult` を 2D タイル（矩形 + ラベル）の描画記述へ変換する `TileLayer`。
なぜ: 2D キャンバス側は矩形を塗るだけで済むよう、寸法・不透明度・重なり順をここで確定するため。

寸法（スロット高 = unit_size）:
- ブロック高 0.85·slot、縦オフセット (slot − block)/2
- 文字サイズ max(0.45·block, 6)、左右パディング 0.3·block、幅 1.05·block、角丸 0.1·block
- 枠線 先頭のみ max(1, 0.05·block)
"""

from __future__ import annotations

from dataclasses import dataclass

from engine.core.frame import FrameResult
from engine.core.marker import z_index
from util.color import to_u8_rgba, with_alpha


@dataclass(frozen=True)
class TileMetrics:
    slot: float
    block: float
    vertical_offset: float
    font_size: float
    padding: float
    width: float
    radius: float
    head_border: float

    @classmethod
    def for_unit(cls, unit_size: float) -> "TileMetrics":
        slot = float(unit_size)
        block = slot * 0.85
        return cls(
            slot=slot,
            block=block,
            vertical_offset=(slot - block) / 2.0,
            font_size=max(block * 0.45, 6.0),
            padding=block * 0.3,
            width=block * 1.05,
            radius=block * 0.1,
            head_border=max(1.0, block * 0.05),
        )


@dataclass(frozen=True)
class Tile:
    x: float
    y: float
    width: float
    height: float
    scale: float
    color: tuple[int, int, int, int]  # RGBA 0–255（A は不透明度）
    text: str
    z_index: int
    border: float
    is_head: bool
    row_index: int


def build_tiles(frame: FrameResult) -> list[Tile]:
    """フレームをタイル列へ。戻り値は z 昇順（先頭マーカーが最後 = 最前面）。"""
    m = TileMetrics.for_unit(frame.config.unit_size)
    tiles: list[Tile] = []
    for rf in frame.rows:
        top = rf.row.index * m.slot + m.vertical_offset
        for marker in rf.markers:
            tiles.append(
                Tile(
                    x=marker.relative_position,
                    y=top,
                    width=m.width,
                    height=m.block,
                    scale=marker.scale,
                    color=to_u8_rgba(with_alpha(rf.color, marker.opacity)),
                    text=rf.label,
                    z_index=z_index(marker),
                    border=m.head_border if marker.is_head else 0.0,
                    is_head=marker.is_head,
                    row_index=rf.row.index,
                )
            )
    # 安定ソート: 同じ z の中では行/生成順を保つ
    tiles.sort(key=lambda t: t.z_index)
    return tiles


class TileLayer:
    """`RendererAdapter` 実装。直近フレームのタイル列を保持するだけ。"""

    def __init__(self) -> None:
        self._tiles: list[Tile] = []
        self._metrics: TileMetrics | None = None
        self._frames = 0

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return tuple(self._tiles)

    @property
    def metrics(self) -> TileMetrics | None:
        return self._metrics

    @property
    def frames(self) -> int:
        return self._frames

    def present(self, frame: FrameResult) -> None:
        self._metrics = TileMetrics.for_unit(frame.config.unit_size)
        self._tiles = build_tiles(frame)
        self._frames += 1


__all__ = ["Tile", "TileLayer", "TileMetrics", "build_tiles"]
