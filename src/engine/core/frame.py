"""
どこで: `engine.core.frame`。
何を: 1 tick 分の設定スナップショット `FrameConfig` と、純粋関数 `compute_frame()` による
      行ごとのマーカー列/色/ラベルの算出（`FrameResult`）。
なぜ: フレームを `(step_value, config)` だけから再導出できる形に保ち、増分状態によるドリフトを排除するため。

処理順:
    PositionEngine（各行）→ FocusTracker（先頭行）→ WrapResolver（各行, フォーカス基準）
    → TailGenerator（各行）→ FrameResult
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from util.color import RGBA

from .clock import sanitize_step
from .focus import focus_displacement
from .marker import Marker
from .palette import DEFAULT_PALETTE, palette_ids, row_color
from .position import RowPosition, evaluate
from .rows import Row
from .tail import TailType, generate_markers, profile_for
from .wrap import WrapResolver, effective_wrap

logger = logging.getLogger(__name__)

ROW_COUNT_MIN = 1
ROW_COUNT_MAX = 100


@dataclass(frozen=True)
class FrameConfig:
    """外部から与えられる読み取り専用の設定。

    Parameters
    ----------
    row_count : int
        追従行の数（先頭行を除く）。呼び出し側で [1, 100] に検証する。
    unit_size : float
        レーン間隔（1 トリガあたりの基本変位, > 0）。
    viewport_extent : float
        レーン方向のビューポート長（> 0）。
    wrap_enabled, follow_enabled, tail_enabled : bool
        折返し / 先頭追従 / 末尾表示。
    tail_type : str
        classic / ghost / echo / stepped / glitch。
    palette : str
        行色パレット ID。
    """

    row_count: int = 15
    unit_size: float = 40.0
    viewport_extent: float = 1280.0
    wrap_enabled: bool = True
    follow_enabled: bool = True
    tail_enabled: bool = True
    tail_type: str = TailType.CLASSIC.value
    palette: str = DEFAULT_PALETTE

    @property
    def effective_wrap(self) -> bool:
        return effective_wrap(self.wrap_enabled, self.follow_enabled)

    def with_changes(self, **changes: Any) -> "FrameConfig":
        return replace(self, **changes)

    def validate(self) -> "FrameConfig":
        """呼び出し側の入力検証。問題があれば `ValueError`、なければ self を返す。"""
        if not (ROW_COUNT_MIN <= int(self.row_count) <= ROW_COUNT_MAX):
            raise ValueError(
                f"row_count must be in [{ROW_COUNT_MIN}, {ROW_COUNT_MAX}], got {self.row_count}"
            )
        for name in ("unit_size", "viewport_extent"):
            v = float(getattr(self, name))
            if not math.isfinite(v) or v <= 0.0:
                raise ValueError(f"{name} must be > 0, got {v}")
        TailType.coerce(self.tail_type)
        if self.palette not in palette_ids():
            allowed = ", ".join(palette_ids())
            raise ValueError(f"invalid palette: {self.palette!r}; allowed={allowed}")
        return self


@dataclass(frozen=True)
class RowFrame:
    """1 行ぶんの出力（アダプタは変更しないこと）。"""

    row: Row
    markers: tuple[Marker, ...]
    color: RGBA
    label: str  # 行の表示テキスト
    head_label: str  # floor(step_value)
    position: RowPosition

    @property
    def head(self) -> Marker:
        return self.markers[0]

    @property
    def tail(self) -> tuple[Marker, ...]:
        return self.markers[1:]


@dataclass(frozen=True)
class FrameResult:
    step_value: float
    rows: tuple[RowFrame, ...]
    focus_displacement: float
    leader_integer_step: int
    config: FrameConfig = field(default_factory=FrameConfig)

    @property
    def marker_count(self) -> int:
        return sum(len(r.markers) for r in self.rows)


def _evaluate_rows(
    step: float, rows: Sequence[Row], unit: float
) -> tuple[float, list[tuple[Row, RowPosition]]]:
    focus = focus_displacement(step, unit)
    evaluated = [(row, evaluate(step, row.movement_value, unit)) for row in rows]
    return focus, evaluated


def _all_finite(focus: float, evaluated: Sequence[tuple[Row, RowPosition]]) -> bool:
    return math.isfinite(focus) and all(math.isfinite(p.head_displacement) for _, p in evaluated)


def compute_frame(step_value: float, rows: Sequence[Row], config: FrameConfig) -> FrameResult:
    """`(step_value, rows, config)` から 1 フレームを構築する純粋関数。例外は送出しない。

    変位が有限に収まらない巨大なステップ値は、非有限値と同じく 0 として扱う。
    """
    step = sanitize_step(step_value)
    unit = float(config.unit_size)

    live: list[Row] = []
    for row in rows:
        if row.movement_value <= 0:
            logger.warning("row %d has movement_value=%d; skipped", row.index, row.movement_value)
            continue
        live.append(row)

    focus, evaluated = _evaluate_rows(step, live, unit)
    if not _all_finite(focus, evaluated):
        logger.warning("displacement overflow at step %r; treated as 0", step)
        step = 0.0
        focus, evaluated = _evaluate_rows(step, live, unit)

    resolver = WrapResolver.from_flags(
        unit_size=unit,
        viewport_extent=config.viewport_extent,
        wrap_enabled=config.wrap_enabled,
        follow_enabled=config.follow_enabled,
        focus_displacement=focus,
    )
    # 未知のスタイルの警告はフレームにつき 1 回
    profile = profile_for(config.tail_type, resolver.wrap) if config.tail_enabled else None
    integer_step = int(math.floor(step))
    head_label = str(integer_step)

    out: list[RowFrame] = []
    for row, pos in evaluated:
        markers = generate_markers(pos, resolver, step=step, profile=profile)
        out.append(
            RowFrame(
                row=row,
                markers=markers,
                color=row_color(row, config.palette),
                label=row.label,
                head_label=head_label,
                position=pos,
            )
        )

    return FrameResult(
        step_value=step,
        rows=tuple(out),
        focus_displacement=focus,
        leader_integer_step=integer_step,
        config=config,
    )


__all__ = [
    "FrameConfig",
    "FrameResult",
    "RowFrame",
    "compute_frame",
    "ROW_COUNT_MIN",
    "ROW_COUNT_MAX",
]
