"""
どこで: `engine.core.tail`。
何を: 行の先頭位置から、スタイル別の末尾マーカー列（残像）を生成する。
なぜ: 末尾の本数・不透明度・スケール・揺らぎをスタイル定数表で一元管理し、毎フレーム純粋に再計算するため。

スタイル（limit は 非折返し/折返し）:
- classic: 40/80, step 1, base 0.4, 線形減衰
- ghost:   20,    step 1, base 0.2, 線形減衰
- echo:    60,    step 1, base 0.3, k<10 で 0.25、それ以降 0.05
- stepped: 100,   step 3, base 0.4, scale=max(0.6, 1-k/limit), 線形減衰
- glitch:  30,    step 1, base 0.4, 位置に sin(k*1.5 + N*5)*4 を加算, 線形減衰

不透明度が `MIN_OPACITY` 以下のマーカーは出力しない（描画負荷の上限化）。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

from .marker import Marker
from .position import RowPosition
from .wrap import WrapResolver

logger = logging.getLogger(__name__)

MIN_OPACITY = 0.01


class TailType(str, Enum):
    CLASSIC = "classic"
    GHOST = "ghost"
    ECHO = "echo"
    STEPPED = "stepped"
    GLITCH = "glitch"

    @classmethod
    def coerce(cls, value: "TailType | str") -> "TailType":
        """文字列表記も受理する。未知の値は `ValueError`。"""
        if isinstance(value, TailType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            allowed = ", ".join(t.value for t in cls)
            raise ValueError(f"invalid tail_type: {value!r}; allowed={allowed}") from e


@dataclass(frozen=True)
class TailProfile:
    """スタイルごとの定数束。"""

    style: TailType
    limit: int
    step_size: int
    opacity_base: float

    def opacity_at(self, k: int) -> float:
        if self.style is TailType.ECHO:
            return 0.25 if k < 10 else 0.05
        return max(0.0, self.opacity_base * (1.0 - k / self.limit))

    def scale_at(self, k: int) -> float:
        if self.style is TailType.STEPPED:
            return max(0.6, 1.0 - k / self.limit)
        return 1.0

    def offset_at(self, k: int, step: float) -> float:
        if self.style is not TailType.GLITCH:
            return 0.0
        phase = k * 1.5 + step * 5.0
        # sin(inf) は ValueError
        return math.sin(phase) * 4.0 if math.isfinite(phase) else 0.0

    def indices(self):
        """k = 1, 1+step, 1+2·step, … (≤ limit)。"""
        return range(1, self.limit + 1, self.step_size)


# (limit 非折返し, limit 折返し, step, base)
_PROFILE_TABLE: dict[TailType, tuple[int, int, int, float]] = {
    TailType.CLASSIC: (40, 80, 1, 0.4),
    TailType.GHOST: (20, 20, 1, 0.2),
    TailType.ECHO: (60, 60, 1, 0.3),
    TailType.STEPPED: (100, 100, 3, 0.4),
    TailType.GLITCH: (30, 30, 1, 0.4),
}


def profile_for(tail_type: TailType | str, wrapped: bool) -> TailProfile:
    """スタイルと折返し状態から `TailProfile` を返す。未知のスタイルは classic 扱い。"""
    try:
        style = TailType.coerce(tail_type)
    except ValueError:
        logger.warning("unknown tail_type %r; falling back to classic", tail_type)
        style = TailType.CLASSIC
    limit_open, limit_wrapped, step_size, base = _PROFILE_TABLE[style]
    return TailProfile(
        style=style,
        limit=limit_wrapped if wrapped else limit_open,
        step_size=step_size,
        opacity_base=base,
    )


def generate_markers(
    position: RowPosition,
    resolver: WrapResolver,
    *,
    step: float,
    profile: TailProfile | None,
) -> tuple[Marker, ...]:
    """先頭マーカー + 末尾マーカー列を返す（先頭が常に最初）。

    `profile` は `profile_for()` で 1 フレームに 1 度解決したもの。`None` なら末尾なし。
    """
    head = position.head_displacement
    markers = [Marker(relative_position=resolver.resolve(head), is_head=True)]
    if profile is None:
        return tuple(markers)

    lap_start = resolver.lap_start(head)
    animated = position.animated_trigger_count

    for k in profile.indices():
        tail_index = animated - k
        if tail_index < 0:
            break
        disp = position.displacement_at(tail_index)
        # 前の周回から古いマーカーが滲み出さないよう打ち切る
        if resolver.wrap and disp < lap_start:
            break
        opacity = profile.opacity_at(k)
        if opacity <= MIN_OPACITY:
            continue
        x = resolver.resolve(disp) + profile.offset_at(k, step)
        markers.append(
            Marker(relative_position=x, is_head=False, opacity=opacity, scale=profile.scale_at(k))
        )
    return tuple(markers)


__all__ = ["MIN_OPACITY", "TailProfile", "TailType", "generate_markers", "profile_for"]
