"""
どこで: `engine.core.marker`。
何を: 1 フレームで描画される 1 つのマーカー（先頭 or 末尾）を表す不変データ。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Marker:
    relative_position: float  # レンダラ局所座標
    is_head: bool
    opacity: float = 1.0  # 0..1
    scale: float = 1.0  # (0, 1]


HEAD_Z_INDEX = 10
TAIL_Z_INDEX = 0


def z_index(marker: Marker) -> int:
    """先頭マーカーを最前面に描く。"""
    return HEAD_Z_INDEX if marker.is_head else TAIL_Z_INDEX


__all__ = ["Marker", "z_index", "HEAD_Z_INDEX", "TAIL_Z_INDEX"]
