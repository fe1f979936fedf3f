"""
どこで: `engine.core.rows`。
何を: 行（先頭 1 行 + 追従行）の構築規則。
なぜ: 移動量 0 の行を構造的に作れないようにし、ゼロ除算を起こさないため。

規則:
- 行 0（先頭）は移動量 1、ラベル "1"。
- 行 i>0 は移動量 i+1、ラベル str(i+1)。
- `row_count` は追従行の数。`row_count <= 0` は空集合。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

LEADER_INDEX = 0


@dataclass(frozen=True)
class Row:
    index: int
    movement_value: int
    label: str

    @property
    def is_leader(self) -> bool:
        return self.index == LEADER_INDEX


def movement_value_for(index: int) -> int:
    return 1 if index == LEADER_INDEX else index + 1


@lru_cache(maxsize=16)
def build_rows(row_count: int) -> tuple[Row, ...]:
    """先頭 + `row_count` 本の追従行を返す（計 `row_count + 1` 行）。"""
    n = int(row_count)
    if n <= 0:
        return ()
    rows: list[Row] = []
    for i in range(n + 1):
        v = movement_value_for(i)
        rows.append(Row(index=i, movement_value=v, label=str(v)))
    return tuple(rows)


def lane_pitch(viewport_height: float, row_count: int) -> float:
    """ビューポート高さを全スロット（先頭 + 追従行）で割ったレーン間隔。"""
    return float(viewport_height) / (max(0, int(row_count)) + 1)


__all__ = ["LEADER_INDEX", "Row", "build_rows", "lane_pitch", "movement_value_for"]
