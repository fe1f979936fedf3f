"""
どこで: `engine.render` 型定義。
何を: コアが毎 tick 生成する `FrameResult` を受け取るアダプタ契約 `RendererAdapter`。
なぜ: 2D/3D バックエンドが同じ出力を同じ形で消費し、式を個別に再導出しないため。

契約:
- `present(frame)` は 1 tick に 1 回、同期的に呼ばれる。
- アダプタは `frame` を変更してはならない（不変データクラス/タプルで提供）。
- `is_head` のマーカーは最前面（描画順/深度の優先）で扱う。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from engine.core.frame import FrameResult
from util.color import RGBA


@runtime_checkable
class RendererAdapter(Protocol):
    """1 フレームぶんの出力を受け取る描画バックエンド。"""

    def present(self, frame: FrameResult) -> None: ...


__all__ = ["RendererAdapter", "RGBA"]
