"""
どこで: `engine.core.tickable`。
何を: ランナーが毎フレーム呼ぶ `tick(dt)` の契約。
なぜ: Controller と任意の追加コンポーネント（HUD 更新やログ採取など）を同じ順序規則で駆動するため。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Tickable(Protocol):
    def tick(self, dt: float) -> None:
        """`dt`[秒] の経過を反映する。呼び出しは `api.runner.start_loop` の登録順。"""


__all__ = ["Tickable"]
