"""共通フィクスチャ。

- 小さなフレーム設定（10 行, 40px 単位）
- `pyglet.clock` 互換の記録用クロック（表示なしで FrameLoop を駆動）
"""

from __future__ import annotations

from typing import Callable, Iterator

import pytest

from common import settings as settings_mod
from engine.core.frame import FrameConfig


class FakeClock:
    """`schedule_interval` / `unschedule` だけを持つ手動クロック。"""

    def __init__(self) -> None:
        self.scheduled: dict[Callable[[float], None], float] = {}
        self.unscheduled: list[Callable[[float], None]] = []

    def schedule_interval(self, fn: Callable[[float], None], interval: float) -> None:
        self.scheduled[fn] = interval

    def unschedule(self, fn: Callable[[float], None]) -> None:
        self.scheduled.pop(fn, None)
        self.unscheduled.append(fn)

    def advance(self, dt: float, times: int = 1) -> None:
        for _ in range(times):
            for fn in list(self.scheduled):
                fn(dt)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def small_config() -> FrameConfig:
    return FrameConfig(row_count=10, unit_size=40.0, viewport_extent=800.0)


@pytest.fixture()
def wrapped_config() -> FrameConfig:
    return FrameConfig(
        row_count=10, unit_size=40.0, viewport_extent=800.0, follow_enabled=False
    )


@pytest.fixture()
def reload_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[], None]]:
    """環境変数を差し替えた後に呼ぶと設定を再読込する。終了時に既定へ戻す。"""
    yield settings_mod.reload_from_env
    for key in (
        "HRM_DEFAULT_VELOCITY",
        "HRM_DEFAULT_ROW_COUNT",
        "HRM_DEFAULT_TAIL_TYPE",
        "HRM_DEFAULT_PALETTE",
        "HRM_TARGET_FPS",
        "HRM_LOG_LEVEL",
        "HRM_DEBUG_FRAMES",
    ):
        monkeypatch.delenv(key, raising=False)
    settings_mod.reload_from_env()
