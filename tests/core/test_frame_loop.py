from __future__ import annotations

import pytest

from engine.core.frame_loop import FrameLoop


@pytest.mark.smoke
def test_start_schedules_and_ticks(fake_clock) -> None:
    calls: list[float] = []
    loop = FrameLoop(calls.append, fps=50, clock_mod=fake_clock)
    assert not loop.running
    loop.start()
    assert loop.running
    assert list(fake_clock.scheduled.values()) == [pytest.approx(0.02)]
    fake_clock.advance(0.02, times=3)
    assert calls == [0.02, 0.02, 0.02]
    assert loop.ticks == 3


def test_start_is_idempotent(fake_clock) -> None:
    loop = FrameLoop(lambda dt: None, clock_mod=fake_clock)
    loop.start()
    loop.start()
    assert len(fake_clock.scheduled) == 1


def test_stop_unschedules_and_ignores_stale_calls(fake_clock) -> None:
    calls: list[float] = []
    loop = FrameLoop(calls.append, clock_mod=fake_clock)
    loop.start()
    (pending,) = list(fake_clock.scheduled)
    loop.stop()
    assert not loop.running
    assert fake_clock.scheduled == {}
    # 停止前にキュー済みだった呼び出し
    pending(0.016)
    assert calls == []
    loop.stop()
    assert len(fake_clock.unscheduled) == 1


def test_callback_error_stops_loop(fake_clock) -> None:
    def boom(_dt: float) -> None:
        raise RuntimeError("boom")

    loop = FrameLoop(boom, clock_mod=fake_clock)
    loop.start()
    with pytest.raises(RuntimeError):
        fake_clock.advance(0.016)
    assert not loop.running
    assert fake_clock.scheduled == {}
    assert loop.ticks == 0


def test_callback_is_not_reentrant(fake_clock) -> None:
    calls: list[float] = []
    loop: FrameLoop

    def reenter(dt: float) -> None:
        calls.append(dt)
        loop._on_tick(dt)

    loop = FrameLoop(reenter, clock_mod=fake_clock)
    loop.start()
    fake_clock.advance(0.01)
    assert calls == [0.01]


@pytest.mark.parametrize("fps", [0, -5])
def test_invalid_fps(fps: int) -> None:
    with pytest.raises(ValueError):
        FrameLoop(lambda dt: None, fps=fps)
