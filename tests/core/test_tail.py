from __future__ import annotations

import logging
import math

import pytest

from engine.core.position import evaluate
from engine.core.tail import (
    MIN_OPACITY,
    TailType,
    generate_markers,
    profile_for,
)
from engine.core.wrap import WrapResolver

OPEN = WrapResolver(unit_size=40.0, viewport_extent=800.0, wrap=False)
WRAPPED = WrapResolver(unit_size=40.0, viewport_extent=400.0, wrap=True)


def _markers(step, v=1, *, resolver=OPEN, tail_type="classic", tail_enabled=True):
    pos = evaluate(step, v, resolver.unit_size)
    profile = profile_for(tail_type, resolver.wrap) if tail_enabled else None
    return generate_markers(pos, resolver, step=step, profile=profile)


@pytest.mark.parametrize(
    "style, wrapped, limit, step_size, base",
    [
        ("classic", False, 40, 1, 0.4),
        ("classic", True, 80, 1, 0.4),
        ("ghost", True, 20, 1, 0.2),
        ("echo", False, 60, 1, 0.3),
        ("stepped", False, 100, 3, 0.4),
        ("glitch", True, 30, 1, 0.4),
    ],
)
def test_profile_table(style, wrapped, limit, step_size, base) -> None:
    p = profile_for(style, wrapped)
    assert (p.limit, p.step_size, p.opacity_base) == (limit, step_size, base)


def test_echo_opacity_steps_down_after_ten() -> None:
    p = profile_for(TailType.ECHO, wrapped=False)
    assert p.opacity_at(5) == 0.25
    assert p.opacity_at(9) == 0.25
    assert p.opacity_at(10) == 0.05
    assert p.opacity_at(15) == 0.05


def test_stepped_scale_has_floor() -> None:
    p = profile_for("stepped", wrapped=False)
    assert p.scale_at(1) == pytest.approx(0.99)
    assert p.scale_at(97) == 0.6
    assert list(p.indices())[:4] == [1, 4, 7, 10]


def test_tail_disabled_emits_head_only() -> None:
    markers = _markers(50.0, tail_enabled=False)
    assert len(markers) == 1
    assert markers[0].is_head


@pytest.mark.smoke
def test_head_first_then_tail() -> None:
    markers = _markers(3.0)
    assert markers[0].is_head
    assert markers[0].opacity == 1.0 and markers[0].scale == 1.0
    assert all(not m.is_head for m in markers[1:])


def test_tail_stops_before_origin() -> None:
    # animated=3 → k=1,2,3 のみ（k=4 で負）
    markers = _markers(3.0)
    assert len(markers) == 4
    xs = [m.relative_position for m in markers]
    assert xs[0] - xs[-1] == pytest.approx(3 * 40.0)


@pytest.mark.parametrize("style", [t.value for t in TailType])
@pytest.mark.parametrize("resolver", [OPEN, WRAPPED], ids=["open", "wrapped"])
def test_tail_length_bounded_by_limit(style: str, resolver: WrapResolver) -> None:
    markers = _markers(500.0, resolver=resolver, tail_type=style)
    limit = profile_for(style, resolver.wrap).limit
    assert len(markers) - 1 <= limit
    assert all(m.opacity > MIN_OPACITY for m in markers)


def test_classic_opacity_strictly_decreasing() -> None:
    tail = _markers(200.0)[1:]
    assert len(tail) > 30
    ops = [m.opacity for m in tail]
    assert all(a > b for a, b in zip(ops, ops[1:]))
    assert ops[0] == pytest.approx(0.4 * (1 - 1 / 40))


def test_stepped_tail_shrinks() -> None:
    tail = _markers(200.0, tail_type="stepped")[1:]
    assert tail[0].scale == pytest.approx(0.99)
    assert tail[1].scale == pytest.approx(0.96)
    assert min(m.scale for m in tail) >= 0.6
    # k = 1, 4, 7, ...
    assert tail[0].relative_position - tail[1].relative_position == pytest.approx(3 * 40.0)


def test_glitch_jitter_offsets_position() -> None:
    step = 10.0
    tail = _markers(step, tail_type="glitch")[1:]
    pos = evaluate(step, 1, 40.0)
    for k, m in enumerate(tail, start=1):
        base = OPEN.resolve(pos.displacement_at(pos.animated_trigger_count - k))
        assert m.relative_position == pytest.approx(base + math.sin(k * 1.5 + step * 5.0) * 4.0)


def test_wrapped_tail_cut_at_lap_start() -> None:
    # 幅 400（10 単位）。先頭 480 → 周回開始 400 → k ≤ 2 のみ
    markers = _markers(12.0, resolver=WRAPPED)
    assert len(markers) == 3
    assert markers[0].relative_position == pytest.approx(80.0)
    assert [m.relative_position for m in markers[1:]] == pytest.approx([40.0, 0.0])


def test_wrapped_positions_in_range() -> None:
    for style in ("classic", "ghost", "echo", "stepped"):
        for m in _markers(37.3, v=3, resolver=WRAPPED, tail_type=style):
            assert 0.0 <= m.relative_position < WRAPPED.quantized_width


def test_unknown_tail_type_falls_back_to_classic(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="engine.core.tail"):
        p = profile_for("sparkle", wrapped=False)
    assert p.style is TailType.CLASSIC
    assert "sparkle" in caplog.text


def test_tail_type_coerce_rejects_unknown() -> None:
    assert TailType.coerce("ECHO") is TailType.ECHO
    with pytest.raises(ValueError):
        TailType.coerce("sparkle")


def test_glitch_offset_with_overflowing_phase_is_zero() -> None:
    p = profile_for("glitch", wrapped=False)
    assert p.offset_at(1, 1e308) == 0.0
    assert p.offset_at(1, 0.0) == pytest.approx(math.sin(1.5) * 4.0)


def test_lap_start_with_overflowing_lap_count() -> None:
    tiny = WrapResolver(unit_size=0.5, viewport_extent=0.5, wrap=True)
    assert tiny.lap_start(1.7e308) == 1.7e308
    pos = evaluate(1.7e308, 1, 1.0)
    markers = generate_markers(pos, tiny, step=1.7e308, profile=profile_for("glitch", True))
    assert markers[0].is_head
    assert all(math.isfinite(m.relative_position) for m in markers)
