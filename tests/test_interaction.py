# -*- coding: utf-8 -*-
"""指针/触摸交互状态机测试"""
from types import SimpleNamespace

import pytest

from src.interaction import (
    InteractionState,
    PointerInteractionResolver,
    hit_test,
    place_tooltip,
)
from src.layout import HeatmapLayoutEngine, StationPosition


def _station(name):
    return SimpleNamespace(station_name=name, passengers=100)


@pytest.fixture
def resolver():
    """30 个站点, 画布宽 800 → 最大滚动 1640"""
    engine = HeatmapLayoutEngine()
    stations = [_station(f"站{i}") for i in range(30)]
    redraws = []

    def relayout():
        redraws.append(r.scroll_offset_x)
        r.positions = engine.layout(stations, r.scroll_offset_x, 800, 360)

    r = PointerInteractionResolver(engine, on_change=relayout)
    r.set_content(len(stations), 800)
    r.positions = engine.layout(stations, 0, 800, 360)
    r.redraws = redraws
    return r


def test_hit_test_within_radius():
    station = StationPosition(x=120, y=200, station_data=_station("A"))
    assert hit_test(125, 203, [station], radius=10) is station
    assert hit_test(131, 200, [station], radius=10) is None


def test_hit_test_first_match_wins():
    a = StationPosition(x=100, y=100, station_data=_station("A"), index=0)
    b = StationPosition(x=105, y=100, station_data=_station("B"), index=1)
    assert hit_test(103, 100, [a, b], radius=10) is a


def test_hover_shows_and_hides(resolver):
    result = resolver.pointer_move(62, 181)
    assert result.state == InteractionState.HOVERING
    assert result.tooltip_visible
    assert result.hovered.station_data.station_name == "站0"

    result = resolver.pointer_move(100, 300)
    assert result.state == InteractionState.IDLE
    assert result.hovered is None


def test_drag_pans_by_inverse_delta_and_redraws(resolver):
    result = resolver.pointer_down(400, 300)
    assert result.state == InteractionState.DRAGGING
    assert not result.tooltip_visible

    resolver.pointer_move(300, 300)
    assert resolver.scroll_offset_x == 100
    resolver.pointer_move(250, 290)
    assert resolver.scroll_offset_x == 150
    assert resolver.positions[0].x == 60 - 150
    assert resolver.redraws[-1] == 150

    assert resolver.pointer_up(250, 290).state == InteractionState.IDLE


def test_drag_is_clamped(resolver):
    resolver.pointer_down(400, 300)
    resolver.pointer_move(900, 300)
    assert resolver.scroll_offset_x == 0
    resolver.pointer_move(-5000, 300)
    assert resolver.scroll_offset_x == 1640


def test_on_drag_delta(resolver):
    assert resolver.on_drag_delta(-300) == 300
    assert resolver.on_drag_delta(1000) == 0


def test_pointer_leave_ends_drag(resolver):
    resolver.pointer_down(400, 300)
    assert resolver.pointer_leave().state == InteractionState.IDLE
    resolver.pointer_move(100, 300)
    assert resolver.scroll_offset_x == 0


def test_click_on_station(resolver):
    resolver.pointer_move(140, 180)
    resolver.pointer_down(140, 180)
    result = resolver.pointer_up(140, 180)
    assert result.clicked.station_data.station_name == "站1"
    assert result.state == InteractionState.IDLE
    assert not result.tooltip_visible


def test_touch_miss_starts_drag_instead_of_tooltip(resolver):
    result = resolver.touch_start(400, 300)
    assert result.state == InteractionState.DRAGGING
    assert result.hovered is None
    resolver.touch_move(350, 300)
    assert resolver.scroll_offset_x == 50
    assert resolver.touch_end().state == InteractionState.IDLE


def test_touch_hit_shows_tooltip(resolver):
    result = resolver.touch_start(220, 180)
    assert result.tooltip_visible
    assert result.hovered.station_data.station_name == "站2"


def test_mouse_and_touch_parity(resolver):
    mouse = [resolver.pointer_down(400, 300).state, resolver.pointer_move(380, 300).state]
    offset_mouse = resolver.scroll_offset_x
    resolver.pointer_up()
    resolver.on_drag_delta(offset_mouse)
    touch = [resolver.touch_start(400, 300).state, resolver.touch_move(380, 300).state]
    assert mouse == touch
    assert resolver.scroll_offset_x == offset_mouse


def test_set_content_reclamps_offset(resolver):
    resolver.on_drag_delta(-1000)
    resolver.set_content(5, 800)
    assert resolver.scroll_offset_x == 0


@pytest.mark.parametrize(
    "pointer,expected",
    [
        ((100, 100), (120, 120)),
        ((950, 100), (735, 120)),
        ((100, 750), (120, 625)),
        ((100, 0), (120, 20)),
        ((100, 60), (120, 80)),
    ],
)
def test_tooltip_placement(pointer, expected):
    assert place_tooltip(*pointer, 200, 110, 1024, 768) == expected


def test_tooltip_never_above_viewport_top():
    assert place_tooltip(100, 50, 200, 110, 1024, 120)[1] == 10
