# -*- coding: utf-8 -*-
"""热力图视图测试"""
from datetime import datetime

import pytest

from src.view import HeatmapView

NOON = datetime(2025, 3, 12, 12, 0)


@pytest.fixture
def view(simulator, sample_lines):
    v = HeatmapView(width=960, height=360)
    v.set_line(sample_lines[1])
    v.apply_samples(simulator.compute_line(sample_lines[1], NOON))
    return v


def test_positions_follow_samples(view):
    assert len(view.positions) == 10
    assert view.positions[0].x == 60
    assert view.positions[0].y == 180
    assert view.positions[4].station_data.station_name == "车公庙"


def test_render_svg_contains_line_and_labels(view):
    svg = view.render_svg()
    assert svg.startswith("<svg")
    assert "#9f5fbf" in svg
    assert "车公庙" in svg


def test_set_line_resets_scroll_and_samples(view, sample_lines):
    view.resize(400, 360)
    view.interaction.on_drag_delta(-200)
    view.set_line(sample_lines[0])
    assert view.samples == []
    assert view.interaction.scroll_offset_x == 0
    assert "请选择一条线路查看热力图" in view.render_svg()


def test_resize_clamps_scroll(view):
    view.resize(400, 360)
    view.interaction.on_drag_delta(-10000)
    assert view.interaction.scroll_offset_x == 440
    view.resize(960, 360)
    assert view.interaction.scroll_offset_x == 0


def test_hover_survives_relayout(view, simulator, sample_lines):
    result = view.pointer("move", 140, 180)
    assert result.hovered.index == 1
    view.apply_samples(simulator.compute_line(sample_lines[1], NOON))
    assert view.interaction.hovered.index == 1
    assert view.interaction.hovered.station_data is view.samples[1]


def test_tooltip_payload(view):
    result = view.pointer("move", 60, 180)
    tip = view.tooltip(result, 100, 100)
    assert tip["station_name"] == "前海湾"
    assert tip["line_color"] == "#9f5fbf"
    assert (tip["left"], tip["top"]) == (120, 120)
    assert view.tooltip(view.pointer("leave"), 100, 100) is None


def test_unknown_pointer_kind(view):
    with pytest.raises(ValueError):
        view.pointer("wheel", 0, 0)
