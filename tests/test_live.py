# -*- coding: utf-8 -*-
"""实时刷新 (generation 令牌) 测试"""
import asyncio
from datetime import datetime

from src.live import LiveFeed
from src.view import HeatmapView

NOON = datetime(2025, 3, 12, 12, 0)


def _feed(simulator, interval=0.01):
    return LiveFeed(simulator, HeatmapView(width=800, height=360), interval_seconds=interval, clock=lambda: NOON)


def test_tick_applies_samples_for_active_line(simulator, sample_lines):
    feed = _feed(simulator)
    line = sample_lines[1]

    async def scenario():
        generation = feed.activate(line)
        applied = await feed.tick(line, generation)
        await feed.stop()
        return applied

    assert asyncio.run(scenario()) is True
    assert [s.station_name for s in feed.view.samples] == line.station_names
    assert feed.view.stats["total"] == sum(s.passengers for s in feed.view.samples)
    assert feed.last_tick == NOON


def test_stale_generation_is_discarded(simulator, sample_lines):
    feed = _feed(simulator, interval=60)
    old_line, new_line = sample_lines[0], sample_lines[2]

    async def scenario():
        old_generation = feed.activate(old_line)
        feed.activate(new_line)
        applied = await feed.tick(old_line, old_generation)
        await feed.stop()
        return applied

    assert asyncio.run(scenario()) is False
    assert feed.view.line is new_line
    assert all(s.station_name in new_line.station_names for s in feed.view.samples)


def test_background_loop_refreshes_and_stops(simulator, sample_lines):
    feed = _feed(simulator)
    line = sample_lines[1]

    async def scenario():
        feed.activate(line)
        for _ in range(200):
            await asyncio.sleep(0.01)
            if feed.view.samples:
                break
        running = feed.running
        await feed.stop()
        return running

    assert asyncio.run(scenario()) is True
    assert feed.running is False
    assert len(feed.view.samples) == len(line.stations)


def test_switching_line_replaces_single_timer(simulator, sample_lines):
    feed = _feed(simulator, interval=60)

    async def scenario():
        feed.activate(sample_lines[0])
        first_task = feed._task
        feed.activate(sample_lines[1])
        await asyncio.sleep(0)
        cancelled = first_task.cancelled() or first_task.done()
        await feed.stop()
        return cancelled

    assert asyncio.run(scenario()) is True
    assert feed.generation == 3


def test_activate_none_clears_view(simulator, sample_lines):
    feed = _feed(simulator)

    async def scenario():
        feed.activate(sample_lines[0])
        feed.activate(None)
        running = feed.running
        await feed.stop()
        return running

    assert asyncio.run(scenario()) is False
    assert feed.view.line is None
    assert feed.view.samples == []
