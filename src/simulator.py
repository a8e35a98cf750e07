# -*- coding: utf-8 -*-
"""
深圳地铁实时客流模拟
====================
Synthesizes a plausible, temporally consistent passenger count per station.

Formula:
    P(s, t) = round( BASE × τ(t) × π(i) × κ(s) × ε(s, d) × λ(line) ) × jitter

    Where:
        τ(t)      : time factor from the calendar-mode pattern table (src.patterns)
        π(i)      : position factor  clamp(-4·(i/n - 0.5)² + 1, 0.5, 1.5)
        κ(s)      : station tier multiplier (一级 2.5 / 二级 1.5 / 三级 1.0)
        ε(s, d)   : max special-event factor matching today's date and station
        λ(line)   : per-line ridership weight (default 1.0)
        jitter    : uniform draw in [0.975, 1.025]

Smoothing:
    P is clamped to within ±5% of the previous tick's value for the same
    "{line}-{station}" key. Off-service samples (00:00-06:00) neither read
    nor write the smoothing state.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, FrozenSet, Iterable, List, Optional

import numpy as np
import pandas as pd

from src.config import CST
from src.congestion import OFF_SERVICE, CongestionLevel, congestion_level, line_congestion_level
from src.data import Line
from src.holiday import HolidayResolver
from src.patterns import (
    SERVICE_END_HOUR,
    TemporalPatternTable,
    is_service_closed,
    passenger_trend,
    system_status,
    time_factor,
)
from src.stations import StationClassifier

logger = logging.getLogger(__name__)

ALL_STATIONS = "all"

# 线路权重 (客流占比)
LINE_WEIGHTS: Dict[str, float] = {
    "1号线": 1.3,
    "2号线": 0.85,
    "3号线": 1.1,
    "4号线": 0.9,
    "5号线": 1.45,  # 最繁忙
    "6号线": 0.7,
    "6号线支线": 0.05,
    "7号线": 0.8,
    "8号线": 0.1,
    "9号线": 0.8,
    "10号线": 0.7,
    "11号线": 1.3,
    "12号线": 0.8,
    "13号线": 0.5,
    "14号线": 0.8,
    "16号线": 0.25,
    "20号线": 0.02,
}

WEATHER_IMPACT: Dict[str, float] = {
    "晴": 1.0,
    "多云": 0.95,
    "阴": 0.9,
    "小雨": 0.85,
    "大雨": 0.7,
    "暴雨": 0.5,
}
WEATHER_OPTIONS = ["晴", "多云", "阴", "小雨", "大雨"]
WEATHER_WEIGHTS = [0.4, 0.3, 0.15, 0.1, 0.05]


@dataclass(frozen=True)
class FlowParams:
    base_passengers: int = 2000
    jitter: float = 0.025
    smoothing_pct: int = 5
    position_min: float = 0.5
    position_max: float = 1.5
    system_base_passengers: int = 3_000_000
    weekend_system_factor: float = 1.1


@dataclass(frozen=True)
class SpecialEvent:
    date: date
    stations: FrozenSet[str]
    factor: float
    name: Optional[str] = None

    def affects(self, station_name: str, day: date) -> bool:
        if self.date != day:
            return False
        return station_name in self.stations or ALL_STATIONS in self.stations


@dataclass(frozen=True)
class StationFlowSample:
    station_name: str
    passengers: int
    congestion: CongestionLevel
    is_off_service: bool
    trend: str = "低位运行"
    last_update: Optional[datetime] = None


def _finite(value: float) -> float:
    """NaN/Inf/负数 → 0, 保证显示层只看到非负有限值."""
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def _round_half_up(value: float) -> int:
    return int(math.floor(_finite(value) + 0.5))


def position_factor(index: int, total: int, lo: float = 0.5, hi: float = 1.5) -> float:
    """抛物线分布: 线路中段客流多, 两端少."""
    pos = index / total if total > 0 else 0.5
    factor = -4 * (pos - 0.5) ** 2 + 1
    return max(lo, min(hi, factor))


def smoothing_bound(previous: int, pct: int = 5) -> int:
    """ceil(previous × pct / 100), integer arithmetic."""
    return -(-previous * pct // 100)


class PassengerFlowSimulator:
    """
    Per-station passenger flow synthesizer.

    Owns its smoothing history and special-event list; the holiday resolver is
    injected so tests can run with a stubbed transport.
    """

    def __init__(
        self,
        lines: Iterable[Line],
        holidays: HolidayResolver,
        params: Optional[FlowParams] = None,
        seed: Optional[int] = None,
        pattern_table: Optional[TemporalPatternTable] = None,
        line_weights: Optional[Dict[str, float]] = None,
    ):
        self.lines: List[Line] = list(lines)
        self.holidays = holidays
        self.params = params or FlowParams()
        self.pattern_table = pattern_table or TemporalPatternTable()
        self.line_weights = dict(LINE_WEIGHTS if line_weights is None else line_weights)
        self.classifier = StationClassifier(self.lines)
        self.special_events: List[SpecialEvent] = []

        self._rng = np.random.default_rng(seed)
        self._history: Dict[str, int] = {}
        self.current_weather = self._draw_weather()

    # ----- factors -----------------------------------------------------------

    def _draw_weather(self) -> str:
        return str(self._rng.choice(WEATHER_OPTIONS, p=WEATHER_WEIGHTS))

    def time_factor(self, now: datetime) -> float:
        if is_service_closed(now):
            return 0.0
        holiday = self.holidays.resolve(now)
        return _finite(time_factor(now, holiday, self.pattern_table))

    def line_weight(self, line_name: str) -> float:
        return _finite(self.line_weights.get(line_name, 1.0))

    def station_type_factor(self, station_name: str) -> float:
        return _finite(self.classifier.multiplier(station_name))

    def event_factor(self, station_name: str, day: date) -> float:
        factors = [e.factor for e in self.special_events if e.affects(station_name, day)]
        if not factors:
            return 1.0
        return _finite(max(factors))

    def add_event(self, event: SpecialEvent) -> None:
        self.special_events.append(event)
        logger.info("添加特殊事件: %s %s x%.2f", event.date.isoformat(), event.name or "", event.factor)

    # ----- sampling ----------------------------------------------------------

    def compute_sample(
        self,
        station_name: str,
        line_name: str,
        station_index: int,
        total_stations: int,
        now: Optional[datetime] = None,
    ) -> StationFlowSample:
        now = now or datetime.now(CST)
        if is_service_closed(now):
            return StationFlowSample(
                station_name=station_name,
                passengers=0,
                congestion=OFF_SERVICE,
                is_off_service=True,
                trend=passenger_trend(now.hour),
                last_update=now,
            )
        return self._sample(station_name, line_name, station_index, total_stations, now, self.time_factor(now))

    def _sample(self, station_name, line_name, station_index, total_stations, now, tf) -> StationFlowSample:
        p = self.params
        pos = _finite(position_factor(station_index, total_stations, p.position_min, p.position_max))
        raw = (
            p.base_passengers
            * _finite(tf)
            * pos
            * self.station_type_factor(station_name)
            * self.event_factor(station_name, now.date())
            * self.line_weight(line_name)
        )
        passengers = _round_half_up(raw)

        jitter = self._rng.uniform(1 - p.jitter, 1 + p.jitter)
        passengers = _round_half_up(passengers * jitter)

        key = f"{line_name}-{station_name}"
        previous = self._history.get(key)
        if previous is not None and previous > 0:
            bound = smoothing_bound(previous, p.smoothing_pct)
            passengers = max(previous - bound, min(previous + bound, passengers))
        passengers = max(0, passengers)
        self._history[key] = passengers

        return StationFlowSample(
            station_name=station_name,
            passengers=passengers,
            congestion=congestion_level(passengers),
            is_off_service=False,
            trend=passenger_trend(now.hour),
            last_update=now,
        )

    def compute_line(self, line: Line, now: Optional[datetime] = None) -> List[StationFlowSample]:
        """一次 tick: 计算整条线路所有站点的样本."""
        now = now or datetime.now(CST)
        total = len(line.stations)
        if is_service_closed(now):
            return [self.compute_sample(s.name, line.name, i, total, now) for i, s in enumerate(line.stations)]

        tf = self.time_factor(now)
        return [self._sample(s.name, line.name, i, total, now, tf) for i, s in enumerate(line.stations)]

    def previous_passengers(self, line_name: str, station_name: str) -> Optional[int]:
        return self._history.get(f"{line_name}-{station_name}")

    # ----- aggregates --------------------------------------------------------

    def calculate_line_stats(self, line: Line, samples: List[StationFlowSample], now: Optional[datetime] = None) -> dict:
        if not samples:
            return {
                "total_passengers": 0,
                "avg_passengers": 0,
                "max_passengers": 0,
                "min_passengers": 0,
                "congestion_level": None,
                "busiest_station": None,
                "quietest_station": None,
                "stations_count": 0,
                "last_update": None,
            }

        series = pd.Series(
            [s.passengers for s in samples],
            index=[s.station_name for s in samples],
            dtype="int64",
        )
        total = int(series.sum())
        avg = _round_half_up(total / len(series))
        busiest, quietest = series.idxmax(), series.idxmin()

        return {
            "total_passengers": total,
            "avg_passengers": avg,
            "max_passengers": int(series.max()),
            "min_passengers": int(series.min()),
            "congestion_level": line_congestion_level(avg),
            "busiest_station": {"name": busiest, "passengers": int(series[busiest])},
            "quietest_station": {"name": quietest, "passengers": int(series[quietest])},
            "stations_count": len(series),
            "last_update": now or datetime.now(CST),
        }

    def line_operation_info(self, line: Line, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(CST)
        if now.hour >= SERVICE_END_HOUR or is_service_closed(now):
            operation_status, next_train = "已停运", "06:00"
        elif now.hour >= 22:
            operation_status, next_train = "末班车时段", "10-15分钟"
        else:
            operation_status, next_train = "正常运营", "3分钟"

        return {
            "operation_status": operation_status,
            "next_train": next_train,
            "length_km": _round_half_up(len(line.stations) * 1.5),
            "stations_count": len(line.stations),
            "avg_speed_kmh": int(self._rng.integers(60, 80)),
            "start_time": "06:00",
            "end_time": "23:00",
        }

    def total_system_passengers(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(CST)
        p = self.params
        weather = WEATHER_IMPACT.get(self.current_weather, 1.0)
        weekend = p.weekend_system_factor if now.weekday() >= 5 else 1.0
        return _round_half_up(p.system_base_passengers * self.time_factor(now) * weather * weekend)

    def system_status(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(CST)
        return system_status(now.hour)
