"""
时段客流模式表
==============
Half-hour / hour interval -> demand multiplier, one table per calendar mode.

    timeFactor(t) = table[mode](t)                 (00:00-06:00 → 0, 停运)
                    × 1.2  if weekday and hour ∈ [7,9) ∪ [17,19)

The weekday peak boost is applied as a second pass after the interval lookup,
it is not baked into the table rows.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.holiday import HolidayInfo

SERVICE_START_HOUR = 6
SERVICE_END_HOUR = 23
DEFAULT_MULTIPLIER = 0.5
PEAK_BOOST = 1.2
PEAK_WINDOWS = ((7, 9), (17, 19))


class CalendarMode(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    SPRING_FESTIVAL = "spring_festival"


HISTORICAL_PATTERNS: Dict[CalendarMode, Dict[str, float]] = {
    CalendarMode.WEEKDAY: {
        "06:00-07:00": 0.3,   # 清晨
        "07:00-09:00": 0.9,   # 早高峰
        "09:00-12:00": 0.4,   # 上午平峰
        "12:00-14:00": 0.6,   # 午间小高峰
        "14:00-17:00": 0.4,   # 下午平峰
        "17:00-19:00": 0.9,   # 晚高峰
        "19:00-22:00": 0.6,   # 晚间
        "22:00-24:00": 0.3,   # 夜间
        "00:00-06:00": 0.0,   # 非运营时间
    },
    CalendarMode.WEEKEND: {
        "06:00-09:00": 0.2,
        "09:00-12:00": 0.7,   # 周末出行高峰
        "12:00-17:00": 0.8,
        "17:00-20:00": 0.6,
        "20:00-22:00": 0.4,
        "22:00-24:00": 0.1,
    },
    CalendarMode.HOLIDAY: {
        "06:00-09:00": 0.25,
        "09:00-12:00": 0.8,
        "12:00-18:00": 0.95,  # 景区/商圈全天高位
        "18:00-21:00": 0.7,
        "21:00-23:00": 0.4,
        "23:00-06:00": 0.1,
    },
    CalendarMode.SPRING_FESTIVAL: {
        "06:00-09:00": 0.1,
        "09:00-12:00": 0.3,
        "12:00-17:00": 0.35,
        "17:00-20:00": 0.25,
        "20:00-06:00": 0.1,   # 跨夜
    },
}


def _to_minutes(hhmm: str) -> int:
    hour, minute = hhmm.split(":")
    return int(hour) * 60 + int(minute)


def is_time_in_range(current: int, start: int, end: int) -> bool:
    """半开区间 [start, end); start >= end 时视为跨夜区间."""
    if start < end:
        return start <= current < end
    return current >= start or current < end


class TemporalPatternTable:
    def __init__(self, patterns: Optional[Dict[CalendarMode, Dict[str, float]]] = None):
        patterns = patterns or HISTORICAL_PATTERNS
        self._tables: Dict[CalendarMode, List[Tuple[int, int, float]]] = {}
        for mode, table in patterns.items():
            rows = []
            for time_range, factor in table.items():
                start, end = time_range.split("-")
                rows.append((_to_minutes(start), _to_minutes(end), float(factor)))
            self._tables[mode] = rows

    def lookup(self, mode: CalendarMode, hour: int, minute: int) -> float:
        current = hour * 60 + minute
        for start, end, factor in self._tables.get(mode, []):
            if is_time_in_range(current, start, end):
                return factor
        return DEFAULT_MULTIPLIER


def calendar_mode(moment: datetime, holiday: HolidayInfo) -> CalendarMode:
    if holiday.is_spring_festival:
        return CalendarMode.SPRING_FESTIVAL
    if holiday.is_holiday:
        return CalendarMode.HOLIDAY
    if moment.weekday() >= 5:
        return CalendarMode.WEEKEND
    return CalendarMode.WEEKDAY


def is_service_closed(moment: datetime) -> bool:
    return moment.hour < SERVICE_START_HOUR


def is_peak_hour(hour: int) -> bool:
    return any(start <= hour < end for start, end in PEAK_WINDOWS)


def time_factor(moment: datetime, holiday: HolidayInfo, table: Optional[TemporalPatternTable] = None) -> float:
    """Demand multiplier for ``moment``; always >= 0."""
    if is_service_closed(moment):
        return 0.0

    table = table or _DEFAULT_TABLE
    mode = calendar_mode(moment, holiday)
    factor = table.lookup(mode, moment.hour, moment.minute)

    if mode == CalendarMode.WEEKDAY and is_peak_hour(moment.hour):
        factor *= PEAK_BOOST

    return max(0.0, factor)


def passenger_trend(hour: int) -> str:
    if 5 <= hour < 7:
        return "快速上升"
    if 7 <= hour < 9 or 17 <= hour < 19:
        return "高峰上升"
    if 9 <= hour < 12 or 19 <= hour < 22:
        return "缓慢下降"
    if 12 <= hour < 14:
        return "平稳"
    if 14 <= hour < 17:
        return "缓慢上升"
    return "低位运行"


def system_status(hour: int) -> Dict[str, str]:
    if SERVICE_START_HOUR <= hour < SERVICE_END_HOUR:
        return {"status": "正常运营", "color": "#10b981"}
    return {"status": "夜间停运", "color": "#64748b"}


_DEFAULT_TABLE = TemporalPatternTable()
