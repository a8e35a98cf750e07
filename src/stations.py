"""站点分级: 按经过该站的线路数量划分 一级/二级/三级."""
from collections import Counter
from enum import Enum
from typing import Dict, Iterable

from src.data import Line
from src.utils import normalize_station_name


class StationTier(str, Enum):
    T1 = "一级"
    T2 = "二级"
    T3 = "三级"


TIER_MULTIPLIERS: Dict[StationTier, float] = {
    StationTier.T1: 2.5,
    StationTier.T2: 1.5,
    StationTier.T3: 1.0,
}


def count_serving_lines(station_name: str, lines: Iterable[Line]) -> int:
    name = normalize_station_name(station_name)
    return sum(1 for line in lines if name in line.station_names)


def tier_for_line_count(line_count: int) -> StationTier:
    if line_count >= 3:
        return StationTier.T1
    if line_count == 2:
        return StationTier.T2
    return StationTier.T3


def classify(station_name: str, lines: Iterable[Line]) -> StationTier:
    return tier_for_line_count(count_serving_lines(station_name, lines))


class StationClassifier:
    """线路目录加载后预先统计每个站的线路数, 避免每次 tick 全量扫描."""

    def __init__(self, lines: Iterable[Line]):
        self._line_counts: Counter = Counter()
        for line in lines:
            for name in set(line.station_names):
                self._line_counts[name] += 1

    def line_count(self, station_name: str) -> int:
        return self._line_counts.get(normalize_station_name(station_name), 0)

    def classify(self, station_name: str) -> StationTier:
        return tier_for_line_count(self.line_count(station_name))

    def multiplier(self, station_name: str) -> float:
        return TIER_MULTIPLIERS.get(self.classify(station_name), 1.0)
