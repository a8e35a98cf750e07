"""客流拥挤等级 (阈值表, 上界包含)."""
import math
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class CongestionLevel:
    level: str
    color: str
    emoji: str

    @property
    def is_off_service(self) -> bool:
        return self.level == OFF_SERVICE.level


OFF_SERVICE = CongestionLevel("已停运", "#64748b", "🌙")

# passengers <= threshold → 该等级; 阈值严格递增, 最后一档兜底
CONGESTION_THRESHOLDS: List[Tuple[float, CongestionLevel]] = [
    (0, OFF_SERVICE),
    (200, CongestionLevel("畅通", "#10b981", "😊")),
    (500, CongestionLevel("舒适", "#3b82f6", "🙂")),
    (1000, CongestionLevel("繁忙", "#f59e0b", "😐")),
    (2000, CongestionLevel("拥挤", "#ef4444", "😰")),
    (math.inf, CongestionLevel("拥堵", "#dc2626", "😱")),
]

# 线路平均客流等级 (严格小于)
LINE_CONGESTION_THRESHOLDS: List[Tuple[float, CongestionLevel]] = [
    (200, CongestionLevel("非常畅通", "#10b981", "😊")),
    (400, CongestionLevel("畅通", "#34d399", "😊")),
    (600, CongestionLevel("正常", "#3b82f6", "😐")),
    (800, CongestionLevel("繁忙", "#f59e0b", "😐")),
    (1000, CongestionLevel("拥挤", "#f97316", "😰")),
    (math.inf, CongestionLevel("非常拥挤", "#ef4444", "😱")),
]


def congestion_level(passengers) -> CongestionLevel:
    for threshold, level in CONGESTION_THRESHOLDS:
        if passengers <= threshold:
            return level
    return CONGESTION_THRESHOLDS[-1][1]


def congestion_rank(level: CongestionLevel) -> int:
    for rank, (_, candidate) in enumerate(CONGESTION_THRESHOLDS):
        if candidate == level:
            return rank
    return -1


def legend_levels() -> List[CongestionLevel]:
    return [level for _, level in CONGESTION_THRESHOLDS]


def line_congestion_level(avg_passengers) -> CongestionLevel:
    for threshold, level in LINE_CONGESTION_THRESHOLDS:
        if avg_passengers < threshold:
            return level
    return LINE_CONGESTION_THRESHOLDS[-1][1]
