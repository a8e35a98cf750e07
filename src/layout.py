"""
热力图布局
- 站点沿一条水平中心线等距排列, 间距固定
- x[i] = padding.left + i × spacing - scroll_offset_x
- 布局是纯投影: 不修改滚动偏移, 偏移的夹取由拖拽处理负责
"""
from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple


@dataclass(frozen=True)
class Padding:
    top: int = 80
    right: int = 60
    bottom: int = 80
    left: int = 60


@dataclass(frozen=True)
class LayoutConfig:
    padding: Padding = field(default_factory=Padding)
    station_spacing: int = 80
    station_radius: int = 8
    hit_tolerance: int = 2
    hover_ring_offset: int = 4
    # (dy, baseline) 按 index % 4 轮换: 上 / 下 / 更上 / 更下
    label_offsets: Tuple[Tuple[int, str], ...] = (
        (-20, "bottom"),
        (20, "top"),
        (-30, "bottom"),
        (30, "top"),
    )

    @property
    def hit_radius(self) -> int:
        return self.station_radius + self.hit_tolerance


@dataclass(frozen=True)
class StationPosition:
    x: float
    y: float
    station_data: Any
    index: int = 0


class HeatmapLayoutEngine:
    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()

    def total_content_width(self, n_stations: int) -> float:
        p = self.config.padding
        return p.left + p.right + max(0, n_stations - 1) * self.config.station_spacing

    def max_scroll_offset(self, n_stations: int, canvas_width: float) -> float:
        return max(0.0, self.total_content_width(n_stations) - canvas_width)

    def clamp_scroll(self, offset: float, n_stations: int, canvas_width: float) -> float:
        return min(max(0.0, offset), self.max_scroll_offset(n_stations, canvas_width))

    def center_y(self, canvas_height: float) -> float:
        p = self.config.padding
        plot_height = canvas_height - p.top - p.bottom
        return p.top + plot_height / 2

    def layout(
        self,
        stations: Sequence[Any],
        scroll_offset_x: float,
        canvas_width: float,
        canvas_height: float,
    ) -> List[StationPosition]:
        p = self.config.padding
        y = self.center_y(canvas_height)
        spacing = self.config.station_spacing
        return [
            StationPosition(x=p.left + i * spacing - scroll_offset_x, y=y, station_data=station, index=i)
            for i, station in enumerate(stations)
        ]

    def label_placement(self, position: StationPosition) -> Tuple[float, str]:
        dy, baseline = self.config.label_offsets[position.index % len(self.config.label_offsets)]
        return position.y + dy, baseline

    def is_visible(self, position: StationPosition, canvas_width: float) -> bool:
        r = self.config.station_radius
        return -r <= position.x <= canvas_width + r
