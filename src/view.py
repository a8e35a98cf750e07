"""热力图视图: 当前线路 + 样本 + 滚动/悬停状态 → 布局 → 绘制."""
import logging
from typing import List, Optional

from src.data import Line
from src.interaction import PointerInteractionResolver, PointerResult, place_tooltip
from src.layout import HeatmapLayoutEngine, LayoutConfig, StationPosition
from src.render import HeatmapRenderer, SvgSurface, calculate_stats
from src.simulator import StationFlowSample

logger = logging.getLogger(__name__)

TOOLTIP_SIZE = (200, 110)


class HeatmapView:
    def __init__(self, width: float = 960, height: float = 360, config: LayoutConfig = None):
        self.config = config or LayoutConfig()
        self.layout_engine = HeatmapLayoutEngine(self.config)
        self.renderer = HeatmapRenderer(self.config)
        self.interaction = PointerInteractionResolver(self.layout_engine, on_change=self.relayout)

        self.width = width
        self.height = height
        self.viewport = (width, height)
        self.line: Optional[Line] = None
        self.samples: List[StationFlowSample] = []
        self.positions: List[StationPosition] = []
        self.stats = calculate_stats([])

    def set_line(self, line: Optional[Line]) -> None:
        self.line = line
        self.samples = []
        self.interaction.reset()
        self.relayout()

    def apply_samples(self, samples: List[StationFlowSample]) -> None:
        self.samples = list(samples)
        self.stats = calculate_stats(self.samples)
        self.relayout()

    def resize(self, width: float, height: float, viewport=None) -> None:
        self.width, self.height = width, height
        self.viewport = tuple(viewport) if viewport else (width, height)
        self.relayout()

    def relayout(self) -> None:
        self.interaction.set_content(len(self.samples), self.width)
        self.positions = self.layout_engine.layout(
            self.samples, self.interaction.scroll_offset_x, self.width, self.height
        )
        self.interaction.positions = self.positions
        hovered = self.interaction.hovered
        if hovered is not None:
            # 重新布局后悬停站点指向新位置
            self.interaction.hovered = self.positions[hovered.index] if hovered.index < len(self.positions) else None

    def render_svg(self) -> str:
        surface = SvgSurface(self.width, self.height)
        line_color = self.line.color if self.line is not None else None
        self.stats = self.renderer.render(surface, self.samples, self.positions, line_color, self.interaction.hovered)
        return surface.to_svg()

    def pointer(self, kind: str, x: Optional[float] = None, y: Optional[float] = None) -> PointerResult:
        handlers = {
            "down": self.interaction.pointer_down,
            "move": self.interaction.pointer_move,
            "touchstart": self.interaction.touch_start,
            "touchmove": self.interaction.touch_move,
        }
        if kind in handlers:
            return handlers[kind](x, y)
        if kind == "up":
            return self.interaction.pointer_up(x, y)
        if kind == "touchend":
            return self.interaction.touch_end(x, y)
        if kind == "leave":
            return self.interaction.pointer_leave()
        raise ValueError(f"unknown pointer event: {kind}")

    def tooltip(self, result: PointerResult, client_x: float, client_y: float) -> Optional[dict]:
        if not result.tooltip_visible:
            return None
        sample = result.hovered.station_data
        left, top = place_tooltip(client_x, client_y, TOOLTIP_SIZE[0], TOOLTIP_SIZE[1], *self.viewport)
        return {
            "station_name": sample.station_name,
            "passengers": sample.passengers,
            "level": sample.congestion.level,
            "color": sample.congestion.color,
            "line_color": self.line.color if self.line is not None else sample.congestion.color,
            "left": left,
            "top": top,
        }
