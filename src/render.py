"""
热力图绘制
==========
Renderer draws through a small 2D surface protocol (stroke/fill paths,
circles, aligned text, full clear + repaint per frame). ``SvgSurface`` is the
concrete surface served by the API; tests use a recording surface.

Draw order: background + grid → route polyline → station markers → labels
→ legend → hover ring.
"""
import logging
from typing import List, Optional, Protocol, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

from src.congestion import legend_levels
from src.layout import HeatmapLayoutEngine, LayoutConfig, StationPosition

logger = logging.getLogger(__name__)

FONT_FAMILY = 'Arial, "Microsoft YaHei", sans-serif'

COLORS = {
    "background": "#ffffff",
    "grid_line": "rgba(0, 0, 0, 0.05)",
    "text": "#333333",
    "legend_text": "#666666",
    "marker_border": "#ffffff",
    "hover_ring": "rgba(0, 0, 0, 0.3)",
    "empty_background": "#f8f9fa",
    "empty_text": "#6c757d",
    "default_line": "#10b981",
    "unknown_station": "#999999",
}

EMPTY_STATE_MESSAGE = "请选择一条线路查看热力图"
GRID_STEP = 20


class Surface(Protocol):
    width: float
    height: float

    def clear(self) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float = 1) -> None: ...

    def polyline(self, points: Sequence[Tuple[float, float]], color: str, width: float = 1) -> None: ...

    def circle(self, x: float, y: float, r: float, fill: Optional[str] = None,
               stroke: Optional[str] = None, stroke_width: float = 1) -> None: ...

    def text(self, x: float, y: float, text: str, color: str, size: int = 16, bold: bool = False,
             align: str = "left", baseline: str = "middle") -> None: ...


_SVG_ANCHOR = {"left": "start", "center": "middle", "right": "end"}
_SVG_BASELINE = {"top": "hanging", "middle": "middle", "bottom": "text-after-edge"}


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class SvgSurface:
    """Canvas-equivalent surface that accumulates SVG elements."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self._elements: List[str] = []

    def clear(self) -> None:
        self._elements = []

    def fill_rect(self, x, y, w, h, color):
        self._elements.append(
            f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(w)}" height="{_num(h)}" fill={quoteattr(color)}/>'
        )

    def line(self, x1, y1, x2, y2, color, width=1):
        self._elements.append(
            f'<line x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
            f'stroke={quoteattr(color)} stroke-width="{_num(width)}"/>'
        )

    def polyline(self, points, color, width=1):
        if not points:
            return
        coords = " ".join(f"{_num(x)},{_num(y)}" for x, y in points)
        self._elements.append(
            f'<polyline points="{coords}" fill="none" stroke={quoteattr(color)} stroke-width="{_num(width)}" '
            'stroke-linecap="round" stroke-linejoin="round"/>'
        )

    def circle(self, x, y, r, fill=None, stroke=None, stroke_width=1):
        attrs = f'cx="{_num(x)}" cy="{_num(y)}" r="{_num(r)}" fill={quoteattr(fill or "none")}'
        if stroke:
            attrs += f' stroke={quoteattr(stroke)} stroke-width="{_num(stroke_width)}"'
        self._elements.append(f"<circle {attrs}/>")

    def text(self, x, y, text, color, size=16, bold=False, align="left", baseline="middle"):
        weight = ' font-weight="bold"' if bold else ""
        self._elements.append(
            f'<text x="{_num(x)}" y="{_num(y)}" fill={quoteattr(color)} font-size="{size}"{weight} '
            f'font-family={quoteattr(FONT_FAMILY)} text-anchor="{_SVG_ANCHOR.get(align, "start")}" '
            f'dominant-baseline="{_SVG_BASELINE.get(baseline, "auto")}">{escape(str(text))}</text>'
        )

    def to_svg(self) -> str:
        body = "".join(self._elements)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(self.width)}" height="{_num(self.height)}" '
            f'viewBox="0 0 {_num(self.width)} {_num(self.height)}">{body}</svg>'
        )


def calculate_stats(stations) -> dict:
    """全量站点 (不受滚动影响) 的 total / avg / peak."""
    passengers = [max(0, int(getattr(s, "passengers", 0) or 0)) for s in stations or []]
    if not passengers:
        return {"total": 0, "avg": 0, "peak": 0}
    total = sum(passengers)
    return {"total": total, "avg": int(total / len(passengers) + 0.5), "peak": max(passengers)}


class HeatmapRenderer:
    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()
        self.layout_engine = HeatmapLayoutEngine(self.config)

    def render(
        self,
        surface: Optional[Surface],
        stations,
        positions: Sequence[StationPosition],
        line_color: Optional[str],
        hovered: Optional[StationPosition] = None,
    ) -> dict:
        stats = calculate_stats(stations)
        if surface is None:
            logger.warning("热力图绘制面不存在, 跳过绘制")
            return stats

        surface.clear()
        if not stations or line_color is None:
            self.draw_empty_state(surface)
            return stats

        visible = [p for p in positions if self.layout_engine.is_visible(p, surface.width)]

        self.draw_background(surface)
        self.draw_line(surface, positions, line_color)
        self.draw_stations(surface, visible)
        self.draw_labels(surface, visible)
        self.draw_legend(surface)
        if hovered is not None:
            self.draw_hover_ring(surface, visible, hovered)
        return stats

    def draw_background(self, surface: Surface) -> None:
        w, h = surface.width, surface.height
        surface.fill_rect(0, 0, w, h, COLORS["background"])
        for y in range(GRID_STEP, int(h), GRID_STEP):
            surface.line(0, y, w, y, COLORS["grid_line"], 1)
        for x in range(GRID_STEP, int(w), GRID_STEP):
            surface.line(x, 0, x, h, COLORS["grid_line"], 1)

    def draw_line(self, surface: Surface, positions: Sequence[StationPosition], line_color: str) -> None:
        if len(positions) < 2:
            return
        surface.polyline([(p.x, p.y) for p in positions], line_color or COLORS["default_line"], 3)

    def draw_stations(self, surface: Surface, positions: Sequence[StationPosition]) -> None:
        r = self.config.station_radius
        for pos in positions:
            congestion = getattr(pos.station_data, "congestion", None)
            color = congestion.color if congestion is not None else COLORS["unknown_station"]
            surface.circle(pos.x, pos.y, r, fill=color, stroke=COLORS["marker_border"], stroke_width=1)

    def draw_labels(self, surface: Surface, positions: Sequence[StationPosition]) -> None:
        for pos in positions:
            label_y, baseline = self.layout_engine.label_placement(pos)
            name = getattr(pos.station_data, "station_name", None) or f"站点{pos.index + 1}"
            surface.text(pos.x, label_y, name, COLORS["text"],
                         size=16, align="center", baseline=baseline)

    def draw_legend(self, surface: Surface) -> None:
        legend_x, legend_y = 100, surface.height - 50
        surface.text(20, legend_y, "客流等级:", COLORS["text"], size=16, bold=True)
        for i, level in enumerate(legend_levels()):
            x = legend_x + i * 80
            surface.circle(x + 6, legend_y - 2, 6, fill=level.color)
            surface.text(x + 18, legend_y, level.level, COLORS["legend_text"], size=16)

    def draw_hover_ring(self, surface: Surface, positions: Sequence[StationPosition],
                        hovered: StationPosition) -> None:
        for pos in positions:
            if pos.index == hovered.index:
                surface.circle(pos.x, pos.y, self.config.station_radius + self.config.hover_ring_offset,
                               stroke=COLORS["hover_ring"], stroke_width=2)
                return

    def draw_empty_state(self, surface: Surface) -> None:
        surface.fill_rect(0, 0, surface.width, surface.height, COLORS["empty_background"])
        surface.text(surface.width / 2, surface.height / 2, EMPTY_STATE_MESSAGE, COLORS["empty_text"],
                     size=20, bold=True, align="center", baseline="middle")
