"""
热力图指针交互
==============
State machine over pointer / touch events:

    Idle ──down(miss)──▶ Dragging(start_x) ──up/leave──▶ Idle
    Idle ──move(hit)───▶ Hovering(station) ──move(miss)/leave/up──▶ Idle
    Hovering ──down(hit)──▶ Hovering (press) ──up(hit)──▶ click, Idle

Touch start/move/end map onto down/move/up, so a tap that misses every
station starts a drag instead of showing a tooltip.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from src.layout import HeatmapLayoutEngine, StationPosition

logger = logging.getLogger(__name__)

TOOLTIP_OFFSET = 20
TOOLTIP_FLIP_GAP = 15
TOOLTIP_MIN_TOP = 10


class InteractionState(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class PointerResult:
    state: InteractionState
    scroll_offset_x: float
    hovered: Optional[StationPosition] = None
    clicked: Optional[StationPosition] = None

    @property
    def tooltip_visible(self) -> bool:
        return self.state == InteractionState.HOVERING and self.hovered is not None


def hit_test(x: float, y: float, positions: Sequence[StationPosition], radius: float) -> Optional[StationPosition]:
    """半径内的第一个站点 (列表顺序 = 站点顺序)."""
    for pos in positions:
        if math.hypot(x - pos.x, y - pos.y) <= radius:
            return pos
    return None


def place_tooltip(x: float, y: float, width: float, height: float,
                  viewport_width: float, viewport_height: float) -> Tuple[float, float]:
    """工具提示默认在指针右下方; 超出视口时翻转到左侧/上方."""
    left = x + TOOLTIP_OFFSET
    top = y + TOOLTIP_OFFSET
    if left + width > viewport_width:
        left = x - width - TOOLTIP_FLIP_GAP
    if top + height > viewport_height:
        top = y - height - TOOLTIP_FLIP_GAP
    if top < TOOLTIP_MIN_TOP:
        top = TOOLTIP_MIN_TOP
    return left, top


class PointerInteractionResolver:
    def __init__(self, layout_engine: HeatmapLayoutEngine, on_change: Optional[Callable[[], None]] = None):
        self.layout_engine = layout_engine
        self.on_change = on_change
        self.positions: List[StationPosition] = []
        self.n_stations = 0
        self.canvas_width = 0.0

        self.state = InteractionState.IDLE
        self.hovered: Optional[StationPosition] = None
        self.scroll_offset_x = 0.0
        self._drag_last_x: Optional[float] = None

    @property
    def hit_radius(self) -> int:
        return self.layout_engine.config.hit_radius

    def set_content(self, n_stations: int, canvas_width: float) -> None:
        self.n_stations = n_stations
        self.canvas_width = canvas_width
        self.scroll_offset_x = self.layout_engine.clamp_scroll(self.scroll_offset_x, n_stations, canvas_width)

    def reset(self) -> None:
        self.state = InteractionState.IDLE
        self.hovered = None
        self.scroll_offset_x = 0.0
        self._drag_last_x = None

    def hit_test(self, x: float, y: float, positions: Optional[Sequence[StationPosition]] = None):
        return hit_test(x, y, self.positions if positions is None else positions, self.hit_radius)

    def on_drag_delta(self, delta_x: float) -> float:
        """指针右移 → 内容右移 → 偏移减小; 结果夹取到 [0, max]."""
        self.scroll_offset_x = self.layout_engine.clamp_scroll(
            self.scroll_offset_x - delta_x, self.n_stations, self.canvas_width
        )
        return self.scroll_offset_x

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _result(self, clicked: Optional[StationPosition] = None) -> PointerResult:
        return PointerResult(self.state, self.scroll_offset_x, self.hovered, clicked)

    def _hover(self, station: Optional[StationPosition]) -> None:
        if station is None:
            self.state, self.hovered = InteractionState.IDLE, None
        else:
            self.state, self.hovered = InteractionState.HOVERING, station

    # ----- pointer events ----------------------------------------------------

    def pointer_down(self, x: float, y: float) -> PointerResult:
        station = self.hit_test(x, y)
        if station is None:
            self.state, self.hovered = InteractionState.DRAGGING, None
            self._drag_last_x = x
            self._changed()
        else:
            self._hover(station)
        return self._result()

    def pointer_move(self, x: float, y: float) -> PointerResult:
        if self.state == InteractionState.DRAGGING:
            delta = x - (self._drag_last_x if self._drag_last_x is not None else x)
            self._drag_last_x = x
            self.on_drag_delta(delta)
            self._changed()
            return self._result()

        previous = self.hovered
        self._hover(self.hit_test(x, y))
        if (previous is None) != (self.hovered is None) or (
            previous is not None and self.hovered is not None and previous.index != self.hovered.index
        ):
            self._changed()
        return self._result()

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> PointerResult:
        if self.state == InteractionState.DRAGGING:
            self.state = InteractionState.IDLE
            self._drag_last_x = None
            return self._result()

        clicked = None
        if x is not None and y is not None and self.hovered is not None:
            clicked = self.hit_test(x, y)
            if clicked is not None:
                logger.debug("点击了站点: %s", clicked.station_data.station_name)
        self._hover(None)
        self._changed()
        return self._result(clicked)

    def pointer_leave(self) -> PointerResult:
        if self.state == InteractionState.DRAGGING:
            self.state = InteractionState.IDLE
            self._drag_last_x = None
            return self._result()
        self._hover(None)
        self._changed()
        return self._result()

    # ----- touch events ------------------------------------------------------

    def touch_start(self, x: float, y: float) -> PointerResult:
        return self.pointer_down(x, y)

    def touch_move(self, x: float, y: float) -> PointerResult:
        return self.pointer_move(x, y)

    def touch_end(self, x: Optional[float] = None, y: Optional[float] = None) -> PointerResult:
        return self.pointer_up(x, y)
