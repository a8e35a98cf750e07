from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


POINTER_KINDS = Literal["down", "move", "up", "leave", "touchstart", "touchmove", "touchend"]


class CongestionSchema(BaseModel):
    level: str
    color: str
    emoji: str


class LineSummary(BaseModel):
    id: int
    name: str
    color: str
    station_count: int


class LineDetail(LineSummary):
    stations: List[str]


class StationFlowItem(BaseModel):
    station_name: str
    passengers: int = Field(ge=0)
    congestion: CongestionSchema
    is_off_service: bool
    trend: str
    tier: str


class StationRef(BaseModel):
    name: str
    passengers: int


class LineStats(BaseModel):
    total_passengers: int
    avg_passengers: int
    max_passengers: int
    min_passengers: int
    congestion_level: Optional[CongestionSchema] = None
    busiest_station: Optional[StationRef] = None
    quietest_station: Optional[StationRef] = None
    stations_count: int


class OperationInfo(BaseModel):
    operation_status: str
    next_train: str
    length_km: int
    stations_count: int
    avg_speed_kmh: int
    start_time: str
    end_time: str


class LineFlowResponse(BaseModel):
    line_id: int
    line_name: str
    color: str
    timestamp: datetime
    stations: List[StationFlowItem]
    stats: LineStats
    operation: OperationInfo


class StationSearchItem(BaseModel):
    name: str
    line: str
    color: str


class StationSearchResponse(BaseModel):
    query: str
    count: int
    results: List[StationSearchItem]


class StationFlowResponse(BaseModel):
    line_id: int
    line_name: str
    station_index: int
    timestamp: datetime
    sample: StationFlowItem


class HolidayResponse(BaseModel):
    date: date
    is_holiday: bool
    holiday_name: Optional[str] = None
    calendar_mode: str


class EventRequest(BaseModel):
    date: date
    stations: List[str] = Field(default_factory=lambda: ["all"], min_length=1)
    factor: float = Field(gt=1.0, le=10.0)
    name: Optional[str] = Field(None, max_length=50)


class EventItem(BaseModel):
    date: date
    stations: List[str]
    factor: float
    name: Optional[str] = None


class SystemResponse(BaseModel):
    status: str
    color: str
    weather: str
    total_passengers: int
    timestamp: datetime


class ActiveLineRequest(BaseModel):
    line_id: Optional[int] = None  # None → 清空当前线路


class ActiveLineResponse(BaseModel):
    line_id: Optional[int] = None
    generation: int


class CanvasSizeRequest(BaseModel):
    width: float = Field(gt=0, le=10000)
    height: float = Field(gt=0, le=10000)
    viewport_width: Optional[float] = Field(None, gt=0)
    viewport_height: Optional[float] = Field(None, gt=0)


class PointerRequest(BaseModel):
    kind: POINTER_KINDS
    x: Optional[float] = None  # canvas 坐标
    y: Optional[float] = None
    client_x: Optional[float] = None  # 视口坐标 (工具提示定位)
    client_y: Optional[float] = None


class TooltipSchema(BaseModel):
    station_name: str
    passengers: int
    level: str
    color: str
    line_color: str
    left: float
    top: float


class PointerResponse(BaseModel):
    state: str
    scroll_offset_x: float
    hovered_station: Optional[str] = None
    clicked_station: Optional[str] = None
    tooltip: Optional[TooltipSchema] = None


class HeatmapStatsResponse(BaseModel):
    line_id: Optional[int] = None
    total: int
    avg: int
    peak: int
    generation: int
    last_tick: Optional[datetime] = None
