# -*- coding: utf-8 -*-
from datetime import datetime

from fastapi import APIRouter, HTTPException

from api.dependencies import registry
from api.schemas import (
    CongestionSchema, LineDetail, LineFlowResponse, LineStats, LineSummary,
    OperationInfo, StationFlowItem,
)
from src.config import CST

router = APIRouter()


def require_lines():
    if not registry.lines:
        raise HTTPException(status_code=503, detail="线路数据加载失败，请检查数据源或稍后重试")
    return registry.lines


def get_line_or_404(line_id: int):
    require_lines()
    line = registry.find_line(line_id)
    if line is None:
        raise HTTPException(status_code=404, detail=f"线路不存在: {line_id}")
    return line


def to_congestion(level) -> CongestionSchema:
    return CongestionSchema(level=level.level, color=level.color, emoji=level.emoji)


def to_flow_item(sample, simulator) -> StationFlowItem:
    return StationFlowItem(
        station_name=sample.station_name,
        passengers=sample.passengers,
        congestion=to_congestion(sample.congestion),
        is_off_service=sample.is_off_service,
        trend=sample.trend,
        tier=simulator.classifier.classify(sample.station_name).value,
    )


@router.get(
    "/lines",
    response_model=list[LineSummary],
    summary="线路列表",
    description="返回全部线路的 id、名称、颜色与站点数量。",
)
async def list_lines():
    return [
        LineSummary(id=line.id, name=line.name, color=line.color, station_count=len(line.stations))
        for line in require_lines()
    ]


@router.get("/lines/{line_id}", response_model=LineDetail, summary="线路详情")
async def get_line(line_id: int):
    line = get_line_or_404(line_id)
    return LineDetail(
        id=line.id,
        name=line.name,
        color=line.color,
        station_count=len(line.stations),
        stations=line.station_names,
    )


@router.get(
    "/lines/{line_id}/flow",
    response_model=LineFlowResponse,
    summary="线路实时客流",
    description="按当前时间模拟整条线路每个站点的客流与拥挤等级，并附带线路统计与运营信息。",
    response_description="站点样本列表、统计 (总量/均值/最繁忙/最空闲)、运营信息",
)
async def get_line_flow(line_id: int):
    line = get_line_or_404(line_id)
    simulator = registry.get_simulator()
    now = datetime.now(CST)

    await registry.holidays.resolve_async(now)
    samples = simulator.compute_line(line, now)
    stats = simulator.calculate_line_stats(line, samples, now)
    level = stats["congestion_level"]

    return LineFlowResponse(
        line_id=line.id,
        line_name=line.name,
        color=line.color,
        timestamp=now,
        stations=[to_flow_item(s, simulator) for s in samples],
        stats=LineStats(
            total_passengers=stats["total_passengers"],
            avg_passengers=stats["avg_passengers"],
            max_passengers=stats["max_passengers"],
            min_passengers=stats["min_passengers"],
            congestion_level=to_congestion(level) if level is not None else None,
            busiest_station=stats["busiest_station"],
            quietest_station=stats["quietest_station"],
            stations_count=stats["stations_count"],
        ),
        operation=OperationInfo(**simulator.line_operation_info(line, now)),
    )
