# -*- coding: utf-8 -*-
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.dependencies import registry
from api.routers.lines import require_lines, to_flow_item
from api.schemas import StationFlowResponse, StationSearchItem, StationSearchResponse
from src.config import CST
from src.utils import normalize_station_name

router = APIRouter()


@router.get(
    "/stations/search",
    response_model=StationSearchResponse,
    summary="站点搜索",
    description="在全部线路中按子串匹配站点名，返回站点名、所属线路与线路颜色。",
)
async def search_stations(q: str = Query(..., min_length=1, max_length=20, description="站点名关键字 (例: 车公庙)")):
    query = q.strip()
    results = [
        StationSearchItem(name=station.name, line=line.name, color=line.color)
        for line in require_lines()
        for station in line.stations
        if query and query in station.name
    ]
    return StationSearchResponse(query=query, count=len(results), results=results)


@router.get(
    "/stations/{station_name}/flow",
    response_model=StationFlowResponse,
    summary="单站实时客流",
    description="按需计算单个站点在指定线路 (未指定时取第一条经过该站的线路) 上的客流样本。",
)
async def get_station_flow(station_name: str, line_id: Optional[int] = None):
    require_lines()
    name = normalize_station_name(station_name)
    candidates = registry.lines_for_station(name)
    if line_id is not None:
        candidates = [line for line in candidates if line.id == line_id]
    if not candidates:
        raise HTTPException(status_code=404, detail=f"站点不存在: {station_name}")

    line = candidates[0]
    index = line.station_names.index(name)
    simulator = registry.get_simulator()
    now = datetime.now(CST)

    await registry.holidays.resolve_async(now)
    sample = simulator.compute_sample(name, line.name, index, len(line.stations), now)
    return StationFlowResponse(
        line_id=line.id,
        line_name=line.name,
        station_index=index,
        timestamp=now,
        sample=to_flow_item(sample, simulator),
    )
