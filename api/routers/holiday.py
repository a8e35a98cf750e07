# -*- coding: utf-8 -*-
"""
Calendar & System Router
========================
节假日查询、特殊事件登记与系统状态。
"""
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.dependencies import registry
from api.schemas import EventItem, EventRequest, HolidayResponse, SystemResponse
from src.config import CST
from src.patterns import calendar_mode
from src.simulator import SpecialEvent

router = APIRouter()


@router.get(
    "/holiday",
    response_model=HolidayResponse,
    summary="节假日查询",
    description="查询指定日期 (默认今天) 是否为节假日以及对应的客流日历模式。"
    "远程服务不可用时使用内置节假日表。",
)
async def get_holiday(day: Optional[str] = Query(None, description="日期 YYYY-MM-DD (默认今天)")):
    if day:
        try:
            target = date.fromisoformat(day.strip())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"日期格式错误: {day} (应为 YYYY-MM-DD)")
    else:
        target = datetime.now(CST).date()
    info = await registry.holidays.resolve_async(target)
    moment = datetime(target.year, target.month, target.day, 12, tzinfo=CST)
    return HolidayResponse(
        date=target,
        is_holiday=info.is_holiday,
        holiday_name=info.holiday_name,
        calendar_mode=calendar_mode(moment, info).value,
    )


def _event_item(event: SpecialEvent) -> EventItem:
    return EventItem(date=event.date, stations=sorted(event.stations), factor=event.factor, name=event.name)


@router.get("/events", response_model=list[EventItem], summary="特殊事件列表")
async def list_events():
    return [_event_item(e) for e in registry.get_simulator().special_events]


@router.post(
    "/events",
    response_model=EventItem,
    status_code=201,
    summary="登记特殊事件",
    description="登记演唱会、展会等特殊事件; 事件当天受影响站点 (或 all) 的客流乘以 factor。",
)
async def add_event(req: EventRequest):
    event = SpecialEvent(
        date=req.date,
        stations=frozenset(s.strip() for s in req.stations if s.strip()),
        factor=req.factor,
        name=req.name,
    )
    registry.get_simulator().add_event(event)
    return _event_item(event)


@router.get("/system", response_model=SystemResponse, summary="系统运营状态")
async def get_system():
    simulator = registry.get_simulator()
    now = datetime.now(CST)
    await registry.holidays.resolve_async(now)
    status = simulator.system_status(now)
    return SystemResponse(
        status=status["status"],
        color=status["color"],
        weather=simulator.current_weather,
        total_passengers=simulator.total_system_passengers(now),
        timestamp=now,
    )
