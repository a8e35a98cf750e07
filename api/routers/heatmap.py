# -*- coding: utf-8 -*-
"""
Heatmap Router
==============
当前线路热力图: 线路切换 (重启实时刷新)、SVG 帧、统计、指针/触摸事件与画布尺寸。
"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from api.dependencies import registry
from api.routers.lines import get_line_or_404
from api.schemas import (
    ActiveLineRequest, ActiveLineResponse, CanvasSizeRequest, HeatmapStatsResponse,
    PointerRequest, PointerResponse, TooltipSchema,
)

router = APIRouter()


@router.put(
    "/heatmap/line",
    response_model=ActiveLineResponse,
    summary="切换热力图线路",
    description="设置当前线路并重启实时刷新 (旧线路的刷新结果不会再写入视图)。line_id 为空时清空。",
)
async def set_active_line(req: ActiveLineRequest):
    line = get_line_or_404(req.line_id) if req.line_id is not None else None
    with registry.lock:
        generation = registry.live.activate(line)
    return ActiveLineResponse(line_id=line.id if line else None, generation=generation)


@router.get(
    "/heatmap.svg",
    summary="热力图 SVG",
    description="以当前滚动偏移与悬停状态绘制一帧热力图; 未选择线路时返回提示画面。",
    response_class=Response,
)
async def get_heatmap_svg():
    with registry.lock:
        svg = registry.view.render_svg()
    return Response(content=svg, media_type="image/svg+xml", headers={"Cache-Control": "no-store"})


@router.get("/heatmap/stats", response_model=HeatmapStatsResponse, summary="热力图统计")
async def get_heatmap_stats():
    view = registry.view
    stats = view.stats
    return HeatmapStatsResponse(
        line_id=view.line.id if view.line else None,
        total=stats["total"],
        avg=stats["avg"],
        peak=stats["peak"],
        generation=registry.live.generation,
        last_tick=registry.live.last_tick,
    )


@router.put("/heatmap/size", summary="画布尺寸", status_code=204, response_class=Response)
async def set_canvas_size(req: CanvasSizeRequest):
    viewport = None
    if req.viewport_width and req.viewport_height:
        viewport = (req.viewport_width, req.viewport_height)
    with registry.lock:
        registry.view.resize(req.width, req.height, viewport)
    return Response(status_code=204)


@router.post(
    "/heatmap/pointer",
    response_model=PointerResponse,
    summary="指针/触摸事件",
    description="转发 canvas 上的指针或触摸事件: 命中站点显示工具提示, 未命中则开始拖拽平移。",
    response_description="交互状态、滚动偏移、悬停/点击站点与工具提示位置",
)
async def handle_pointer(req: PointerRequest):
    needs_coords = req.kind not in ("leave", "up", "touchend")
    if needs_coords and (req.x is None or req.y is None):
        raise HTTPException(status_code=400, detail=f"{req.kind} 事件需要 x, y 坐标")

    view = registry.view
    with registry.lock:
        result = view.pointer(req.kind, req.x, req.y)
        client_x = req.client_x if req.client_x is not None else (req.x or 0.0)
        client_y = req.client_y if req.client_y is not None else (req.y or 0.0)
        tooltip = view.tooltip(result, client_x, client_y)

    return PointerResponse(
        state=result.state.value,
        scroll_offset_x=result.scroll_offset_x,
        hovered_station=result.hovered.station_data.station_name if result.hovered else None,
        clicked_station=result.clicked.station_data.station_name if result.clicked else None,
        tooltip=TooltipSchema(**tooltip) if tooltip else None,
    )
