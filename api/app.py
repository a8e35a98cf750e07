# -*- coding: utf-8 -*-
"""
Metro Flow FastAPI Application
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import registry
from api.routers import heatmap, holiday, lines, stations
from src.config import Settings

logger = logging.getLogger(__name__)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry.load(settings)
    if not registry.lines:
        logger.error("线路数据为空, 热力图与模拟接口不可用: %s", settings.lines_path)
    yield
    if registry.live is not None:
        await registry.live.stop()


app = FastAPI(title="MetroFlow", version="1.0.0", lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=500)

app.include_router(lines.router, prefix="/api", tags=["lines"])
app.include_router(stations.router, prefix="/api", tags=["stations"])
app.include_router(holiday.router, prefix="/api", tags=["calendar"])
app.include_router(heatmap.router, prefix="/api", tags=["heatmap"])


@app.get(
    "/health",
    summary="服务状态",
    description="线路目录是否加载成功、线路数量、当前热力图线路。",
    response_description="status(healthy/degraded/unavailable), version, lines 数量",
)
async def health():
    if registry.simulator is None:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "detail": "Simulator not loaded"},
        )
    active = registry.live.active_line if registry.live else None
    return {
        "status": "healthy" if registry.lines else "degraded",
        "version": "1.0.0",
        "lines": len(registry.lines),
        "active_line": active.name if active else None,
    }
