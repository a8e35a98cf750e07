"""
地铁线路目录加载
- lines.json: [{id, name, color, stations: [str | {name}]}]
- 站点在入口处统一规范为 Station(name), 下游模块不再判断形态
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from src.utils import normalize_station_name

logger = logging.getLogger(__name__)

DEFAULT_LINE_COLOR = "#10b981"


@dataclass(frozen=True)
class Station:
    name: str


@dataclass(frozen=True)
class Line:
    id: int
    name: str
    color: str
    stations: Tuple[Station, ...]

    @property
    def station_names(self) -> List[str]:
        return [s.name for s in self.stations]


def parse_line(raw: dict, position: int = 0) -> Line:
    stations = tuple(
        Station(normalize_station_name(ref, index=i))
        for i, ref in enumerate(raw.get("stations") or [])
    )
    return Line(
        id=int(raw.get("id", position + 1)),
        name=str(raw.get("name") or f"线路{position + 1}"),
        color=str(raw.get("color") or DEFAULT_LINE_COLOR),
        stations=stations,
    )


def load_lines(path) -> List[Line]:
    """线路数据加载; 失败时返回空列表 (由调用方展示错误信息)."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_lines = json.load(f)
        if not isinstance(raw_lines, list):
            raise ValueError(f"线路数据格式错误: 期望数组, 实际为 {type(raw_lines).__name__}")
        lines = [parse_line(raw, i) for i, raw in enumerate(raw_lines)]
    except Exception:
        logger.exception("加载线路数据失败: %s", path)
        return []

    logger.info("线路数据加载成功, 共 %d 条线路", len(lines))
    return lines
