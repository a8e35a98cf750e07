"""节假日查询服务 (远程查询 + 本地缓存 + 静态兜底表)."""

import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional
from urllib.request import Request, urlopen

from src.config import DEFAULT_HOLIDAY_API_URL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HolidayInfo:
    is_holiday: bool
    holiday_name: Optional[str] = None

    @property
    def is_spring_festival(self) -> bool:
        # 远程服务按天命名: 除夕 / 初一 ... 初七
        if not self.is_holiday or not self.holiday_name:
            return False
        name = self.holiday_name
        return "春节" in name or name == "除夕" or name.startswith("初")


# MMDD 区间 → 节日名 (闭区间); 远程服务不可用时使用
FALLBACK_HOLIDAY_RANGES = [
    ("0101", "0101", "元旦"),
    ("0128", "0204", "春节"),
    ("0404", "0406", "清明节"),
    ("0501", "0505", "劳动节"),
    ("0531", "0602", "端午节"),
    ("1001", "1007", "国庆节"),
]


def _to_date(day) -> date:
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    return date.fromisoformat(str(day))


def fallback_holiday(day) -> HolidayInfo:
    """按静态 MMDD 表判断节假日."""
    code = _to_date(day).strftime("%m%d")
    for start, end, name in FALLBACK_HOLIDAY_RANGES:
        if start <= code <= end:
            return HolidayInfo(is_holiday=True, holiday_name=name)
    return HolidayInfo(is_holiday=False, holiday_name=None)


class HolidayResolver:
    """按日期查询是否为节假日; 结果 (包括兜底结果) 在进程内缓存, 永不过期."""

    def __init__(self, api_url: str = DEFAULT_HOLIDAY_API_URL, timeout_seconds: float = 4.0):
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._cache: Dict[date, HolidayInfo] = {}
        self._lock = threading.RLock()
        self._inflight: Dict[date, asyncio.Future] = {}

    def cached(self, day) -> Optional[HolidayInfo]:
        with self._lock:
            return self._cache.get(_to_date(day))

    def resolve(self, day) -> HolidayInfo:
        """返回指定日期的节假日信息. 不抛异常."""
        key = _to_date(day)
        cached = self.cached(key)
        if cached is not None:
            return cached

        try:
            info = self._fetch(key)
        except Exception as e:
            logger.warning("节假日接口查询失败 (%s), 使用兜底表: %s", key.isoformat(), e)
            info = fallback_holiday(key)

        with self._lock:
            self._cache[key] = info
        return info

    async def resolve_async(self, day) -> HolidayInfo:
        """异步版本: 同一日期的并发查询合并为一个请求."""
        key = _to_date(day)
        cached = self.cached(key)
        if cached is not None:
            return cached

        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(asyncio.to_thread(self.resolve, key))
            self._inflight[key] = future
            future.add_done_callback(lambda _f, k=key: self._inflight.pop(k, None))
        return await asyncio.shield(future)

    def _fetch(self, day: date) -> HolidayInfo:
        url = self.api_url.format(date=day.isoformat())
        request = Request(url, headers={"User-Agent": "metroflow/1.0", "Accept": "application/json"})
        with urlopen(request, timeout=self.timeout_seconds) as response:
            raw = response.read().decode("utf-8")
        return self._extract_holiday(raw)

    def _extract_holiday(self, raw_body) -> HolidayInfo:
        """解析 ``{code: 0, holiday: {holiday, name} | null}`` 响应."""
        data = json.loads(raw_body)
        if not isinstance(data, dict) or data.get("code") != 0:
            raise ValueError(f"unexpected holiday service status: {data!r:.120}")

        holiday = data.get("holiday")
        if holiday is None:
            return HolidayInfo(is_holiday=False, holiday_name=None)
        if not isinstance(holiday, dict) or not isinstance(holiday.get("holiday"), bool):
            raise ValueError(f"malformed holiday payload: {holiday!r:.120}")

        if holiday["holiday"]:
            return HolidayInfo(is_holiday=True, holiday_name=holiday.get("name") or None)
        # 调休补班日: 工作日
        return HolidayInfo(is_holiday=False, holiday_name=None)
