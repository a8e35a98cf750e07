"""
pytest 配置
"""
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# 项目根目录加入 sys.path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="session")
def test_client():
    """FastAPI 测试客户端 (节假日接口一律失败 → 使用兜底表; 实时刷新间隔 1 小时)"""
    with patch.dict(os.environ, {"TICK_INTERVAL_SECONDS": "3600"}):
        from api.app import app
    with patch("src.holiday.urlopen", side_effect=OSError("offline")):
        with TestClient(app) as client:
            yield client


@pytest.fixture
def offline_resolver():
    """网络不可用的 HolidayResolver"""
    from src.holiday import HolidayResolver

    resolver = HolidayResolver(api_url="http://holiday.invalid/{date}")
    with patch("src.holiday.urlopen", side_effect=OSError("offline")):
        yield resolver


@pytest.fixture
def sample_lines():
    """小型线路目录: 车公庙 3 条线, 福田 2 条线"""
    from src.data import parse_line

    raw = [
        {"id": 1, "name": "1号线", "color": "#00a04a",
         "stations": ["罗湖", "老街", "购物公园", "车公庙", "世界之窗"]},
        {"id": 5, "name": "5号线", "color": "#9f5fbf",
         "stations": ["前海湾", "西丽", "深圳北站", "五和", "车公庙", "坂田", "布吉", "福田", "太安", "黄贝岭"]},
        {"id": 11, "name": "11号线", "color": "#6f2c91",
         "stations": [{"name": "福田"}, {"name": "车公庙"}, "后海", "机场"]},
    ]
    return [parse_line(r, i) for i, r in enumerate(raw)]


@pytest.fixture
def simulator(sample_lines, offline_resolver):
    """jitter 关闭的确定性模拟器"""
    from src.simulator import FlowParams, PassengerFlowSimulator

    return PassengerFlowSimulator(sample_lines, offline_resolver, params=FlowParams(jitter=0.0), seed=7)
