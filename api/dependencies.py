"""
服务单例管理.
应用启动时加载一次线路目录并构建模拟器/视图/实时刷新, 所有请求复用.
"""
import sys
import threading
from pathlib import Path
from typing import List, Optional

# 项目根目录加入 sys.path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.config import Settings
from src.data import Line, load_lines
from src.holiday import HolidayResolver
from src.live import LiveFeed
from src.simulator import PassengerFlowSimulator
from src.view import HeatmapView


class ServiceRegistry:
    def __init__(self):
        self.settings: Optional[Settings] = None
        self.lines: List[Line] = []
        self.holidays: Optional[HolidayResolver] = None
        self.simulator: Optional[PassengerFlowSimulator] = None
        self.view: Optional[HeatmapView] = None
        self.live: Optional[LiveFeed] = None
        self.lock = threading.RLock()  # Protects view state mutations (pointer, resize, line switch)

    def load(self, settings: Optional[Settings] = None, lines: Optional[List[Line]] = None):
        self.settings = settings or Settings.from_env()
        self.lines = load_lines(self.settings.lines_path) if lines is None else list(lines)
        self.holidays = HolidayResolver(
            api_url=self.settings.holiday_api_url,
            timeout_seconds=self.settings.holiday_timeout_seconds,
        )
        self.simulator = PassengerFlowSimulator(self.lines, self.holidays, seed=self.settings.sim_seed)
        self.view = HeatmapView()
        self.live = LiveFeed(self.simulator, self.view, interval_seconds=self.settings.tick_interval_seconds)

    def get_simulator(self) -> PassengerFlowSimulator:
        if self.simulator is None:
            raise RuntimeError("Simulator not loaded")
        return self.simulator

    def find_line(self, line_id: int) -> Optional[Line]:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def lines_for_station(self, station_name: str) -> List[Line]:
        return [line for line in self.lines if station_name in line.station_names]


registry = ServiceRegistry()
