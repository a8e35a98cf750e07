"""
实时刷新
- 每 interval 秒对当前线路重新模拟并刷新视图
- 切换线路时 generation + 1 并取消旧任务; 结果写入视图前再次校验 generation,
  防止旧 tick 覆盖新线路的显示
"""
import asyncio
import contextlib
import logging
from datetime import datetime
from typing import Callable, Optional

from src.config import CST
from src.data import Line
from src.simulator import PassengerFlowSimulator
from src.view import HeatmapView

logger = logging.getLogger(__name__)


class LiveFeed:
    def __init__(
        self,
        simulator: PassengerFlowSimulator,
        view: HeatmapView,
        interval_seconds: float = 1.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.simulator = simulator
        self.view = view
        self.interval_seconds = interval_seconds
        self._clock = clock or (lambda: datetime.now(CST))
        self.generation = 0
        self.active_line: Optional[Line] = None
        self.last_tick: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def activate(self, line: Optional[Line]) -> int:
        """切换当前线路; 必须在事件循环内调用."""
        self.generation += 1
        self._cancel_task()
        self.active_line = line
        self.view.set_line(line)
        if line is not None:
            self._task = asyncio.get_running_loop().create_task(self._run(line, self.generation))
            logger.info("实时刷新启动: %s (generation=%d)", line.name, self.generation)
        return self.generation

    async def tick(self, line: Line, generation: int) -> bool:
        """执行一次模拟; generation 已过期时丢弃结果并返回 False."""
        now = self._clock()
        await self.simulator.holidays.resolve_async(now)
        samples = self.simulator.compute_line(line, now)
        if generation != self.generation:
            logger.debug("丢弃过期 tick: %s (generation=%d)", line.name, generation)
            return False
        self.view.apply_samples(samples)
        self.last_tick = now
        return True

    async def _run(self, line: Line, generation: int) -> None:
        while generation == self.generation:
            try:
                await self.tick(line, generation)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("实时刷新失败: %s", line.name)
            await asyncio.sleep(self.interval_seconds)

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def stop(self) -> None:
        self.generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            logger.info("实时刷新已停止")
