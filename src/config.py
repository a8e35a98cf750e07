"""
Runtime configuration.

Values come from environment variables (optionally loaded from ``.env`` by
run.py). Simulation and layout tunables live in their own frozen dataclasses
next to the code that consumes them.
"""
import os
from dataclasses import dataclass, field
from datetime import timedelta, timezone
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).parent.parent

# 深圳 = UTC+8, 全服务统一使用北京时间
CST = timezone(timedelta(hours=8))

DEFAULT_HOLIDAY_API_URL = "https://timor.tech/api/holiday/info/{date}"


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


@dataclass(frozen=True)
class Settings:
    lines_path: Path = PROJECT_ROOT / "data" / "lines.json"
    holiday_api_url: str = DEFAULT_HOLIDAY_API_URL
    holiday_timeout_seconds: float = 4.0
    tick_interval_seconds: float = 1.0
    sim_seed: Optional[int] = None
    allowed_origins: List[str] = field(default_factory=lambda: [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ])

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            lines_path=Path(os.getenv("LINES_PATH", str(defaults.lines_path))),
            holiday_api_url=os.getenv("HOLIDAY_API_URL", defaults.holiday_api_url),
            holiday_timeout_seconds=float(os.getenv("HOLIDAY_TIMEOUT_SECONDS", defaults.holiday_timeout_seconds)),
            tick_interval_seconds=float(os.getenv("TICK_INTERVAL_SECONDS", defaults.tick_interval_seconds)),
            sim_seed=_optional_int(os.getenv("SIM_SEED")),
            allowed_origins=os.getenv(
                "ALLOWED_ORIGINS", ",".join(defaults.allowed_origins)
            ).split(","),
        )
