"""本地健康数据来源：读取外部同步工具导出的每日卡路里 JSON，推入通道。

文件格式：{"daily": {"2026-10-19": 230.5, ...}}
"""
import json
import sys
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from workout_pet.config import CALORIE_EXPORT_FILE, HEALTH_DATA_DIR
from workout_pet.health.channel import CalorieChannel


def _sum_between(daily: Dict[date, float], since: date, today: date) -> float:
    return sum(v for d, v in daily.items() if since <= d <= today)


class CalorieFileSource:
    """按需轮询导出文件；读不到数据时推送空读数，由核心保留上次的值。"""

    def __init__(self, channel: CalorieChannel, path: Optional[Path] = None):
        self.channel = channel
        self.path = path or HEALTH_DATA_DIR / CALORIE_EXPORT_FILE

    def _load_daily(self) -> Dict[date, float]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return {date.fromisoformat(k): float(v) for k, v in data.get("daily", {}).items()}
        except (OSError, ValueError, TypeError, AttributeError) as e:
            print(f"[宠物-健康] 读取卡路里文件失败: {e}", file=sys.stderr, flush=True)
            return {}

    def poll(self, today: date, egg_since: Optional[date] = None) -> None:
        """推送今天的读数；egg_since 非空时（蛋阶段）同时推送累计值。"""
        daily = self._load_daily()
        today_value = daily.get(today)
        if today_value is None:
            print(f"[宠物-健康] {today} 没有卡路里数据", file=sys.stderr, flush=True)
        if egg_since is None or not daily:
            self.channel.report_daily_calories(today, today_value)
            return
        if egg_since > today:
            egg_since = today
        total = _sum_between(daily, egg_since, today)
        self.channel.report_cumulative_calories(today, egg_since, total, today_value)
