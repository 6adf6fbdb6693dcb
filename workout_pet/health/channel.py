"""卡路里数据通道：健康数据来源推入读数，核心逻辑在自己的线程里取出。"""
import queue
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CalorieReading(BaseModel):
    """一次健康数据读数。calories 为 None 表示这次没有拿到数据。"""
    day: date = Field(..., description="读数所属日期")
    calories: Optional[float] = Field(None, ge=0, description="当天消耗卡路里")
    cumulative: Optional[float] = Field(None, ge=0, description="自 since 以来的累计卡路里")
    since: Optional[date] = Field(None, description="累计起始日期")

    model_config = ConfigDict(frozen=True)

    @property
    def has_data(self) -> bool:
        return self.calories is not None or self.cumulative is not None


class CalorieChannel:
    """线程安全的读数队列，来源可在任意线程推送。"""

    def __init__(self) -> None:
        self._queue: "queue.Queue[CalorieReading]" = queue.Queue()

    def push(self, reading: CalorieReading) -> None:
        self._queue.put(reading)

    def report_daily_calories(self, day: date, value: Optional[float]) -> None:
        self.push(CalorieReading(day=day, calories=value))

    def report_cumulative_calories(self, day: date, since: date, value: float,
                                   today_value: Optional[float] = None) -> None:
        """蛋阶段：自 since 起的累计值，可同时带上今天的值。"""
        self.push(CalorieReading(day=day, calories=today_value, cumulative=value, since=since))

    def drain(self) -> List[CalorieReading]:
        """取出当前所有读数（按推送顺序）。"""
        out = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out
