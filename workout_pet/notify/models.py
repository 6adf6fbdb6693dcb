"""提醒数据模型。"""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class NotificationCategory(str, Enum):
    """提醒类别。"""
    EVOLUTION_READY = "EVOLUTION_READY"
    NEGLECT_WARNING = "NEGLECT_WARNING"
    PET_DEATH = "PET_DEATH"
    STREAK_MILESTONE = "STREAK_MILESTONE"
    CALORIE_MILESTONE = "CALORIE_MILESTONE"


class PetNotification(BaseModel):
    """一条待推送的提醒。"""
    category: NotificationCategory
    title: str = Field(..., description="标题")
    body: str = Field(..., description="正文")
    identifier: str = Field(..., description="唯一标识，同一标识只推送一次")
    created_at: datetime

    model_config = ConfigDict(use_enum_values=True, frozen=True)
