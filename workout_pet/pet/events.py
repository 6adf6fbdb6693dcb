"""领域事件：状态变更函数只返回事件，副作用交给分发器。"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from workout_pet.pet.models import CauseOfDeath


class EventKind(str, Enum):
    """事件类型。"""
    FED = "fed"
    EVOLVED = "evolved"
    DIED = "died"
    EVOLUTION_READY = "evolution_ready"
    NEGLECT_WARNING = "neglect_warning"
    STREAK_MILESTONE = "streak_milestone"
    CALORIE_MILESTONE = "calorie_milestone"


class PetEvent(BaseModel):
    """一次状态变更产生的事件。"""
    kind: EventKind
    pet_id: str = Field(..., description="宠物 ID")
    payload: Dict[str, Any] = Field(default_factory=dict)
    at: datetime

    model_config = ConfigDict(frozen=True)


class Transition(BaseModel):
    """操作结果：是否生效 + 产生的事件。失败不抛异常。"""
    ok: bool
    events: List[PetEvent] = Field(default_factory=list)
    reason: str = ""

    def kinds(self) -> List[EventKind]:
        return [e.kind for e in self.events]


class HealthReport(BaseModel):
    """健康检查结果。"""
    died_from_neglect: bool = False
    died_from_old_age: bool = False
    days_missed: int = 0
    events: List[PetEvent] = Field(default_factory=list)

    @property
    def died(self) -> bool:
        return self.died_from_neglect or self.died_from_old_age

    @property
    def cause(self) -> Optional[CauseOfDeath]:
        """同时触发时按疏于照顾处理。"""
        if self.died_from_neglect:
            return CauseOfDeath.NEGLECTED
        if self.died_from_old_age:
            return CauseOfDeath.OLD_AGE
        return None
