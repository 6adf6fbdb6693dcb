"""宠物与最长寿记录数据模型。"""
import uuid
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PetSpecies(str, Enum):
    """物种：创建时确定，只影响外观。"""
    FUFUFAFA = "FUFUFAFA"
    KIKIMORA = "KIKIMORA"
    BUBBLES = "BUBBLES"
    SPARKLE = "SPARKLE"


class PetStage(IntEnum):
    """成长阶段，按顺序只进不退。"""
    EGG = 0
    BABY = 1
    CHILD = 2
    TEEN = 3
    ADULT = 4
    ELDER = 5

    def next(self) -> Optional["PetStage"]:
        """下一阶段；ELDER 返回 None。"""
        if self is PetStage.ELDER:
            return None
        return PetStage(self.value + 1)


class PetEmotion(str, Enum):
    """情绪，由连续喂食天数决定。"""
    HAPPY = "HAPPY"
    SAD = "SAD"
    ANGRY = "ANGRY"
    EXCITED = "EXCITED"
    SLEEPY = "SLEEPY"
    TANTRUM = "TANTRUM"
    CONTENT = "CONTENT"


class CauseOfDeath(str, Enum):
    """死因，写入最长寿记录。"""
    NEGLECTED = "neglected"
    OLD_AGE = "old_age"
    UNKNOWN = "unknown"


def _new_pet_id() -> str:
    return f"pet_{uuid.uuid4().hex[:8]}"


def _now() -> datetime:
    return datetime.now().astimezone()


def format_days(days: int) -> str:
    return f"{days} DAYS"


def format_calories(kcal: float) -> str:
    """状态页上的卡路里文字，满 1000 用 K。"""
    if kcal >= 1000:
        return f"{kcal / 1000:.0f}K KCAL"
    return f"{kcal:.0f} KCAL"


class Pet(BaseModel):
    """当前养育中的宠物（可变状态）。"""
    id: str = Field(default_factory=_new_pet_id, description="宠物唯一 ID")
    age: int = Field(0, ge=0, description="存活天数，每个喂食日 +1")
    streak: int = Field(0, ge=0, description="连续喂食天数")
    species: PetSpecies = Field(PetSpecies.FUFUFAFA, description="物种")
    stage: PetStage = Field(PetStage.EGG, description="成长阶段")
    emotion: PetEmotion = Field(PetEmotion.CONTENT, description="情绪")
    last_fed_date: date = Field(default_factory=date.today, description="上次喂食日期")
    cumulative_calories: float = Field(0.0, ge=0, description="本阶段累计卡路里（蛋）/ 今日卡路里（其他）")
    last_calorie_reset_date: date = Field(default_factory=date.today, description="卡路里上次按天重置的日期")
    current_day_calories: float = Field(0.0, ge=0, description="健康数据最近一次上报的今日卡路里")
    total_calories_consumed: float = Field(0.0, ge=0, description="一生累计吃掉的卡路里，只在孵化时增加")
    current_day_feed_count: int = Field(0, ge=0, description="今日喂食次数")
    last_feed_reset_date: date = Field(default_factory=date.today, description="喂食次数上次重置的日期")
    missed_days_count: int = Field(0, ge=0, description="连续未喂食天数")
    is_active: bool = Field(True, description="是否为当前宠物")
    is_dead: bool = Field(False, description="是否已死亡")
    created_date: datetime = Field(default_factory=_now, description="创建时间")

    model_config = ConfigDict(validate_assignment=True)

    @property
    def age_in_days(self) -> str:
        return format_days(self.age)

    @property
    def streak_in_days(self) -> str:
        return format_days(self.streak)

    @property
    def total_calories_string(self) -> str:
        return format_calories(self.total_calories_consumed)


class LongestLivedRecord(BaseModel):
    """最长寿宠物的快照，全局最多一条。"""
    pet_id: Optional[str] = Field(None, description="来源宠物 ID")
    age: int = Field(..., ge=0, description="死亡时年龄")
    species: PetSpecies
    stage: PetStage
    emotion: PetEmotion
    total_calories_consumed: float = Field(0.0, ge=0)
    final_streak: int = Field(0, ge=0, description="死亡时连续喂食天数")
    created_date: datetime
    died_date: datetime = Field(default_factory=_now)
    cause_of_death: CauseOfDeath = CauseOfDeath.UNKNOWN

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_pet(
        cls,
        pet: Pet,
        cause_of_death: CauseOfDeath = CauseOfDeath.UNKNOWN,
        died_date: Optional[datetime] = None,
    ) -> "LongestLivedRecord":
        return cls(
            pet_id=pet.id,
            age=pet.age,
            species=pet.species,
            stage=pet.stage,
            emotion=pet.emotion,
            total_calories_consumed=pet.total_calories_consumed,
            final_streak=pet.streak,
            created_date=pet.created_date,
            died_date=died_date or _now(),
            cause_of_death=cause_of_death,
        )

    @property
    def age_in_days(self) -> str:
        return format_days(self.age)

    @property
    def total_calories_string(self) -> str:
        return format_calories(self.total_calories_consumed)

    @property
    def lifespan(self) -> str:
        """「创建日 - 死亡日」，短日期格式。"""
        return f"{self.created_date:%m/%d/%y} - {self.died_date:%m/%d/%y}"
