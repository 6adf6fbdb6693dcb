"""进化规则：各阶段门槛判断与阶段推进（含孵化时的卡路里结转）。"""
import sys
from typing import Mapping, Optional

from workout_pet import config
from workout_pet.pet.emotion import EmotionBands, emotion_for_streak, validate_bands
from workout_pet.pet.models import Pet, PetStage


class EvolutionPolicy:
    """EGG→BABY→CHILD→TEEN→ADULT→ELDER 单向状态机。"""

    def __init__(
        self,
        hatch_calories: float = config.EGG_HATCH_CALORIES,
        age_thresholds: Optional[Mapping[str, int]] = None,
        emotion_bands: EmotionBands = config.EMOTION_BANDS,
        debug: Optional[bool] = None,
    ):
        self.hatch_calories = hatch_calories
        thresholds = age_thresholds if age_thresholds is not None else config.STAGE_AGE_THRESHOLDS
        self.age_thresholds = {PetStage[name]: days for name, days in thresholds.items()}
        validate_bands(emotion_bands)
        self.emotion_bands = emotion_bands
        self.debug = config.DEBUG_MODE if debug is None else debug

    def age_threshold(self, stage: PetStage) -> Optional[int]:
        """离开该阶段所需年龄；EGG、ELDER 返回 None。"""
        return self.age_thresholds.get(stage)

    def is_ready_to_evolve(self, pet: Pet) -> bool:
        if pet.is_dead:
            return False
        if pet.stage == PetStage.EGG:
            return pet.cumulative_calories >= self.hatch_calories
        threshold = self.age_threshold(pet.stage)
        if threshold is None:
            return False
        return pet.age >= threshold

    def evolve(self, pet: Pet) -> bool:
        """满足条件时进入下一阶段，返回是否进化。"""
        if not self.is_ready_to_evolve(pet):
            return False
        self._advance(pet)
        return True

    def force_evolve(self, pet: Pet) -> bool:
        """调试用：跳过门槛，把年龄补到当前阶段门槛后进化。仅调试模式可用。"""
        if not self.debug:
            print("[宠物-进化] 非调试模式，忽略强制进化", file=sys.stderr, flush=True)
            return False
        if pet.is_dead or pet.stage.next() is None:
            return False
        previous = pet.stage
        threshold = self.age_threshold(pet.stage)
        if threshold is not None:
            pet.age = max(pet.age, threshold)
        self._advance(pet)
        print(
            f"[宠物-进化] 强制进化 {previous.name} → {pet.stage.name}，年龄 {pet.age}",
            file=sys.stderr,
            flush=True,
        )
        return True

    def _advance(self, pet: Pet) -> None:
        if pet.stage == PetStage.EGG:
            # 孵化：蛋期累计卡路里一次性计入终身消耗；累计值保持不变
            pet.total_calories_consumed += pet.cumulative_calories
        pet.stage = pet.stage.next()
        pet.emotion = emotion_for_streak(pet.streak, self.emotion_bands)
