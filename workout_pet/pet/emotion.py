"""情绪分段：连续喂食天数 → 情绪。"""
from typing import Sequence, Tuple

from workout_pet.config import EMOTION_BANDS
from workout_pet.pet.models import PetEmotion

EmotionBands = Sequence[Tuple[int, str]]


def validate_bands(bands: EmotionBands) -> None:
    """分段必须从 0 开始且下限严格递增，保证覆盖全部非负整数且互不重叠。"""
    if not bands:
        raise ValueError("情绪分段不能为空")
    lowers = [lower for lower, _ in bands]
    if lowers[0] != 0:
        raise ValueError(f"情绪分段必须从 0 开始: {lowers}")
    if any(b <= a for a, b in zip(lowers, lowers[1:])):
        raise ValueError(f"情绪分段下限必须严格递增: {lowers}")
    for _, name in bands:
        PetEmotion(name)


def emotion_for_streak(streak: int, bands: EmotionBands = EMOTION_BANDS) -> PetEmotion:
    """取下限不超过 streak 的最后一段。"""
    result = bands[0][1]
    for lower, name in bands:
        if streak < lower:
            break
        result = name
    return PetEmotion(result)
