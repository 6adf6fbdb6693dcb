"""健康数据（卡路里）输入。"""
from workout_pet.health.channel import CalorieChannel, CalorieReading
from workout_pet.health.source import CalorieFileSource

__all__ = [
    "CalorieChannel",
    "CalorieReading",
    "CalorieFileSource",
]
