"""宠物模型、情绪、进化与生命周期。"""
from workout_pet.pet.emotion import emotion_for_streak
from workout_pet.pet.events import EventKind, HealthReport, PetEvent, Transition
from workout_pet.pet.evolution import EvolutionPolicy
from workout_pet.pet.lifecycle import PetLifecycle, PetSnapshot
from workout_pet.pet.models import (
    CauseOfDeath,
    LongestLivedRecord,
    Pet,
    PetEmotion,
    PetSpecies,
    PetStage,
)

__all__ = [
    "CauseOfDeath",
    "EventKind",
    "EvolutionPolicy",
    "HealthReport",
    "LongestLivedRecord",
    "Pet",
    "PetEmotion",
    "PetEvent",
    "PetLifecycle",
    "PetSnapshot",
    "PetSpecies",
    "PetStage",
    "Transition",
    "emotion_for_streak",
]
