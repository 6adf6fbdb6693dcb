"""宠物存档与最长寿记录。"""
from workout_pet.archive.archive import PetArchive
from workout_pet.archive.store import PetStore, RecordStore

__all__ = [
    "PetArchive",
    "PetStore",
    "RecordStore",
]
