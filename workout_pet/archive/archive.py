"""宠物档案馆：当前宠物的选取/创建，以及死亡时更新最长寿记录。"""
import sys
from datetime import datetime
from typing import Optional

from workout_pet.archive.store import PetStore, RecordStore
from workout_pet.pet.models import CauseOfDeath, LongestLivedRecord, Pet, PetSpecies


def new_egg(species: PetSpecies = PetSpecies.FUFUFAFA, now: Optional[datetime] = None) -> Pet:
    """一颗新蛋，各日期从 now 所在日算起。"""
    now = now or datetime.now().astimezone()
    today = now.date()
    return Pet(
        species=species,
        created_date=now,
        last_fed_date=today,
        last_calorie_reset_date=today,
        last_feed_reset_date=today,
    )


class PetArchive:
    """基于 PetStore / RecordStore 的档案操作。写盘失败时抛出 OSError。"""

    def __init__(
        self,
        pet_store: Optional[PetStore] = None,
        record_store: Optional[RecordStore] = None,
    ):
        self.pet_store = pet_store or PetStore()
        self.record_store = record_store or RecordStore()

    def get_or_create_active_pet(
        self,
        species: PetSpecies = PetSpecies.FUFUFAFA,
        now: Optional[datetime] = None,
    ) -> Pet:
        """取当前活着的宠物；没有则新建一颗蛋。"""
        active = self.pet_store.list_active()
        if active:
            if len(active) > 1:
                print(f"[宠物-档案] 发现 {len(active)} 只当前宠物，使用最新的一只", file=sys.stderr, flush=True)
            return max(active, key=lambda p: p.created_date)
        return self.create_new_pet(species, now)

    def create_new_pet(
        self,
        species: PetSpecies = PetSpecies.FUFUFAFA,
        now: Optional[datetime] = None,
    ) -> Pet:
        """新建一颗蛋并设为当前宠物，其余宠物取消当前标记。"""
        for old in self.pet_store.list_all():
            if old.is_active:
                old.is_active = False
                self.pet_store.save(old)
        pet = new_egg(species, now)
        self.pet_store.save(pet)
        return pet

    def longest_lived(self) -> Optional[LongestLivedRecord]:
        return self.record_store.load()

    def save_record(self, record: LongestLivedRecord) -> bool:
        """写入记录；已有同样长寿或更长寿的记录时不写，返回是否写入。"""
        current = self.record_store.load()
        if current is not None and record.age <= current.age:
            return False
        self.record_store.save(record)
        return True

    def record_death(
        self,
        pet: Pet,
        cause_of_death: CauseOfDeath = CauseOfDeath.UNKNOWN,
        now: Optional[datetime] = None,
    ) -> Optional[LongestLivedRecord]:
        """宠物死亡：比记录活得久（严格大于）才替换记录；返回新记录或 None。"""
        new_record = LongestLivedRecord.from_pet(pet, cause_of_death, died_date=now)
        # 单文件覆盖即「删除旧记录 + 写入新记录」
        if not self.save_record(new_record):
            new_record = None

        pet.is_dead = True
        pet.is_active = False
        self.pet_store.save(pet)
        return new_record
