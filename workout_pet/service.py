"""宠物服务：当前宠物的唯一持有者。

所有状态变更都经过这里并串行执行（一把 RLock），变更后尝试写盘，
再把事件交给分发器。写盘失败只记录，内存状态为准，下次操作时重试。
"""
import sys
import threading
from datetime import datetime
from typing import Callable, List, Optional

from workout_pet.archive.archive import PetArchive, new_egg
from workout_pet.health.channel import CalorieChannel
from workout_pet.notify.dispatcher import EventDispatcher
from workout_pet.pet.events import HealthReport, PetEvent, Transition
from workout_pet.pet.evolution import EvolutionPolicy
from workout_pet.pet.lifecycle import PetLifecycle, PetSnapshot
from workout_pet.pet.models import CauseOfDeath, LongestLivedRecord, Pet, PetSpecies


def _local_now() -> datetime:
    return datetime.now().astimezone()


class PetService:
    """串联档案、生命周期、卡路里通道与事件分发。"""

    def __init__(
        self,
        archive: Optional[PetArchive] = None,
        channel: Optional[CalorieChannel] = None,
        dispatcher: Optional[EventDispatcher] = None,
        policy: Optional[EvolutionPolicy] = None,
        species: PetSpecies = PetSpecies.FUFUFAFA,
        clock: Callable[[], datetime] = _local_now,
    ):
        self.archive = archive or PetArchive()
        self.channel = channel or CalorieChannel()
        self.dispatcher = dispatcher or EventDispatcher()
        self.policy = policy or EvolutionPolicy()
        self.species = species
        self._clock = clock
        self._lock = threading.RLock()
        self._lifecycle: Optional[PetLifecycle] = None
        self._dirty = False
        self._pending_record: Optional[LongestLivedRecord] = None

    # ---- 状态 ----

    @property
    def lifecycle(self) -> PetLifecycle:
        if self._lifecycle is None:
            raise RuntimeError("PetService 尚未 start()")
        return self._lifecycle

    @property
    def pet(self) -> Pet:
        return self.lifecycle.pet

    @property
    def dirty(self) -> bool:
        """是否有尚未成功写盘的变更（宠物或最长寿记录）。"""
        return self._dirty

    def now(self) -> datetime:
        return self._clock()

    def snapshot(self) -> PetSnapshot:
        with self._lock:
            return self.lifecycle.snapshot()

    def is_ready_to_evolve(self) -> bool:
        with self._lock:
            return self.lifecycle.is_ready_to_evolve()

    def longest_lived(self) -> Optional[LongestLivedRecord]:
        return self.archive.longest_lived()

    # ---- 启动 / 新宠物 ----

    def start(self, now: Optional[datetime] = None, hatch_if_dead: bool = False) -> PetSnapshot:
        """载入（或新建）当前宠物，并立即做一次健康检查。

        hatch_if_dead 为真时，宠物在这次检查中死去会直接孵一颗新蛋。
        """
        now = now or self._clock()
        with self._lock:
            try:
                pet = self.archive.get_or_create_active_pet(self.species, now)
            except OSError as e:
                print(f"[宠物-服务] 载入宠物失败，先用内存中的新蛋: {e}", file=sys.stderr, flush=True)
                pet = new_egg(self.species, now)
                self._dirty = True
            self._lifecycle = PetLifecycle(pet, self.policy)
            report = self.check_health(now)
            if hatch_if_dead and report.died:
                return self.start_new_pet(now=now)
            return self.lifecycle.snapshot()

    def start_new_pet(self, species: Optional[PetSpecies] = None, now: Optional[datetime] = None) -> Optional[PetSnapshot]:
        """当前宠物死亡后重新孵一颗蛋；宠物还活着时返回 None。"""
        now = now or self._clock()
        with self._lock:
            if self._lifecycle is not None and not self.pet.is_dead:
                return None
            if self._dirty and self._lifecycle is not None:
                # 先把死去的宠物和待写的记录落盘
                self._persist()
            species = species or self.species
            try:
                pet = self.archive.create_new_pet(species, now)
            except OSError as e:
                print(f"[宠物-服务] 新宠物写盘失败: {e}", file=sys.stderr, flush=True)
                pet = new_egg(species, now)
                self._dirty = True
            self._lifecycle = PetLifecycle(pet, self.policy)
            return self.lifecycle.snapshot()

    # ---- 操作 ----

    def feed(self, now: Optional[datetime] = None) -> Transition:
        with self._lock:
            return self._apply(self.lifecycle.feed(now or self._clock()))

    def update_calories(
        self,
        today_calories: Optional[float],
        external_cumulative: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> Transition:
        with self._lock:
            transition = self.lifecycle.update_calories(today_calories, now or self._clock(), external_cumulative)
            if not transition.ok and today_calories is None:
                print("[宠物-服务] 健康数据暂无，保留上次的卡路里", file=sys.stderr, flush=True)
            return self._apply(transition)

    def drain_calories(self, now: Optional[datetime] = None) -> int:
        """处理通道里所有读数，返回生效的条数。非今天的旧读数直接丢弃。"""
        now = now or self._clock()
        applied = 0
        with self._lock:
            for reading in self.channel.drain():
                if reading.day != now.date():
                    print(f"[宠物-服务] 丢弃过期读数 {reading.day}", file=sys.stderr, flush=True)
                    continue
                if not reading.has_data:
                    print("[宠物-服务] 健康数据暂无，保留上次的卡路里", file=sys.stderr, flush=True)
                    continue
                today_calories = reading.calories
                if today_calories is None:
                    today_calories = self.pet.current_day_calories
                transition = self._apply(self.lifecycle.update_calories(today_calories, now, reading.cumulative))
                if transition.ok:
                    applied += 1
        return applied

    def check_health(self, now: Optional[datetime] = None) -> HealthReport:
        now = now or self._clock()
        with self._lock:
            report = self.lifecycle.check_health(now)
            if report.died:
                self._record_death(report.cause, now)
            self._finish(report.events, changed=report.days_missed > 0 or report.died)
            return report

    def evolve(self, now: Optional[datetime] = None) -> Transition:
        with self._lock:
            return self._apply(self.lifecycle.evolve(now or self._clock()))

    def force_evolve(self, now: Optional[datetime] = None) -> Transition:
        with self._lock:
            return self._apply(self.lifecycle.force_evolve(now or self._clock()))

    def flush(self) -> bool:
        """重试尚未成功的写盘。"""
        with self._lock:
            if not self._dirty:
                return True
            return self._persist()

    # ---- 内部 ----

    def _apply(self, transition: Transition) -> Transition:
        self._finish(transition.events, changed=transition.ok)
        return transition

    def _finish(self, events: List[PetEvent], changed: bool) -> None:
        if changed or self._dirty:
            self._persist()
        if events:
            self.dispatcher.dispatch(events)

    def _persist(self) -> bool:
        try:
            if self._pending_record is not None:
                self.archive.save_record(self._pending_record)
                self._pending_record = None
            self.archive.pet_store.save(self.pet)
        except OSError as e:
            print(f"[宠物-服务] 保存失败，稍后重试: {e}", file=sys.stderr, flush=True)
            self._dirty = True
            return False
        self._dirty = False
        return True

    def _record_death(self, cause: CauseOfDeath, now: datetime) -> None:
        try:
            record = self.archive.record_death(self.pet, cause, now)
        except OSError as e:
            print(f"[宠物-服务] 写入死亡记录失败，稍后重试: {e}", file=sys.stderr, flush=True)
            self.pet.is_active = False
            self._pending_record = LongestLivedRecord.from_pet(self.pet, cause, died_date=now)
            self._dirty = True
            return
        if record is not None:
            print(f"[宠物-服务] 新的最长寿记录：{record.age} 天", file=sys.stderr, flush=True)
