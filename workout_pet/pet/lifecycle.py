"""宠物生命周期：喂食、卡路里更新、健康检查与进化。

PetLifecycle 持有一只宠物的可变状态，所有操作都是同步的纯数据变换，
不做任何 I/O；结果以 Transition / HealthReport 返回，附带产生的事件，
由调用方负责持久化与分发。
"""
from datetime import date, datetime
from typing import Any, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from workout_pet import config
from workout_pet.pet.emotion import emotion_for_streak
from workout_pet.pet.events import EventKind, HealthReport, PetEvent, Transition
from workout_pet.pet.evolution import EvolutionPolicy
from workout_pet.pet.models import Pet, PetEmotion, PetStage

Moment = Union[date, datetime]


def as_date(value: Moment) -> date:
    """datetime 取日历日；date 原样返回。"""
    if isinstance(value, datetime):
        return value.date()
    return value


def as_datetime(value: Moment) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day).astimezone()


def crossed_tier(before: float, after: float, tiers: Sequence[int]) -> Optional[int]:
    """从 before 涨到 after 时越过的最高档位。"""
    crossed = [t for t in tiers if before < t <= after]
    return max(crossed) if crossed else None


class PetSnapshot(BaseModel):
    """给渲染层的只读快照。"""
    pet: Pet
    is_ready_to_evolve: bool

    model_config = ConfigDict(frozen=True)


class PetLifecycle:
    """单只宠物的状态机。"""

    def __init__(
        self,
        pet: Pet,
        policy: Optional[EvolutionPolicy] = None,
        neglect_death_days: int = config.NEGLECT_DEATH_DAYS,
        old_age_days: int = config.OLD_AGE_DAYS,
    ):
        self.pet = pet
        self.policy = policy or EvolutionPolicy()
        self.neglect_death_days = neglect_death_days
        self.old_age_days = old_age_days

    # ---- 查询 ----

    def is_ready_to_evolve(self) -> bool:
        return self.policy.is_ready_to_evolve(self.pet)

    def snapshot(self) -> PetSnapshot:
        return PetSnapshot(pet=self.pet.model_copy(deep=True), is_ready_to_evolve=self.is_ready_to_evolve())

    # ---- 操作 ----

    def feed(self, now: Moment) -> Transition:
        """喂食。同一天多次喂食只计一次年龄与连续天数。"""
        pet = self.pet
        if pet.is_dead:
            return Transition(ok=False, reason="宠物已死亡，不能喂食")
        was_ready = self.is_ready_to_evolve()
        today = as_date(now)
        credited = today != pet.last_fed_date
        if credited:
            pet.age += 1
            pet.streak += 1
            pet.last_fed_date = today
            pet.missed_days_count = 0

        self._reset_feed_count_if_new_day(today)
        pet.current_day_feed_count += 1
        self._update_emotion()

        events = [
            self._event(EventKind.FED, now, age=pet.age, streak=pet.streak,
                        feed_count=pet.current_day_feed_count, credited=credited),
        ]
        if credited and pet.streak in config.STREAK_MILESTONES:
            events.append(self._event(EventKind.STREAK_MILESTONE, now, streak=pet.streak))
        events.extend(self._readiness_events(was_ready, now))
        return Transition(ok=True, events=events)

    def update_calories(
        self,
        today_calories: Optional[float],
        now: Moment,
        external_cumulative: Optional[float] = None,
    ) -> Transition:
        """合并健康数据上报的今日卡路里。

        蛋阶段的累计值跨天保留（孵化进度），其他阶段只是当天的计量。
        没有数据（None）时保留上次的值。
        """
        pet = self.pet
        if today_calories is None:
            return Transition(ok=False, reason="没有卡路里数据，保留上次的值")
        if pet.is_dead:
            return Transition(ok=False, reason="宠物已死亡")
        was_ready = self.is_ready_to_evolve()
        today = as_date(now)
        today_calories = max(0.0, float(today_calories))
        previous_cumulative = pet.cumulative_calories
        previous_day = pet.current_day_calories
        rolled_over = pet.last_calorie_reset_date != today

        pet.current_day_calories = today_calories
        if rolled_over:
            if pet.stage != PetStage.EGG:
                pet.cumulative_calories = 0.0
            pet.last_calorie_reset_date = today

        if pet.stage == PetStage.EGG:
            if external_cumulative is not None:
                pet.cumulative_calories = max(0.0, float(external_cumulative))
            else:
                # 跨天：之前的累计全部保留，再加上今天的值（不减去前一天的值）。
                # 同一天重复上报：先减去上次记下的今天的值，再加上新值
                base = previous_cumulative if rolled_over else max(0.0, previous_cumulative - previous_day)
                pet.cumulative_calories = base + today_calories
            tier = crossed_tier(previous_cumulative, pet.cumulative_calories, config.EGG_CALORIE_MILESTONES)
            milestone_value = pet.cumulative_calories
        else:
            pet.cumulative_calories = today_calories
            before = 0.0 if rolled_over else previous_day
            tier = crossed_tier(before, today_calories, config.DAILY_CALORIE_MILESTONES)
            milestone_value = today_calories

        events: List[PetEvent] = []
        if tier is not None:
            events.append(self._event(
                EventKind.CALORIE_MILESTONE, now,
                tier=tier, calories=int(milestone_value), is_egg=pet.stage == PetStage.EGG,
            ))
        events.extend(self._readiness_events(was_ready, now))
        return Transition(ok=True, events=events)

    def check_health(self, now: Moment) -> HealthReport:
        """按日历日检查是否错过喂食、是否老死。"""
        pet = self.pet
        if pet.is_dead:
            return HealthReport(days_missed=pet.missed_days_count)
        report = HealthReport()
        days = (as_date(now) - pet.last_fed_date).days

        if days > 0:
            pet.missed_days_count = days
            report.days_missed = days
            if days >= self.neglect_death_days:
                pet.is_dead = True
                pet.emotion = PetEmotion.SAD
                report.died_from_neglect = True
            else:
                pet.streak = 0
                self._update_emotion()
                if days in config.NEGLECT_WARNING_DAYS:
                    report.events.append(self._event(EventKind.NEGLECT_WARNING, now, days_missed=days))

        if pet.age >= self.old_age_days:
            if not pet.is_dead:
                pet.is_dead = True
                pet.emotion = PetEmotion.SLEEPY
            report.died_from_old_age = True

        if report.died:
            report.events.append(self._event(
                EventKind.DIED, now, cause=report.cause.value, age=pet.age,
            ))
        return report

    def evolve(self, now: Moment) -> Transition:
        """进化到下一阶段；未满足条件时返回 ok=False。"""
        pet = self.pet
        if pet.is_dead:
            return Transition(ok=False, reason="宠物已死亡，不能进化")
        previous = pet.stage
        if not self.policy.evolve(pet):
            return Transition(ok=False, reason=f"{previous.name} 尚未满足进化条件")
        return Transition(ok=True, events=[self._evolved_event(previous, now)])

    def force_evolve(self, now: Moment) -> Transition:
        """调试用强制进化。"""
        previous = self.pet.stage
        if not self.policy.force_evolve(self.pet):
            return Transition(ok=False, reason="强制进化不可用")
        return Transition(ok=True, events=[self._evolved_event(previous, now)])

    # ---- 内部 ----

    def _update_emotion(self) -> None:
        if self.pet.is_dead:
            return
        self.pet.emotion = emotion_for_streak(self.pet.streak, self.policy.emotion_bands)

    def _reset_feed_count_if_new_day(self, today: date) -> None:
        if self.pet.last_feed_reset_date != today:
            self.pet.current_day_feed_count = 0
            self.pet.last_feed_reset_date = today

    def _readiness_events(self, was_ready: bool, now: Moment) -> List[PetEvent]:
        if was_ready or not self.is_ready_to_evolve():
            return []
        return [self._event(EventKind.EVOLUTION_READY, now, stage=self.pet.stage.name)]

    def _evolved_event(self, previous: PetStage, now: Moment) -> PetEvent:
        return self._event(
            EventKind.EVOLVED, now,
            from_stage=previous.name, to_stage=self.pet.stage.name,
            total_calories_consumed=self.pet.total_calories_consumed,
        )

    def _event(self, kind: EventKind, now: Moment, **payload: Any) -> PetEvent:
        return PetEvent(kind=kind, pet_id=self.pet.id, payload=dict(payload), at=as_datetime(now))
