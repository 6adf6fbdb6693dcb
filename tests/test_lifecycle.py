"""宠物生命周期测试：喂食、卡路里、健康检查、进化。"""
from datetime import datetime, timedelta

from workout_pet.archive.archive import new_egg
from workout_pet.pet.events import EventKind
from workout_pet.pet.evolution import EvolutionPolicy
from workout_pet.pet.lifecycle import PetLifecycle
from workout_pet.pet.models import CauseOfDeath, PetEmotion, PetStage

D0 = datetime(2026, 10, 1, 9, 0)


def day(n: int, hour: int = 9) -> datetime:
    return D0.replace(hour=hour) + timedelta(days=n)


def _lifecycle(**fields) -> PetLifecycle:
    pet = new_egg(now=D0)
    for key, value in fields.items():
        setattr(pet, key, value)
    return PetLifecycle(pet, EvolutionPolicy(debug=False))


def test_scenario_hatch_feed_then_neglect() -> None:
    lc = _lifecycle()
    t = lc.update_calories(220, D0)
    assert t.ok
    assert lc.is_ready_to_evolve() is True
    assert EventKind.EVOLUTION_READY in t.kinds()

    t = lc.evolve(D0)
    assert t.ok
    assert lc.pet.stage == PetStage.BABY
    assert lc.pet.total_calories_consumed == 220
    assert t.events[0].payload["from_stage"] == "EGG"

    lc.feed(day(1))
    assert lc.pet.age == 1
    assert lc.pet.streak == 1

    report = lc.check_health(day(5))
    assert report.died_from_neglect is True
    assert report.cause == CauseOfDeath.NEGLECTED
    assert lc.pet.is_dead is True
    assert lc.pet.emotion == PetEmotion.SAD
    assert report.events[-1].kind == EventKind.DIED


def test_same_day_feed_is_idempotent() -> None:
    lc = _lifecycle()
    lc.feed(day(1, 8))
    age, streak = lc.pet.age, lc.pet.streak
    t = lc.feed(day(1, 20))
    assert t.ok
    assert (lc.pet.age, lc.pet.streak) == (age, streak)
    assert lc.pet.current_day_feed_count == 2
    assert t.events[0].payload["credited"] is False


def test_feed_on_creation_day_does_not_age() -> None:
    lc = _lifecycle()
    lc.feed(D0)
    assert lc.pet.age == 0
    assert lc.pet.current_day_feed_count == 1


def test_feed_count_resets_next_day() -> None:
    lc = _lifecycle()
    lc.feed(day(1))
    lc.feed(day(1, 12))
    lc.feed(day(2))
    assert lc.pet.current_day_feed_count == 1


def test_feed_resets_missed_days_and_updates_emotion() -> None:
    lc = _lifecycle(streak=5, missed_days_count=1)
    lc.feed(day(1))
    assert lc.pet.missed_days_count == 0
    assert lc.pet.streak == 6
    assert lc.pet.emotion == PetEmotion.CONTENT


def test_streak_milestone_event() -> None:
    lc = _lifecycle(streak=6)
    t = lc.feed(day(1))
    assert EventKind.STREAK_MILESTONE in t.kinds()
    assert t.events[1].payload["streak"] == 7
    t = lc.feed(day(1, 18))
    assert EventKind.STREAK_MILESTONE not in t.kinds()


def test_feeding_does_not_evolve() -> None:
    lc = _lifecycle(stage=PetStage.BABY, age=6)
    t = lc.feed(day(1))
    assert lc.pet.stage == PetStage.BABY
    assert EventKind.EVOLUTION_READY in t.kinds()


def test_dead_pet_is_frozen() -> None:
    lc = _lifecycle(stage=PetStage.CHILD, age=20, streak=9, emotion=PetEmotion.SAD, is_dead=True)
    before = lc.pet.model_dump()
    assert lc.feed(day(1)).ok is False
    assert lc.evolve(day(1)).ok is False
    assert lc.update_calories(500, day(1)).ok is False
    assert lc.check_health(day(10)).events == []
    after = lc.pet.model_dump()
    for key in ("stage", "emotion", "age", "streak", "current_day_calories"):
        assert after[key] == before[key]


def test_egg_calories_same_day_replace_today() -> None:
    lc = _lifecycle()
    lc.update_calories(100, D0)
    lc.update_calories(150, D0)
    assert lc.pet.cumulative_calories == 150
    lc.update_calories(150, D0)
    assert lc.pet.cumulative_calories == 150
    assert lc.pet.current_day_calories == 150


def test_egg_calories_persist_across_days() -> None:
    lc = _lifecycle()
    lc.update_calories(120, D0)
    lc.update_calories(50, day(1))
    assert lc.pet.cumulative_calories == 170
    assert lc.pet.current_day_calories == 50
    assert lc.pet.last_calorie_reset_date == day(1).date()


def test_egg_external_cumulative_is_authoritative() -> None:
    lc = _lifecycle()
    lc.update_calories(50, D0, external_cumulative=300)
    assert lc.pet.cumulative_calories == 300
    assert lc.pet.current_day_calories == 50
    assert lc.pet.total_calories_consumed == 0


def test_non_egg_calories_are_daily_only() -> None:
    lc = _lifecycle(stage=PetStage.BABY, total_calories_consumed=220)
    lc.update_calories(300, D0)
    assert lc.pet.cumulative_calories == 300
    lc.update_calories(40, day(1))
    assert lc.pet.cumulative_calories == 40
    assert lc.pet.total_calories_consumed == 220


def test_missing_calorie_data_keeps_last_value() -> None:
    lc = _lifecycle()
    lc.update_calories(80, D0)
    t = lc.update_calories(None, D0)
    assert t.ok is False
    assert lc.pet.current_day_calories == 80
    assert lc.pet.cumulative_calories == 80


def test_calorie_milestones_fire_once_per_tier() -> None:
    lc = _lifecycle(stage=PetStage.BABY)
    t = lc.update_calories(250, D0)
    assert [e.payload["tier"] for e in t.events if e.kind == EventKind.CALORIE_MILESTONE] == [200]
    t = lc.update_calories(450, D0)
    assert [e.payload["tier"] for e in t.events if e.kind == EventKind.CALORIE_MILESTONE] == [400]
    t = lc.update_calories(450, D0)
    assert t.events == []


def test_egg_milestone_reports_cumulative() -> None:
    lc = _lifecycle()
    t = lc.update_calories(110, D0)
    milestone = next(e for e in t.events if e.kind == EventKind.CALORIE_MILESTONE)
    assert milestone.payload == {"tier": 100, "calories": 110, "is_egg": True}


def test_missed_days_reset_streak_and_warn() -> None:
    lc = _lifecycle(streak=30, emotion=PetEmotion.HAPPY)
    report = lc.check_health(day(1))
    assert report.died is False
    assert report.days_missed == 1
    assert lc.pet.streak == 0
    assert lc.pet.missed_days_count == 1
    assert lc.pet.emotion == PetEmotion.SAD
    assert [e.payload["days_missed"] for e in report.events] == [1]

    report = lc.check_health(day(2))
    assert [e.payload["days_missed"] for e in report.events] == [2]
    assert lc.pet.is_dead is False


def test_same_day_health_check_changes_nothing() -> None:
    lc = _lifecycle(streak=10)
    report = lc.check_health(day(0, 23))
    assert report.days_missed == 0
    assert lc.pet.streak == 10


def test_old_age_death() -> None:
    lc = _lifecycle(stage=PetStage.ELDER, age=1000)
    report = lc.check_health(D0)
    assert report.died_from_old_age is True
    assert report.died_from_neglect is False
    assert report.cause == CauseOfDeath.OLD_AGE
    assert lc.pet.emotion == PetEmotion.SLEEPY
    assert report.events[-1].payload == {"cause": "old_age", "age": 1000}


def test_neglect_and_old_age_together_count_as_neglect() -> None:
    lc = _lifecycle(stage=PetStage.ELDER, age=1200)
    report = lc.check_health(day(3))
    assert report.died_from_neglect is True
    assert report.died_from_old_age is True
    assert report.cause == CauseOfDeath.NEGLECTED
    assert lc.pet.emotion == PetEmotion.SAD
    assert [e.kind for e in report.events] == [EventKind.DIED]


def test_snapshot_is_a_copy() -> None:
    lc = _lifecycle(cumulative_calories=300)
    snap = lc.snapshot()
    assert snap.is_ready_to_evolve is True
    lc.evolve(D0)
    assert snap.pet.stage == PetStage.EGG
    assert lc.pet.stage == PetStage.BABY


def test_force_evolve_through_lifecycle() -> None:
    pet = new_egg(now=D0)
    lc = PetLifecycle(pet, EvolutionPolicy(debug=True))
    t = lc.force_evolve(D0)
    assert t.ok
    assert t.events[0].payload["to_stage"] == "BABY"
    assert _lifecycle().force_evolve(D0).ok is False
