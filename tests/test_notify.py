"""事件分发与提醒文案测试。"""
from datetime import datetime
from typing import List

from workout_pet.notify.dispatcher import EventDispatcher
from workout_pet.notify.messages import PetNotifier, build_notification
from workout_pet.notify.models import NotificationCategory, PetNotification
from workout_pet.pet.events import EventKind, PetEvent

AT = datetime(2026, 10, 2, 20, 0)


def _event(kind: EventKind, **payload) -> PetEvent:
    return PetEvent(kind=kind, pet_id="pet_test", payload=payload, at=AT)


def test_neglect_warning_only_first_two_days() -> None:
    day1 = build_notification(_event(EventKind.NEGLECT_WARNING, days_missed=1))
    day2 = build_notification(_event(EventKind.NEGLECT_WARNING, days_missed=2))
    assert day1.category == NotificationCategory.NEGLECT_WARNING.value
    assert "一天" in day1.body
    assert "两天" in day2.body
    assert day1.identifier != day2.identifier
    assert build_notification(_event(EventKind.NEGLECT_WARNING, days_missed=3)) is None


def test_death_messages_depend_on_cause() -> None:
    neglected = build_notification(_event(EventKind.DIED, cause="neglected", age=12))
    old_age = build_notification(_event(EventKind.DIED, cause="old_age", age=1000))
    assert "12" in neglected.body and "疏于照顾" in neglected.body
    assert "1000" in old_age.body
    assert neglected.title != old_age.title


def test_calorie_milestone_texts() -> None:
    wiggle = build_notification(_event(EventKind.CALORIE_MILESTONE, tier=100, calories=120, is_egg=True))
    hatch = build_notification(_event(EventKind.CALORIE_MILESTONE, tier=200, calories=210, is_egg=True))
    feast = build_notification(_event(EventKind.CALORIE_MILESTONE, tier=600, calories=640, is_egg=False))
    assert "晃动" in wiggle.title
    assert "孵化" in hatch.title
    assert "640" in feast.body
    assert build_notification(_event(EventKind.CALORIE_MILESTONE, tier=0, calories=50, is_egg=False)) is None


def test_streak_and_evolution_texts() -> None:
    streak = build_notification(_event(EventKind.STREAK_MILESTONE, streak=30))
    assert "30" in streak.body
    assert build_notification(_event(EventKind.STREAK_MILESTONE, streak=31)) is None
    ready = build_notification(_event(EventKind.EVOLUTION_READY, stage="BABY"))
    done = build_notification(_event(EventKind.EVOLVED, from_stage="BABY", to_stage="CHILD"))
    assert ready.category == done.category == NotificationCategory.EVOLUTION_READY.value
    assert "CHILD" in done.body


def test_fed_event_has_no_notification() -> None:
    assert build_notification(_event(EventKind.FED, age=1, streak=1, feed_count=1, credited=True)) is None


def test_notifier_sends_each_identifier_once() -> None:
    sent: List[PetNotification] = []
    notifier = PetNotifier(sink=sent.append)
    event = _event(EventKind.STREAK_MILESTONE, streak=7)
    notifier.on_event(event)
    notifier.on_event(event)
    assert len(sent) == 1
    assert notifier.notify(EventKind.FED, {}) is None


def test_notifier_sink_failure_is_contained() -> None:
    def broken(notification: PetNotification) -> None:
        raise RuntimeError("push service down")

    notifier = PetNotifier(sink=broken)
    event = _event(EventKind.EVOLUTION_READY, stage="EGG")
    assert notifier.notify(event.kind, event.payload, event) is None


def test_notifier_attached_to_dispatcher() -> None:
    sent: List[PetNotification] = []
    dispatcher = EventDispatcher()
    PetNotifier(sink=sent.append).attach(dispatcher)
    dispatcher.dispatch([
        _event(EventKind.FED, age=1),
        _event(EventKind.DIED, cause="neglected", age=4),
    ])
    assert [n.category for n in sent] == [NotificationCategory.PET_DEATH.value]


def test_dispatcher_routes_by_kind() -> None:
    dispatcher = EventDispatcher()
    died: List[PetEvent] = []
    everything: List[PetEvent] = []
    dispatcher.subscribe(died.append, EventKind.DIED)
    dispatcher.subscribe(everything.append)
    dispatcher.dispatch([_event(EventKind.FED), _event(EventKind.DIED, cause="old_age", age=1000)])
    assert [e.kind for e in died] == [EventKind.DIED]
    assert len(everything) == 2
    assert dispatcher.unsubscribe(died.append, EventKind.DIED) is True
    assert dispatcher.unsubscribe(died.append, EventKind.DIED) is False
