"""事件 → 提醒文案；以及把提醒交给推送通道的 PetNotifier。"""
import sys
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Set

from workout_pet import config
from workout_pet.notify.dispatcher import EventDispatcher
from workout_pet.notify.models import NotificationCategory, PetNotification
from workout_pet.pet.events import EventKind, PetEvent
from workout_pet.pet.models import CauseOfDeath

NotificationSink = Callable[[PetNotification], None]


def _text(kind: EventKind, payload: Mapping[str, Any]):
    """返回 (类别, 标题, 正文, 标识片段)；不需要提醒时返回 None。"""
    if kind == EventKind.EVOLUTION_READY:
        stage = payload.get("stage", "")
        return (NotificationCategory.EVOLUTION_READY, "🌟 可以进化了！",
                f"你的 {stage} 宠物可以进化了，快来看看它的变化！", f"evolution_ready_{stage}")

    if kind == EventKind.EVOLVED:
        stage = payload.get("to_stage", "")
        return (NotificationCategory.EVOLUTION_READY, "🎉 进化完成！",
                f"恭喜！你的宠物进化成了 {stage}！继续加油！", f"evolution_completed_{stage}")

    if kind == EventKind.NEGLECT_WARNING:
        days = payload.get("days_missed")
        if days == 1:
            return (NotificationCategory.NEGLECT_WARNING, "😟 宠物想你了！",
                    "距离上次喂食已经一天了，它有点饿了！", "neglect_warning_day1")
        if days == 2:
            return (NotificationCategory.NEGLECT_WARNING, "🚨 宠物很虚弱！",
                    "已经两天没喂了！再不喂它可能撑不住了……", "neglect_warning_day2")
        return None

    if kind == EventKind.DIED:
        age = payload.get("age", 0)
        if payload.get("cause") == CauseOfDeath.NEGLECTED.value:
            return (NotificationCategory.PET_DEATH, "💔 你的宠物离开了",
                    f"它活了 {age} 天，因为疏于照顾去世了。重新孵一颗蛋吧！", "pet_death")
        return (NotificationCategory.PET_DEATH, "🌈 你的宠物度过了圆满的一生",
                f"它活了整整 {age} 天！是时候迎接新伙伴了。", "pet_death")

    if kind == EventKind.STREAK_MILESTONE:
        streak = payload.get("streak")
        if streak not in config.STREAK_MILESTONES:
            return None
        return (NotificationCategory.STREAK_MILESTONE, "🔥 连续喂食里程碑！",
                f"太棒了！你已经连续喂食 {streak} 天，宠物状态超好！", f"streak_milestone_{streak}")

    if kind == EventKind.CALORIE_MILESTONE:
        calories = int(payload.get("calories", 0))
        tag = f"calorie_milestone_{payload.get('tier', calories)}"
        if payload.get("is_egg"):
            if calories >= 200:
                return (NotificationCategory.CALORIE_MILESTONE, "🥚 蛋要孵化了！",
                        f"你已经消耗了 {calories} 千卡！快来孵化你的宠物吧！", tag)
            if calories >= 100:
                return (NotificationCategory.CALORIE_MILESTONE, "🥚 蛋在晃动！",
                        f"你已经消耗了 {calories} 千卡！继续运动就能孵化了！", tag)
            return None
        if calories >= 600:
            return (NotificationCategory.CALORIE_MILESTONE, "🔥 全部食物已解锁！",
                    f"你已经消耗了 {calories} 千卡以上！宠物有一桌大餐在等着！", tag)
        if calories >= 400:
            return (NotificationCategory.CALORIE_MILESTONE, "🔥 更多食物可以吃了！",
                    f"你已经消耗了 {calories} 千卡！有 2 份食物等着宠物！", tag)
        if calories >= 200:
            return (NotificationCategory.CALORIE_MILESTONE, "🍎 食物准备好了！",
                    f"你已经消耗了 {calories} 千卡！宠物的食物准备好了！", tag)
        return None

    return None


def build_notification(event: PetEvent) -> Optional[PetNotification]:
    """把事件翻译成提醒；不需要提醒的事件返回 None。"""
    text = _text(event.kind, event.payload)
    if text is None:
        return None
    category, title, body, tag = text
    return PetNotification(
        category=category,
        title=title,
        body=body,
        identifier=f"{event.pet_id}_{tag}_{event.at:%Y%m%d}",
        created_at=event.at,
    )


def stderr_sink(notification: PetNotification) -> None:
    print(f"[宠物-提醒] {notification.title} {notification.body}", file=sys.stderr, flush=True)


class PetNotifier:
    """订阅事件并推送提醒；同一标识只推送一次，推送失败只记录。"""

    def __init__(self, sink: Optional[NotificationSink] = None):
        self.sink = sink or stderr_sink
        self._sent: Set[str] = set()

    def attach(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(self.on_event)

    def on_event(self, event: PetEvent) -> None:
        self.notify(event.kind, event.payload, event)

    def notify(self, kind: EventKind, payload: Dict[str, Any], event: Optional[PetEvent] = None) -> Optional[PetNotification]:
        """即发即忘：返回实际推送的提醒（重复或无需提醒时为 None）。"""
        if event is None:
            event = PetEvent(kind=kind, pet_id="", payload=payload, at=datetime.now().astimezone())
        notification = build_notification(event)
        if notification is None or notification.identifier in self._sent:
            return None
        try:
            self.sink(notification)
        except Exception as e:
            print(f"[宠物-提醒] 推送失败: {e}", file=sys.stderr, flush=True)
            return None
        self._sent.add(notification.identifier)
        return notification
