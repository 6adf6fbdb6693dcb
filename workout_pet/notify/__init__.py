"""事件分发与提醒推送。"""
from workout_pet.notify.dispatcher import EventDispatcher
from workout_pet.notify.messages import PetNotifier, build_notification
from workout_pet.notify.models import NotificationCategory, PetNotification

__all__ = [
    "EventDispatcher",
    "NotificationCategory",
    "PetNotification",
    "PetNotifier",
    "build_notification",
]
