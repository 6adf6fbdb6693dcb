"""事件分发：把领域事件交给订阅者（界面、提醒等），订阅者出错不影响核心。"""
import sys
from collections import defaultdict
from typing import Callable, DefaultDict, Iterable, List, Optional

from workout_pet.pet.events import EventKind, PetEvent

EventHandler = Callable[[PetEvent], None]


class EventDispatcher:
    """按事件类型分发；kind 为 None 的订阅者接收所有事件。"""

    def __init__(self) -> None:
        self._handlers: DefaultDict[Optional[EventKind], List[EventHandler]] = defaultdict(list)

    def subscribe(self, handler: EventHandler, kind: Optional[EventKind] = None) -> None:
        self._handlers[kind].append(handler)

    def unsubscribe(self, handler: EventHandler, kind: Optional[EventKind] = None) -> bool:
        handlers = self._handlers.get(kind, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def dispatch(self, events: Iterable[PetEvent]) -> None:
        for event in events:
            for handler in self._handlers.get(event.kind, []) + self._handlers.get(None, []):
                try:
                    handler(event)
                except Exception as e:
                    print(f"[宠物-事件] 处理 {event.kind.value} 失败: {e}", file=sys.stderr, flush=True)
