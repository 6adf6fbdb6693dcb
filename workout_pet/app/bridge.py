"""Qt 桥接：定时拉取健康数据、做健康检查，把宠物事件转成 Qt 信号供界面订阅。"""
from typing import Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from workout_pet.config import CALORIE_POLL_INTERVAL_MS, HEALTH_CHECK_INTERVAL_MS
from workout_pet.health.source import CalorieFileSource
from workout_pet.pet.events import EventKind, PetEvent
from workout_pet.pet.models import PetStage
from workout_pet.service import PetService


class PetBridge(QObject):
    """界面层与 PetService 之间的唯一通道（所有调用都在 Qt 主线程）。"""
    petEvolved = pyqtSignal(str, str)    # 原阶段, 新阶段
    petDied = pyqtSignal(str, int)       # 死因, 年龄
    evolutionReady = pyqtSignal(str)     # 当前阶段
    stateChanged = pyqtSignal(object)    # PetSnapshot

    def __init__(
        self,
        service: PetService,
        source: Optional[CalorieFileSource] = None,
        poll_interval_ms: int = CALORIE_POLL_INTERVAL_MS,
        health_interval_ms: int = HEALTH_CHECK_INTERVAL_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._service = service
        self._source = source
        self._service.dispatcher.subscribe(self._on_event)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(poll_interval_ms)
        self._poll_timer.timeout.connect(self.poll_calories)
        self._health_timer = QTimer(self)
        self._health_timer.setInterval(health_interval_ms)
        self._health_timer.timeout.connect(self.run_health_check)

    def start(self) -> None:
        self._poll_timer.start()
        self._health_timer.start()
        self.poll_calories()

    def stop(self) -> None:
        self._poll_timer.stop()
        self._health_timer.stop()

    def close(self) -> None:
        """停止定时器并退订事件，之后不再发出信号。"""
        self.stop()
        self._service.dispatcher.unsubscribe(self._on_event)

    def poll_calories(self) -> None:
        """拉一次健康数据（蛋阶段连同累计值）并合并进宠物状态。"""
        if self._source is not None:
            pet = self._service.pet
            egg_since = pet.created_date.date() if pet.stage == PetStage.EGG else None
            self._source.poll(self._service.now().date(), egg_since)
        self._service.drain_calories()
        self._service.flush()
        self.stateChanged.emit(self._service.snapshot())

    def run_health_check(self) -> None:
        self._service.check_health()
        self.stateChanged.emit(self._service.snapshot())

    def feed(self) -> bool:
        ok = self._service.feed().ok
        self.stateChanged.emit(self._service.snapshot())
        return ok

    def evolve(self) -> bool:
        ok = self._service.evolve().ok
        self.stateChanged.emit(self._service.snapshot())
        return ok

    def _on_event(self, event: PetEvent) -> None:
        payload = event.payload
        if event.kind == EventKind.EVOLVED:
            self.petEvolved.emit(payload["from_stage"], payload["to_stage"])
        elif event.kind == EventKind.DIED:
            self.petDied.emit(payload["cause"], int(payload["age"]))
        elif event.kind == EventKind.EVOLUTION_READY:
            self.evolutionReady.emit(payload["stage"])
