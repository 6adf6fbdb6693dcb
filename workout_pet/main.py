"""运动宠物入口：无界面运行，定时合并健康数据并推送提醒（界面层可订阅 PetBridge 信号）。"""
import signal
import sys

from PyQt6.QtCore import QCoreApplication

from workout_pet import __version__
from workout_pet.app.bridge import PetBridge
from workout_pet.config import DEBUG_MODE, ensure_dirs
from workout_pet.health.source import CalorieFileSource
from workout_pet.notify.messages import PetNotifier
from workout_pet.service import PetService


def main() -> None:
    ensure_dirs()
    app = QCoreApplication(sys.argv)
    app.setApplicationName("运动宠物")
    app.setApplicationVersion(__version__)

    service = PetService()
    PetNotifier().attach(service.dispatcher)
    # 启动时若宠物已因疏于照顾死去，直接换一颗新蛋
    snapshot = service.start(hatch_if_dead=True)
    pet = snapshot.pet
    print(
        f"[宠物] {pet.species.value} {pet.stage.name} {pet.age_in_days}，情绪 {pet.emotion.value}",
        file=sys.stderr,
        flush=True,
    )
    if DEBUG_MODE:
        print("[宠物] 调试模式已开启", file=sys.stderr, flush=True)

    bridge = PetBridge(service, CalorieFileSource(service.channel))

    def on_died(cause: str, age: int) -> None:
        # 死亡后立即孵一颗新蛋
        service.start_new_pet()

    bridge.petDied.connect(on_died)
    bridge.start()

    # Ctrl+C 退出
    signal.signal(signal.SIGINT, lambda *_: app.quit())
    code = app.exec()
    bridge.close()
    service.flush()
    sys.exit(code)


if __name__ == "__main__":
    main()
