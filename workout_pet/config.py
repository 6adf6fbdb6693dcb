"""运动宠物全局配置与路径。"""
import os
from pathlib import Path

# 项目根目录（workout_pet 包所在目录的上一级）
ROOT_DIR = Path(__file__).resolve().parent.parent
# 数据目录：宠物存档、最长寿记录、健康数据导出等；可用环境变量覆盖
DATA_DIR = Path(os.environ.get("WORKOUT_PET_DATA_DIR", "") or ROOT_DIR / "data")
PETS_DIR = DATA_DIR / "pets"
ARCHIVE_DIR = DATA_DIR / "archive"  # 最长寿宠物记录
HEALTH_DATA_DIR = DATA_DIR / "health"  # 卡路里导出文件

# 调试模式：开启后才允许强制进化、输出调试日志
DEBUG_MODE = os.environ.get("WORKOUT_PET_DEBUG", "").strip() == "1"

# 孵化：蛋阶段累计消耗卡路里达到此值即可孵化
EGG_HATCH_CALORIES = 200.0
# 进化到下一阶段所需年龄（天），键为当前阶段；EGG 看卡路里，ELDER 为终点
STAGE_AGE_THRESHOLDS = {
    "BABY": 7,
    "CHILD": 15,
    "TEEN": 25,
    "ADULT": 40,
}

# 连续未喂食天数达到此值宠物死亡
NEGLECT_DEATH_DAYS = 3
# 年龄达到此值宠物寿终
OLD_AGE_DAYS = 1000

# 情绪分段：(连续天数下限, 情绪)，按下限升序
EMOTION_BANDS = (
    (0, "SAD"),
    (6, "CONTENT"),
    (21, "HAPPY"),
    (51, "EXCITED"),
    (101, "TANTRUM"),
)

# 提醒里程碑
STREAK_MILESTONES = (7, 14, 30, 50, 100, 200, 365)
EGG_CALORIE_MILESTONES = (100, 200)
DAILY_CALORIE_MILESTONES = (200, 400, 600)
# 只在错过第 1、2 天时提醒
NEGLECT_WARNING_DAYS = (1, 2)

# 健康数据轮询（毫秒），5 分钟
CALORIE_POLL_INTERVAL_MS = 300_000
# 健康检查（毫秒），1 小时
HEALTH_CHECK_INTERVAL_MS = 3_600_000
CALORIE_EXPORT_FILE = "calories.json"


def ensure_dirs() -> None:
    """确保数据目录存在。"""
    for d in (DATA_DIR, PETS_DIR, ARCHIVE_DIR, HEALTH_DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
