"""运动宠物：用每天消耗的卡路里喂养、孵化并进化的虚拟宠物。"""

__version__ = "0.1.0"
