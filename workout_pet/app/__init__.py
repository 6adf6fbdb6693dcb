"""Qt 事件循环接入。"""
