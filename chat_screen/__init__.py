"""Chat Screen 顶层包。

一个最小的桌面问答界面：输入框 + 发送按钮 + 问答历史列表，
每次发送都是一次独立的单轮 chat/completions 调用。
"""

from chat_screen.domain.models import Exchange, Failure, Success
from chat_screen.ui.controller import ChatController

__all__ = ["ChatController", "Exchange", "Failure", "Success"]
