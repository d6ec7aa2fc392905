"""Completion Client 抽象接口。

Controller 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：
complete(prompt) 挂起直到远端调用结束，返回 Success 或 Failure，从不抛异常。
"""

from typing import Protocol

from chat_screen.domain.models import ChatRequest, ChatResult, CompletionResult


class CompletionClient(Protocol):
    """单轮补全客户端协议。

    - name: Provider 名称，用于日志。
    - chat(req): 原始调用，失败时抛出 BusinessError 子类。
    - complete(prompt): 对外边界，把所有错误收敛为 Failure。
    """

    name: str

    async def chat(self, req: ChatRequest) -> ChatResult:
        ...

    async def complete(self, prompt: str) -> CompletionResult:
        ...
