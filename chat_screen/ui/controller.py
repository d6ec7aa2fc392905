"""输入控制器。

持有草稿与历史，把一次提交变成一次补全调用，再把结果写回历史。
成功时清空草稿；失败时草稿保持原样。并发提交互不影响，
历史顺序按完成先后（最后完成的排在最前）。
"""

import logging
from typing import Callable, List, Optional

from chat_screen.domain.models import ERROR_PREFIX, CompletionResult, Exchange, Failure
from chat_screen.domain.state import ChatState
from chat_screen.infrastructure.logging.logger import logger
from chat_screen.providers.base import CompletionClient


Listener = Callable[[ChatState], None]


class ChatController:
    def __init__(self, client: CompletionClient, state: Optional[ChatState] = None):
        self._client = client
        self._state = state or ChatState()
        self._listeners: List[Listener] = []

    @property
    def client(self) -> CompletionClient:
        return self._client

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def draft(self) -> str:
        return self._state.draft

    @property
    def history(self) -> List[Exchange]:
        return list(self._state.history)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def set_draft(self, text: str) -> None:
        self._state.draft = text
        self._notify()

    async def submit(self) -> Exchange:
        """提交当前草稿并等待结果。"""
        question = self.begin_submit()
        result = await self._client.complete(question)
        return self.record(question, result)

    def begin_submit(self) -> str:
        """记录一次在途请求，返回提交时的草稿快照。空草稿同样会提交。"""
        self._state.pending += 1
        self._notify()
        return self._state.draft

    def record(self, question: str, result: CompletionResult) -> Exchange:
        """把补全结果写入历史。必须在持有状态的线程上调用。"""
        if isinstance(result, Failure):
            exchange = Exchange(question=question, answer=ERROR_PREFIX + result.message)
            level = logging.WARNING
        else:
            exchange = Exchange(question=question, answer=result.answer)
            self._state.draft = ""
            level = logging.INFO
        self._state.prepend(exchange)
        self._state.pending = max(0, self._state.pending - 1)
        self._log(level, "Exchange recorded", exchange)
        self._notify()
        return exchange

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def _log(self, level: int, message: str, exchange: Exchange) -> None:
        logger.log(level, message, extra={"extra": {
            "exchange_id": exchange.id,
            "history_size": len(self._state.history),
            "pending": self._state.pending,
        }})
