"""后台事件循环。

网络调用在独立线程的 asyncio 事件循环上运行；结果通过 schedule
回投到 UI 线程（tkinter 中即 root.after），历史只在 UI 线程上修改。
"""

import asyncio
import threading
from concurrent.futures import Future
from typing import Any, Callable, Coroutine, Optional, TypeVar

T = TypeVar("T")

Schedule = Callable[[Callable[[], Any]], Any]


class BackgroundLoop:
    def __init__(self, schedule: Schedule):
        self._schedule = schedule
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="chat-screen-loop", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()
        self._loop.close()

    def run(self, coro: Coroutine[Any, Any, T], on_done: Callable[[T], Any]) -> Future:
        """提交协程；完成后在 UI 线程上调用 on_done(result)。"""
        if not self.running:
            raise RuntimeError("BackgroundLoop is not started")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)

        def _deliver(done: Future) -> None:
            # 在 UI 线程上取结果，协程异常会在那里抛出
            self._schedule(lambda: on_done(done.result()))

        future.add_done_callback(_deliver)
        return future

    def stop(self, timeout: float = 1.0) -> None:
        if not self.running:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        self._thread = None
