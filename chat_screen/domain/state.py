"""界面的可变状态。

ChatState 是整个程序唯一的可变状态，由 ChatController 独占持有；
只能在 UI 线程上修改。
"""

from dataclasses import dataclass, field
from typing import List

from chat_screen.domain.models import Exchange


@dataclass
class ChatState:
    """草稿文本、问答历史（最新在前）以及在途请求数。"""

    draft: str = ""
    history: List[Exchange] = field(default_factory=list)
    pending: int = 0

    def prepend(self, exchange: Exchange) -> None:
        self.history.insert(0, exchange)
