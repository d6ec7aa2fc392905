"""历史渲染：把历史投影为界面条目，纯函数，无副作用。"""

from dataclasses import dataclass
from typing import List, Sequence

from chat_screen.domain.models import Exchange

QUESTION_LABEL = "Question: "
ANSWER_LABEL = "Answer: "


@dataclass(frozen=True)
class RenderedExchange:
    key: str
    question_text: str
    answer_text: str


def render_exchange(exchange: Exchange) -> RenderedExchange:
    return RenderedExchange(
        key=exchange.id,
        question_text=QUESTION_LABEL + exchange.question,
        answer_text=ANSWER_LABEL + exchange.answer,
    )


def render_history(history: Sequence[Exchange]) -> List[RenderedExchange]:
    """按存储顺序（最新在前）渲染，文本原样保留，不截断、不解析 markdown。"""
    return [render_exchange(x) for x in history]
