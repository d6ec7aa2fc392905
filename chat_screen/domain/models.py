"""统一的对话与结果数据模型。

- Exchange: 历史中的一条问答记录，创建后不可变。
- Success / Failure: 一次补全调用的结果（CompletionResult），用完即弃。
- ChatMessage / ChatRequest / ChatResult: Provider 适配层使用的请求与响应结构。
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, List, Union
from uuid import uuid4


Role = Literal["system", "user", "assistant"]

NO_RESPONSE_PLACEHOLDER = "No response received"
ERROR_PREFIX = "Error: "


def _exchange_id() -> str:
    return f"x-{uuid4().hex}"


@dataclass(frozen=True)
class Exchange:
    """一条已完成的问答。失败的请求同样产生一条 Exchange。"""

    question: str
    answer: str
    id: str = field(default_factory=_exchange_id)


@dataclass(frozen=True)
class Success:
    answer: str


@dataclass(frozen=True)
class Failure:
    message: str


CompletionResult = Union[Success, Failure]


@dataclass
class ChatMessage:
    """一条对话消息，既可用于请求，也可用于响应。

    响应中的 content 可能缺失，此时为 None。
    """

    role: Role
    content: Optional[str]


@dataclass
class ChatRequest:
    """一次完整的聊天请求。

    model 为逻辑模型名（如 "chat"），由 registry 映射为厂商模型 ID。
    """

    provider: str
    model: str
    messages: List[ChatMessage]


@dataclass
class ChatUsage:
    """Provider 返回的 token 统计信息，缺失字段为 None。"""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


@dataclass
class ChatChoice:
    index: int
    message: Optional[ChatMessage]
    finish_reason: Optional[str] = None


@dataclass
class ChatResult:
    """一次对话调用的最终结果。

    - provider / model: 逻辑名。
    - response_id / created: 响应信封中的元数据。
    """

    provider: str
    model: str
    choices: List[ChatChoice]
    usage: Optional[ChatUsage] = None
    response_id: Optional[str] = None
    created: Optional[int] = None

    def first_content(self) -> Optional[str]:
        """返回 choices[0].message.content，不存在时返回 None。"""
        if not self.choices:
            return None
        message = self.choices[0].message
        if message is None:
            return None
        return message.content
