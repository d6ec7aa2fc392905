"""补全接口响应信封的线格式模型。

只校验用得到的字段；未知字段一律忽略。命名同时接受 snake_case
与 camelCase（finish_reason / finishReason 等）。logprobs 只允许为 null。
"""

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _alias(snake: str, camel: str):
    return Field(default=None, validation_alias=AliasChoices(snake, camel))


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class EnvelopeMessage(_WireModel):
    role: Optional[str] = None
    content: Optional[str] = None


class EnvelopeChoice(_WireModel):
    index: int = 0
    message: Optional[EnvelopeMessage] = None
    logprobs: None = None
    finish_reason: Optional[str] = _alias("finish_reason", "finishReason")


class EnvelopeUsage(_WireModel):
    prompt_tokens: Optional[int] = _alias("prompt_tokens", "promptTokens")
    completion_tokens: Optional[int] = _alias("completion_tokens", "completionTokens")
    total_tokens: Optional[int] = _alias("total_tokens", "totalTokens")


class ChatEnvelope(_WireModel):
    """顶层响应对象：元数据 + choices 列表 + 可选 usage。"""

    id: Optional[str] = None
    object: Optional[str] = None
    created: Optional[int] = None
    model: Optional[str] = None
    choices: List[EnvelopeChoice] = Field(default_factory=list)
    usage: Optional[EnvelopeUsage] = None
