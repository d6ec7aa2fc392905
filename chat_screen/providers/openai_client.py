"""OpenAI Provider 适配器。

本模块负责：

1. 把用户输入包装成单条 user 消息的 ChatRequest。
2. 转换为 chat/completions 请求体（只含 model 与 messages）。
3. 异步发出 POST，并把网络错误、HTTP 错误、解码错误包装为业务异常。
4. 用 ChatEnvelope 校验响应 JSON，转换为统一的 ChatResult。

complete() 是对外边界：任何业务异常都在此转换为 Failure，不再向上抛。
请求体通过 httpx 的 json= 序列化，prompt 中的引号与控制字符会被正确转义。
"""

import time
from typing import Any, Dict

import httpx
import pydantic

from chat_screen.config.settings import settings
from chat_screen.domain.envelope import ChatEnvelope
from chat_screen.domain.exceptions import (
    ApiError,
    BusinessError,
    DecodeError,
    TransportError,
    ValidationError,
)
from chat_screen.domain.models import (
    NO_RESPONSE_PLACEHOLDER,
    ChatChoice,
    ChatMessage,
    ChatRequest,
    ChatResult,
    ChatUsage,
    CompletionResult,
    Failure,
    Success,
)
from chat_screen.infrastructure.logging.logger import logger
from chat_screen.providers.registry import OPENAI_CONFIG, ModelConfig


class OpenAIClient:
    """OpenAI chat/completions 客户端。"""

    name = "openai"

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def complete(self, prompt: str) -> CompletionResult:
        """发送一次单轮补全，返回 Success 或 Failure。

        prompt 原样发送（空字符串也会发送）。choices 为空或没有 content 时
        返回 Success(NO_RESPONSE_PLACEHOLDER)，这不算失败。
        """

        req = ChatRequest(
            provider=self.name,
            model=getattr(self._settings, "default_model", None) or "chat",
            messages=[ChatMessage(role="user", content=prompt)],
        )
        try:
            result = await self.chat(req)
        except BusinessError as e:
            logger.error(f"Completion failed: {e.message}", extra={"extra": {
                "provider": self.name,
                "code": e.code,
                "http_status": e.http_status,
            }})
            return Failure(e.message)
        except Exception as e:
            # 例如请求头无法编码；异常不能越过此边界
            logger.exception(f"Completion failed unexpectedly: {e}", extra={"extra": {
                "provider": self.name,
                "code": "UNEXPECTED_ERROR",
            }})
            return Failure(str(e) or type(e).__name__)
        content = result.first_content()
        if content is None:
            return Success(NO_RESPONSE_PLACEHOLDER)
        return Success(content)

    async def chat(self, req: ChatRequest) -> ChatResult:
        """执行一次非流式调用，失败时抛出 BusinessError 子类。"""

        api_key = getattr(self._settings, "openai_api_key", None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
        try:
            model_cfg = OPENAI_CONFIG.models[req.model]
        except KeyError:
            raise ValidationError(code="UNKNOWN_MODEL", message=f"Unknown model: {req.model!r}")
        payload = self._build_payload(req, model_cfg)
        base = getattr(self._settings, "openai_base_url", None) or OPENAI_CONFIG.base_url
        started = time.monotonic()
        logger.info("Completion request sent", extra={"extra": {
            "provider": self.name,
            "model": model_cfg.provider_model,
            "prompt_chars": sum(len(m.content or "") for m in req.messages),
        }})
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            # DNS 失败、连接超时、TLS 错误等
            raise TransportError(code="NETWORK_ERROR", message=str(e) or type(e).__name__)
        if resp.status_code >= 400:
            raise ApiError(
                code="API_ERROR",
                message=f"HTTP {resp.status_code}: {resp.text}",
                http_status=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise DecodeError(code="DECODE_ERROR", message=f"Response is not valid JSON: {e}")
        result = self._parse_response(data, req)
        logger.info("Completion request finished", extra={"extra": {
            "provider": self.name,
            "model": model_cfg.provider_model,
            "status": resp.status_code,
            "latency_ms": int((time.monotonic() - started) * 1000),
            "total_tokens": result.usage.total_tokens if result.usage else None,
        }})
        return result

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> Dict[str, Any]:
        return {
            "model": model_cfg.provider_model,
            "messages": [{"role": m.role, "content": m.content} for m in req.messages],
        }

    def _parse_response(self, data: Any, req: ChatRequest) -> ChatResult:
        """把原始响应 JSON 校验并转换为 ChatResult。"""

        try:
            envelope = ChatEnvelope.model_validate(data)
        except pydantic.ValidationError as e:
            raise DecodeError(code="DECODE_ERROR", message=self._describe_schema_error(e))

        choices = []
        for ch in envelope.choices:
            message = None
            if ch.message is not None:
                message = ChatMessage(role=ch.message.role or "assistant", content=ch.message.content)
            choices.append(ChatChoice(index=ch.index, message=message, finish_reason=ch.finish_reason))
        usage = None
        if envelope.usage is not None:
            usage = ChatUsage(
                prompt_tokens=envelope.usage.prompt_tokens,
                completion_tokens=envelope.usage.completion_tokens,
                total_tokens=envelope.usage.total_tokens,
            )
        return ChatResult(
            provider=self.name,
            model=req.model,
            choices=choices,
            usage=usage,
            response_id=envelope.id,
            created=envelope.created,
        )

    @staticmethod
    def _describe_schema_error(error: pydantic.ValidationError) -> str:
        first = error.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "response"
        return f"Unexpected response format at {location}: {first['msg']}"
