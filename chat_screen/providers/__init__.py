"""LLM Provider 集成层。

- base: Completion Client 协议。
- registry: Provider 与模型配置。
- openai_client: OpenAI chat/completions 的具体实现。
"""

from typing import Optional

from chat_screen.config.settings import settings
from chat_screen.providers.base import CompletionClient
from chat_screen.providers.openai_client import OpenAIClient
from chat_screen.providers.registry import get_provider_config


def create_provider(name: Optional[str] = None) -> CompletionClient:
    """根据名称创建 Provider 实例，默认取配置中的 provider。"""

    provider_name = (name or getattr(settings, "default_provider", "openai")).lower()
    # 未知名称在 registry 中抛出 KeyError
    get_provider_config(provider_name)
    return OpenAIClient(settings)
