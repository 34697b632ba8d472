"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供厂商的具体实现 (gemini_client)。
"""

from typing import Optional

from wingman_core.config.settings import WingmanSettings
from wingman_core.providers.base import ModelClient
from wingman_core.providers.gemini_client import GeminiClient
from wingman_core.providers.registry import get_provider_config


def create_provider(cfg: WingmanSettings, name: Optional[str] = None) -> ModelClient:
    """根据名称创建 Provider 实例，默认 gemini。"""

    provider_name = get_provider_config(name or "gemini").name
    if provider_name == "gemini":
        return GeminiClient(cfg)
    raise KeyError(f"No client for provider: {provider_name!r}")
