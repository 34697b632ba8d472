"""Provider 与模型配置。

本模块将“逻辑模型名”与“具体厂商模型名”解耦：

- 逻辑名（logical_name）：在代码里使用的统一名称，例如 "wingman-chat"。
- provider_model：厂商实际提供的模型 ID，例如 "gemini-2.0-flash"。

配置中的 gemini_model 可以覆盖这里的 provider_model。"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_output_tokens: int
    default_temperature: float


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]


GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    models={
        "wingman-chat": ModelConfig(
            logical_name="wingman-chat",
            provider_model="gemini-2.0-flash",
            max_output_tokens=8192,
            default_temperature=0.7,
        )
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "gemini": GEMINI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")


def resolve_model(provider: ProviderConfig, logical_name: str, override: Optional[str] = None) -> ModelConfig:
    """返回逻辑模型配置；override 非空时替换厂商模型 ID。"""

    try:
        base = provider.models[logical_name]
    except KeyError:
        raise KeyError(f"Unknown model {logical_name!r} for provider {provider.name!r}") from None
    if not override:
        return base
    return ModelConfig(
        logical_name=base.logical_name,
        provider_model=override,
        max_output_tokens=base.max_output_tokens,
        default_temperature=base.default_temperature,
    )
