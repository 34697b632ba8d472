"""Provider 抽象接口。

ModelInvoker 不直接依赖具体厂商的 HTTP 接口，而是依赖此协议：

- 每个厂商实现一个 ModelClient（如 GeminiClient）。
- 负责：把有序的 ContentPart 列表转成具体 API 请求，并返回模型输出的纯文本。

联网检索（grounding）与 JSON 输出只是调用开关，是否回退由上层策略决定。
"""

from typing import Protocol, Sequence

from wingman_core.domain.models import ContentPart


class ModelClient(Protocol):
    """多模态模型客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - generate(parts, grounding, json_output): 执行一次调用，返回模型文本。
      任何失败都应以 BusinessError 子类抛出。
    """

    name: str

    async def generate(
        self,
        parts: Sequence[ContentPart],
        *,
        grounding: bool = False,
        json_output: bool = False,
    ) -> str:
        ...
