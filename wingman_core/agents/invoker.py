"""模型调用策略。

每次调用把系统前言放在最前，然后按顺序尝试策略列表：

1. grounded: 开启 Google 搜索（回答可以引用实时信息）。
2. plain: 不带工具的普通调用，结构化模式下要求 JSON 输出。

前一个策略失败（任何异常，包括结构化模式下输出无法解析）才会
尝试下一个，两次调用使用完全相同的 parts。全部失败时抛出
InvocationFailure。没有退避、没有超时，超时交给 HTTP 传输层。
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple
from uuid import uuid4

from wingman_core.agents.normalizer import normalize
from wingman_core.domain.exceptions import InvocationFailure
from wingman_core.domain.models import ContentPart, InvocationResult, TextPart
from wingman_core.infrastructure.logging.logger import log_event
from wingman_core.providers.base import ModelClient


@dataclass(frozen=True)
class InvocationStrategy:
    name: str
    grounding: bool


GROUNDED = InvocationStrategy(name="grounded", grounding=True)
PLAIN = InvocationStrategy(name="plain", grounding=False)

Validator = Callable[[str], Any]


def _parse_json(text: str) -> Any:
    return normalize(text, "structured")


class ModelInvoker:
    def __init__(
        self,
        client: ModelClient,
        system_prompt: str,
        enable_grounding: bool = True,
    ):
        self._client = client
        self._system_prompt = system_prompt
        self._strategies: Tuple[InvocationStrategy, ...] = (
            (GROUNDED, PLAIN) if enable_grounding else (PLAIN,)
        )

    @property
    def strategies(self) -> Tuple[InvocationStrategy, ...]:
        return self._strategies

    def compose(self, parts: Sequence[ContentPart]) -> List[ContentPart]:
        return [TextPart(self._system_prompt), *parts]

    async def invoke(
        self,
        parts: Sequence[ContentPart],
        structured: bool = False,
        validate: Optional[Validator] = None,
        operation: str = "invoke",
    ) -> InvocationResult:
        """执行一次调用并返回命中策略的原始文本。

        Args:
            parts: 调用方提供的内容片段（不含系统前言）。
            structured: 是否要求 JSON 输出。
            validate: 结构化模式下对非最后一个策略的输出做校验，抛出异常
                即视为该策略失败；默认只校验 JSON 可解析。
            operation: 仅用于日志。

        Raises:
            InvocationFailure: 所有策略均失败。
        """

        prompt = self.compose(parts)
        if structured and validate is None:
            validate = _parse_json
        log_ctx = {
            "trace_id": f"tr-{uuid4().hex}",
            "operation": operation,
            "provider": getattr(self._client, "name", "unknown"),
        }
        attempts: List[Tuple[str, BaseException]] = []
        last = len(self._strategies) - 1

        for idx, strategy in enumerate(self._strategies):
            log_event(
                logging.INFO,
                "Calling model",
                log_ctx,
                strategy=strategy.name,
                part_count=len(prompt),
                structured=structured,
            )
            try:
                text = await self._client.generate(
                    prompt,
                    grounding=strategy.grounding,
                    json_output=structured and not strategy.grounding,
                )
                if validate is not None and idx < last:
                    validate(text)
            except Exception as exc:
                attempts.append((strategy.name, exc))
                log_event(
                    logging.WARNING,
                    "Model attempt failed",
                    log_ctx,
                    strategy=strategy.name,
                    error_code=getattr(exc, "code", type(exc).__name__),
                    error=str(exc),
                )
                continue
            log_event(logging.INFO, "Model returned", log_ctx, strategy=strategy.name, chars=len(text))
            return InvocationResult(raw_text=text, used_grounding=strategy.grounding)

        summary = "; ".join(f"{name}: {exc}" for name, exc in attempts)
        raise InvocationFailure(f"All model attempts failed ({summary})", attempts=attempts)
