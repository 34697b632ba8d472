"""Wingman 编排入口。

每个入口对应一种输入形态，负责：编码媒体 -> 拼装 prompt ->
ModelInvoker 调用（grounded 优先，失败回退）-> 归一化为结果对象。

除 ask_follow_up 会在成功后写入 ConversationState 外，其余入口都是无状态的，
可以并发执行。
"""

import json
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from wingman_core.agents.invoker import ModelInvoker
from wingman_core.agents.normalizer import normalize, parse_extraction, parse_solution
from wingman_core.config.settings import WingmanSettings
from wingman_core.content import encoder
from wingman_core.domain.conversation import ConversationState
from wingman_core.domain.exceptions import ValidationError
from wingman_core.domain.models import (
    ContentPart,
    ExtractionResult,
    FreeformResult,
    MediaPart,
    SolutionResult,
    TextPart,
)
from wingman_core.prompts import load_system_prompt, render_prompt
from wingman_core.providers import create_provider
from wingman_core.providers.base import ModelClient


PathLike = Union[str, Path]
ProblemInfo = Union[ExtractionResult, Mapping[str, Any]]


def _problem_json(problem_info: ProblemInfo) -> str:
    data = problem_info.to_dict() if isinstance(problem_info, ExtractionResult) else dict(problem_info)
    return json.dumps(data, indent=2, ensure_ascii=False)


class WingmanAgent:
    """AI Wingman 的编排层。

    Args:
        client: 模型客户端（实现 ModelClient 协议）。
        enable_grounding: False 时跳过联网检索，只做普通调用。
        locale: 提示词语言目录。
    """

    def __init__(
        self,
        client: ModelClient,
        enable_grounding: bool = True,
        locale: str = "en",
    ):
        self._locale = locale
        self._invoker = ModelInvoker(
            client,
            system_prompt=load_system_prompt(locale),
            enable_grounding=enable_grounding,
        )

    @classmethod
    def from_settings(cls, cfg: WingmanSettings, client: Optional[ModelClient] = None) -> "WingmanAgent":
        return cls(
            client or create_provider(cfg),
            enable_grounding=cfg.enable_search_grounding,
        )

    @property
    def invoker(self) -> ModelInvoker:
        return self._invoker

    def _prompt(self, name: str, **values: str) -> TextPart:
        return TextPart(render_prompt(name, self._locale, **values))

    # ---- 结构化入口 ----

    async def extract_problem_from_images(self, image_paths: Sequence[PathLike]) -> ExtractionResult:
        if not image_paths:
            raise ValidationError(code="NO_IMAGES", message="At least one image is required")
        image_parts = await encoder.encode_files(image_paths, encoder.PNG_MIME)
        parts: list[ContentPart] = [self._prompt("extract_problem"), *image_parts]
        result = await self._invoker.invoke(
            parts, structured=True, validate=parse_extraction, operation="extract_problem"
        )
        return parse_extraction(result.raw_text, result.used_grounding)

    async def generate_solution(self, problem_info: ProblemInfo) -> SolutionResult:
        parts = [self._prompt("generate_solution", problem_info=_problem_json(problem_info))]
        result = await self._invoker.invoke(
            parts, structured=True, validate=parse_solution, operation="generate_solution"
        )
        return parse_solution(result.raw_text, result.used_grounding)

    async def debug_solution_with_images(
        self,
        problem_info: ProblemInfo,
        current_answer: str,
        image_paths: Sequence[PathLike],
    ) -> SolutionResult:
        image_parts = await encoder.encode_files(image_paths, encoder.PNG_MIME)
        prompt = self._prompt(
            "debug_solution",
            problem_info=_problem_json(problem_info),
            current_answer=current_answer,
        )
        result = await self._invoker.invoke(
            [prompt, *image_parts], structured=True, validate=parse_solution, operation="debug_solution"
        )
        return parse_solution(result.raw_text, result.used_grounding)

    # ---- 自然语言入口 ----

    async def _describe(self, prompt_name: str, media: MediaPart, operation: str) -> FreeformResult:
        result = await self._invoker.invoke([self._prompt(prompt_name), media], operation=operation)
        return FreeformResult(text=normalize(result.raw_text, "freeform"), used_grounding=result.used_grounding)

    async def analyze_audio_file(self, audio_path: PathLike, mime_type: str = encoder.MP3_MIME) -> FreeformResult:
        media = await encoder.encode_file(audio_path, mime_type)
        return await self._describe("analyze_audio", media, "analyze_audio_file")

    async def analyze_audio_bytes(self, data: bytes, mime_type: str) -> FreeformResult:
        return await self._describe("analyze_audio", encoder.encode(data, mime_type), "analyze_audio_bytes")

    async def analyze_audio_from_base64(self, data: str, mime_type: str) -> FreeformResult:
        media = encoder.from_base64(data, mime_type)
        return await self._describe("analyze_audio", media, "analyze_audio_base64")

    async def analyze_image_file(self, image_path: PathLike) -> FreeformResult:
        media = await encoder.encode_file(image_path, encoder.PNG_MIME)
        return await self._describe("analyze_image", media, "analyze_image_file")

    async def ask_follow_up(self, state: ConversationState, question: str) -> FreeformResult:
        """基于会话上下文回答追问。

        成功后依次追加 user/assistant 两轮；调用失败时 state 保持不变。
        同一个 state 上的并发调用需要由调用方串行化。
        """

        question = question.strip()
        if not question:
            raise ValidationError(code="EMPTY_QUESTION", message="Follow-up question is empty")
        prompt = self._prompt(
            "follow_up",
            conversation_context=state.render_context(),
            question=question,
        )
        result = await self._invoker.invoke([prompt], operation="ask_follow_up")
        answer = FreeformResult(text=normalize(result.raw_text, "freeform"), used_grounding=result.used_grounding)
        state.append_exchange(question, answer.text)
        return answer
