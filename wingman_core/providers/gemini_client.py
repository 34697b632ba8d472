"""Gemini Provider 适配器。

使用 REST generateContent 端点：
- URL: {base_url}/models/{model}:generateContent
- 认证: x-goog-api-key: <api_key>
- 联网检索: tools=[{"googleSearch": {}}]

本实现只依赖公共字段：contents/tools/generationConfig 以及响应中的 candidates。
"""

from typing import Any, Dict, List, Sequence

import httpx

from wingman_core.config.settings import WingmanSettings
from wingman_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from wingman_core.domain.models import ContentPart, MediaPart, TextPart
from wingman_core.providers.registry import GEMINI_CONFIG, ModelConfig, resolve_model


class GeminiClient:
    """Gemini Provider 客户端实现。"""

    name = "gemini"

    def __init__(self, cfg: WingmanSettings):
        if not getattr(cfg, "gemini_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        self._settings = cfg
        self._model_cfg: ModelConfig = resolve_model(
            GEMINI_CONFIG,
            getattr(cfg, "default_model", None) or "wingman-chat",
            getattr(cfg, "gemini_model", None),
        )

    @property
    def model(self) -> str:
        return self._model_cfg.provider_model

    async def generate(
        self,
        parts: Sequence[ContentPart],
        *,
        grounding: bool = False,
        json_output: bool = False,
    ) -> str:
        payload = self._build_payload(parts, grounding=grounding, json_output=json_output)
        base = getattr(self._settings, "gemini_base_url", None) or GEMINI_CONFIG.base_url
        try:
            async with httpx.AsyncClient(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{base}/models/{self.model}:generateContent",
                    json=payload,
                    headers={
                        "x-goog-api-key": self._settings.gemini_api_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e))
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Gemini rate limit", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(code="INVALID_JSON", message=f"Gemini returned non-JSON body: {e}")
        return self._parse_response(data)

    # ---- 辅助方法 ----

    def _build_payload(self, parts: Sequence[ContentPart], grounding: bool, json_output: bool) -> dict:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [self._part_to_payload(p) for p in parts]}],
            "generationConfig": {
                "temperature": self._model_cfg.default_temperature,
                "maxOutputTokens": self._model_cfg.max_output_tokens,
            },
        }
        if grounding:
            payload["tools"] = [{"googleSearch": {}}]
        if json_output:
            payload["generationConfig"]["responseMimeType"] = "application/json"
        return payload

    @staticmethod
    def _part_to_payload(part: ContentPart) -> Dict[str, Any]:
        if isinstance(part, TextPart):
            return {"text": part.value}
        if isinstance(part, MediaPart):
            return {"inlineData": {"mimeType": part.mime_type, "data": part.data}}
        raise ValidationError(code="INVALID_PART", message=f"Unsupported content part: {part!r}")

    @staticmethod
    def _invalid(what: str) -> ApiError:
        return ApiError(code="INVALID_RESPONSE", message=f"Unexpected Gemini response shape: {what}")

    @classmethod
    def _parse_response(cls, data: Any) -> str:
        if not isinstance(data, dict):
            raise cls._invalid("body is not an object")
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise cls._invalid("candidates is not a list")
        texts: List[str] = []
        for cand in candidates[:1]:
            if not isinstance(cand, dict):
                raise cls._invalid("candidate is not an object")
            content = cand.get("content") or {}
            if not isinstance(content, dict):
                raise cls._invalid("content is not an object")
            parts = content.get("parts") or []
            if not isinstance(parts, list):
                raise cls._invalid("parts is not a list")
            for part in parts:
                if not isinstance(part, dict):
                    raise cls._invalid("part is not an object")
                text = part.get("text")
                if isinstance(text, str):
                    texts.append(text)
        if not texts:
            feedback = data.get("promptFeedback")
            if not isinstance(feedback, dict):
                feedback = {}
            reason = feedback.get("blockReason") or (
                candidates[0].get("finishReason") if candidates else "NO_CANDIDATES"
            )
            raise ApiError(code="EMPTY_RESPONSE", message=f"Gemini returned no text ({reason})")
        return "".join(texts)
