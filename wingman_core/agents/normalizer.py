"""模型响应归一化。

- structured: 去掉 ```json ... ``` 代码块包裹并解析 JSON，失败抛 MalformedResponse。
- freeform: 只去掉首尾空白，不做任何解析。

parse_extraction / parse_solution 在 JSON 之上再校验各结果变体的必填字段。
"""

import json
import re
from typing import Any, Dict, List

from wingman_core.domain.exceptions import MalformedResponse
from wingman_core.domain.models import ExtractionResult, ResponseMode, SolutionResult


_FENCE_OPEN = re.compile(r"^```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\r?\n?```$")


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


def normalize(raw_text: str, mode: ResponseMode) -> Any:
    if mode == "freeform":
        return raw_text.strip()
    if mode != "structured":
        raise ValueError(f"Unknown response mode: {mode!r}")
    cleaned = strip_code_fence(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Response is not valid JSON: {exc}", raw_text=raw_text) from exc


def _object(value: Any, raw_text: str, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponse(f"Expected a JSON object for {what}", raw_text=raw_text)
    return value


def _required_str(data: Dict[str, Any], key: str, raw_text: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedResponse(f"Missing required field {key!r}", raw_text=raw_text)
    return value


def _optional_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


def _str_list(data: Dict[str, Any], key: str, raw_text: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise MalformedResponse(f"Field {key!r} must be a list", raw_text=raw_text)
    return [item if isinstance(item, str) else json.dumps(item, ensure_ascii=False) for item in value]


def parse_extraction(raw_text: str, used_grounding: bool = False) -> ExtractionResult:
    data = _object(normalize(raw_text, "structured"), raw_text, "extraction")
    return ExtractionResult(
        problem_statement=_required_str(data, "problem_statement", raw_text),
        context=_optional_str(data, "context"),
        suggested_responses=_str_list(data, "suggested_responses", raw_text),
        reasoning=_optional_str(data, "reasoning"),
        used_grounding=used_grounding,
        raw=data,
    )


def parse_solution(raw_text: str, used_grounding: bool = False) -> SolutionResult:
    data = _object(normalize(raw_text, "structured"), raw_text, "solution response")
    block = _object(data.get("solution"), raw_text, "'solution'")
    return SolutionResult(
        code=_required_str(block, "code", raw_text),
        problem_statement=_optional_str(block, "problem_statement"),
        context=_optional_str(block, "context"),
        suggested_responses=_str_list(block, "suggested_responses", raw_text),
        reasoning=_optional_str(block, "reasoning"),
        used_grounding=used_grounding,
        raw=data,
    )
