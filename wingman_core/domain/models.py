"""编排层共享的数据模型。

- ContentPart: 一次请求中的单个内容片段，TextPart 或 MediaPart。
- InvocationResult: 一次模型调用（含回退）的原始文本结果。
- ExtractionResult / SolutionResult / FreeformResult: 各入口返回的结果变体。

Provider 适配层只依赖 ContentPart，并负责把它们转换成各家 API 的 JSON。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Union


# 对话角色（Conversation State 中只允许 user/assistant）
Role = Literal["user", "assistant"]

ResponseMode = Literal["structured", "freeform"]


@dataclass(frozen=True)
class TextPart:
    value: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class MediaPart:
    """内联媒体片段。

    - mime_type: 媒体类型，如 image/png、audio/mp3、audio/webm。
    - data: base64 编码后的数据（ASCII 字符串）。
    """

    mime_type: str
    data: str
    kind: Literal["inlineMedia"] = "inlineMedia"


ContentPart = Union[TextPart, MediaPart]


@dataclass(frozen=True)
class InvocationResult:
    """一次调用的最终结果：命中策略返回的原始文本，以及是否使用了联网检索。"""

    raw_text: str
    used_grounding: bool


@dataclass
class ExtractionResult:
    """从截图中提取出的问题/场景描述。

    problem_statement 为必填字段，其余字段模型可以省略。
    """

    problem_statement: str
    context: str = ""
    suggested_responses: List[str] = field(default_factory=list)
    reasoning: str = ""
    used_grounding: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)
    kind: Literal["extraction"] = "extraction"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "problem_statement": self.problem_statement,
            "context": self.context,
            "suggested_responses": list(self.suggested_responses),
            "reasoning": self.reasoning,
        }


@dataclass
class SolutionResult:
    """解决方案 / 调试结果，对应响应 JSON 中的 "solution" 对象。

    code 为必填字段。
    """

    code: str
    problem_statement: str = ""
    context: str = ""
    suggested_responses: List[str] = field(default_factory=list)
    reasoning: str = ""
    used_grounding: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)
    kind: Literal["solution"] = "solution"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solution": {
                "code": self.code,
                "problem_statement": self.problem_statement,
                "context": self.context,
                "suggested_responses": list(self.suggested_responses),
                "reasoning": self.reasoning,
            }
        }


@dataclass
class FreeformResult:
    """自然语言回答，附带生成时间戳。"""

    text: str
    used_grounding: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    kind: Literal["freeform"] = "freeform"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "timestamp": int(self.timestamp.timestamp() * 1000),
            "used_grounding": self.used_grounding,
        }

