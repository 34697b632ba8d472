"""追问会话状态。

ConversationState 保存一次会话（围绕同一段 original_content）内的
全部问答轮次，只追加、不重排、不去重。

同一个 ConversationState 上的并发追问不在这里串行化，调用方需要
自行保证同一时刻只有一个 ask_follow_up 在使用它。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from .exceptions import ValidationError
from .models import Role


_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ConversationState:
    """一次会话的有序问答记录。

    - original_content: 会话主题，即首次分析得到的回答文本。
    - turns: 按时间顺序排列的 ConversationTurn。
    """

    original_content: str = ""
    turns: List[ConversationTurn] = field(default_factory=list)

    @classmethod
    def from_history(
        cls, original_content: str, history: Iterable[Mapping[str, Any]] = ()
    ) -> "ConversationState":
        """从 UI 传入的 [{role, content}] 数组恢复会话状态。"""

        turns: List[ConversationTurn] = []
        for idx, item in enumerate(history):
            role = item.get("role")
            if role not in _ROLES:
                raise ValidationError(
                    code="INVALID_HISTORY",
                    message=f"history[{idx}] has unsupported role {role!r}",
                )
            turns.append(ConversationTurn(role=role, content=str(item.get("content") or "")))
        return cls(original_content=original_content, turns=turns)

    def __len__(self) -> int:
        return len(self.turns)

    def append_exchange(self, question: str, answer: str) -> None:
        """追加一轮完整问答：先 user，后 assistant。"""

        self.turns.extend(
            [
                ConversationTurn(role="user", content=question),
                ConversationTurn(role="assistant", content=answer),
            ]
        )

    def render_context(self) -> str:
        """序列化为追问 prompt 中的上下文段落。"""

        text = f"Original content: {self.original_content}\n\n"
        if self.turns:
            text += "Previous conversation:\n"
            for turn in self.turns:
                text += f"{turn.role}: {turn.content}\n"
            text += "\n"
        return text

    def to_history(self) -> List[Dict[str, str]]:
        return [turn.to_dict() for turn in self.turns]
