"""领域层模型与异常。

包含：
- models: ContentPart、InvocationResult 以及各入口的结果变体。
- conversation: 追问会话的 ConversationTurn / ConversationState。
- exceptions: 业务异常类型定义。
"""
