"""Wingman Core 顶层包。

该包实现 AI Wingman 桌面助手的请求编排层：
媒体编码、模型调用策略（联网检索优先、失败回退）、响应归一化、
追问会话状态，以及面向截图/音频/追问的各个编排入口。
"""

from wingman_core.agents.wingman_agent import WingmanAgent
from wingman_core.config.settings import WingmanSettings, load_settings
from wingman_core.domain.conversation import ConversationState, ConversationTurn

__all__ = ["WingmanAgent", "WingmanSettings", "load_settings", "ConversationState", "ConversationTurn"]
