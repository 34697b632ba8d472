"""对外 API 服务模块。

提供 dict 进、dict 出的异步函数，供 UI / IPC 层直接调用。
默认 Agent 在第一次调用时根据 load_settings() 构造，之后复用。
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from wingman_core.agents.wingman_agent import WingmanAgent
from wingman_core.config.settings import WingmanSettings, load_settings
from wingman_core.domain.conversation import ConversationState
from wingman_core.infrastructure.logging.logger import logger, setup_logger


_settings: Optional[WingmanSettings] = None
_agent: Optional[WingmanAgent] = None


def get_default_agent() -> WingmanAgent:
    """获取默认的 WingmanAgent 实例（单例）。"""
    global _settings, _agent
    if _agent is None:
        if _settings is None:
            _settings = load_settings()
            setup_logger(_settings)
        _agent = WingmanAgent.from_settings(_settings)
    return _agent


def configure(agent: Optional[WingmanAgent]) -> None:
    """替换（或用 None 清空）默认 Agent，主要供宿主进程和测试使用。"""
    global _agent
    _agent = agent


def _log_failure(operation: str, exc: Exception, **fields: Any) -> None:
    payload = {"operation": operation, "error": str(exc), "error_type": type(exc).__name__}
    payload.update(fields)
    logger.error(f"{operation} failed: {exc}", extra={"extra": payload})


async def extract_problem(image_paths: Sequence[str]) -> Dict[str, Any]:
    """从截图中提取问题，返回 problem_statement/context/suggested_responses/reasoning。"""
    try:
        result = await get_default_agent().extract_problem_from_images(image_paths)
    except Exception as e:
        _log_failure("extract_problem", e, image_count=len(image_paths))
        raise
    return result.to_dict()


async def generate_solution(problem_info: Mapping[str, Any]) -> Dict[str, Any]:
    try:
        result = await get_default_agent().generate_solution(problem_info)
    except Exception as e:
        _log_failure("generate_solution", e)
        raise
    return result.to_dict()


async def debug_solution(
    problem_info: Mapping[str, Any],
    current_answer: str,
    image_paths: Sequence[str],
) -> Dict[str, Any]:
    try:
        result = await get_default_agent().debug_solution_with_images(problem_info, current_answer, image_paths)
    except Exception as e:
        _log_failure("debug_solution", e, image_count=len(image_paths))
        raise
    return result.to_dict()


async def analyze_audio_file(audio_path: str) -> Dict[str, Any]:
    try:
        result = await get_default_agent().analyze_audio_file(audio_path)
    except Exception as e:
        _log_failure("analyze_audio_file", e)
        raise
    return result.to_dict()


async def analyze_audio_from_base64(data: str, mime_type: str) -> Dict[str, Any]:
    try:
        result = await get_default_agent().analyze_audio_from_base64(data, mime_type)
    except Exception as e:
        _log_failure("analyze_audio_from_base64", e, mime_type=mime_type)
        raise
    return result.to_dict()


async def analyze_image_file(image_path: str) -> Dict[str, Any]:
    try:
        result = await get_default_agent().analyze_image_file(image_path)
    except Exception as e:
        _log_failure("analyze_image_file", e)
        raise
    return result.to_dict()


async def ask_follow_up(
    original_content: str,
    question: str,
    history: Optional[List[Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    """回答追问。

    Args:
        original_content: 会话主题（首次分析的回答）
        question: 用户追问
        history: UI 保存的 [{role, content}] 历史

    Returns:
        包含 text、timestamp 以及追加了本轮问答的 history 的字典
    """
    try:
        state = ConversationState.from_history(original_content, history or [])
        result = await get_default_agent().ask_follow_up(state, question)
    except Exception as e:
        _log_failure("ask_follow_up", e, history_len=len(history or []))
        raise
    payload = result.to_dict()
    payload["history"] = state.to_history()
    return payload
