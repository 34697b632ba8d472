"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在 API 层或 UI 层做统一捕获与用户提示。

编排层对调用方只暴露三类最终错误：

- EncodingFailure: 媒体数据无法获取或为空。
- InvocationFailure: 联网检索调用与普通调用均失败。
- MalformedResponse: 结构化模式下模型输出无法解析为约定的 JSON。

NetworkError / ApiError / RateLimitError 等 Provider 级错误只在
调用策略内部流转，由 ModelInvoker 汇总为 InvocationFailure。
"""

from typing import Any, List, Tuple


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "INVOCATION_FAILED"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、strategy 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 2xx/429 错误，或响应中没有可用文本时抛出。"""


class RateLimitError(BusinessError):
    """Provider 限流/配额错误。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


class EncodingFailure(BusinessError):
    """媒体源无法读取或内容为空，不做重试。"""

    def __init__(self, message: str, source: Any = None, **extra):
        super().__init__(code="ENCODING_FAILED", message=message, **extra)
        self.source = source


class InvocationFailure(BusinessError):
    """所有调用策略均失败。

    attempts 按调用顺序保存 (策略名, 异常) 列表，便于诊断。
    """

    def __init__(self, message: str, attempts: List[Tuple[str, BaseException]], **extra):
        super().__init__(code="INVOCATION_FAILED", message=message, http_status=502, **extra)
        self.attempts = list(attempts)


class MalformedResponse(BusinessError):
    """结构化响应解析失败；raw_text 保留模型原始输出用于排查。"""

    def __init__(self, message: str, raw_text: str, **extra):
        super().__init__(code="MALFORMED_RESPONSE", message=message, http_status=502, **extra)
        self.raw_text = raw_text
