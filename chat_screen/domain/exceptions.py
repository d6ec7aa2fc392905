"""统一业务异常模型。

Completion Client 内部抛出这些异常，在 `complete()` 边界统一转换为
Failure，不会再向 UI 层传播。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、body 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class TransportError(BusinessError):
    """网络层错误，例如 DNS 失败、连接超时、TLS 握手失败等。"""


class DecodeError(BusinessError):
    """响应体不是 JSON，或与响应信封结构不符。"""


class ApiError(BusinessError):
    """补全接口返回 4xx/5xx 时抛出。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
