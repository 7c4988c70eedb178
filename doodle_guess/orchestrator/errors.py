"""Relay error taxonomy. Every failure leaves the relay as one of these."""

MSG_MISSING_IMAGE = "未提供图片数据"
MSG_NO_API_KEY = "API密钥未配置"
MSG_UPSTREAM = "AI分析失败，请稍后重试"
MSG_INTERNAL = "服务器错误，请稍后重试"


class RelayError(Exception):
    status_code = 500
    message = MSG_INTERNAL

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class MissingInput(RelayError):
    status_code = 400
    message = MSG_MISSING_IMAGE


class ConfigurationError(RelayError):
    status_code = 500
    message = MSG_NO_API_KEY


class UpstreamFailure(RelayError):
    """Inference API answered with a non-success status, or timed out (504)."""
    message = MSG_UPSTREAM

    def __init__(self, status_code: int, detail: str | None = None):
        super().__init__(detail or f"upstream HTTP {status_code}")
        self.status_code = status_code


class InternalFailure(RelayError):
    status_code = 500
    message = MSG_INTERNAL
