"""
图片生成异常定义
区分提供商响应无法识别与提供商传输错误
"""

from typing import Any, Dict, Optional


class GenerationError(Exception):
    """
    图片生成基础异常

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class UnrecognizedResponseShape(GenerationError):
    """提供商响应中没有可识别的负载"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="UNRECOGNIZED_RESPONSE", details=details)


class ProviderRequestError(GenerationError):
    """提供商请求失败（网络、鉴权、配额等），保留提供商返回的错误详情"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="PROVIDER_ERROR", details=details)
        self.status_code = status_code


class ModelNotFoundError(GenerationError):
    """请求的模型未注册"""

    def __init__(self, model_id: str) -> None:
        super().__init__(
            f"Model '{model_id}' not found.",
            code="MODEL_NOT_FOUND",
            details={"model_id": model_id}
        )


class ProviderNotInitializedError(GenerationError):
    """模型对应的提供商未初始化"""

    def __init__(self, provider_name: str) -> None:
        super().__init__(
            f"Provider '{provider_name}' is not initialized.",
            code="PROVIDER_NOT_INITIALIZED",
            details={"provider": provider_name}
        )


__all__ = [
    'GenerationError',
    'UnrecognizedResponseShape',
    'ProviderRequestError',
    'ModelNotFoundError',
    'ProviderNotInitializedError',
]
