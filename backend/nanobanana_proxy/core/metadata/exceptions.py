"""
元数据编解码异常定义
"""

from typing import Any, Dict, Optional


class MetadataCodecError(Exception):
    """
    元数据编解码基础异常

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


class UnsupportedImageFormat(MetadataCodecError):
    """不支持写入元数据的图片格式（仅支持 JPEG / PNG）"""

    def __init__(self, mime_type: Optional[str]) -> None:
        super().__init__(
            f"Unsupported image format: {mime_type}",
            code="UNSUPPORTED_FORMAT",
            details={"mime_type": mime_type}
        )
        self.mime_type = mime_type


class MetadataEncodingError(MetadataCodecError):
    """图片重新编码失败"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="ENCODING_ERROR", details=details)


class ImageDecodingError(MetadataCodecError):
    """无法解析图片容器"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="DECODING_ERROR", details=details)


__all__ = [
    'MetadataCodecError',
    'UnsupportedImageFormat',
    'MetadataEncodingError',
    'ImageDecodingError',
]
