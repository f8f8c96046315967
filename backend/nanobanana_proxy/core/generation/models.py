"""
图片生成数据模型
定义归一化生成结果与模型描述
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from .exceptions import UnrecognizedResponseShape


class ResultKind(str, Enum):
    """生成结果类型"""
    INLINE_IMAGE = "inline-image"
    TEXT = "text"


def _is_valid_base64(data: str) -> bool:
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


@dataclass(frozen=True)
class GenerationResult:
    """归一化的图片生成结果

    Attributes:
        kind: 结果类型（inline-image 或 text）
        data: base64 图片数据（inline-image）或原始字符串（URL 或文本）
        mime_type: 图片 MIME 类型，仅 inline-image 时存在
    """
    kind: ResultKind
    data: str
    mime_type: Optional[str] = None

    def __post_init__(self):
        if self.kind is ResultKind.INLINE_IMAGE:
            if not self.mime_type or not self.data:
                raise UnrecognizedResponseShape("图片结果缺少 mimeType 或 data")
            if not _is_valid_base64(self.data):
                raise UnrecognizedResponseShape("图片结果的 data 不是合法的 base64")
        elif self.mime_type is not None:
            raise UnrecognizedResponseShape("文本结果不应包含 mimeType")

    @classmethod
    def inline_image(cls, data: str, mime_type: str) -> "GenerationResult":
        return cls(kind=ResultKind.INLINE_IMAGE, data=data, mime_type=mime_type)

    @classmethod
    def text(cls, data: str) -> "GenerationResult":
        return cls(kind=ResultKind.TEXT, data=data)

    @property
    def is_image(self) -> bool:
        return self.kind is ResultKind.INLINE_IMAGE

    def to_wire(self) -> Dict[str, Any]:
        """序列化为前端使用的结构 {type, mimeType?, data}"""
        payload: Dict[str, Any] = {"type": self.kind.value}
        if self.mime_type is not None:
            payload["mimeType"] = self.mime_type
        payload["data"] = self.data
        return payload


@dataclass(frozen=True)
class ModelInfo:
    """可用模型描述"""
    id: str
    name: str
    provider: str
    description: str = ""

    def public_view(self) -> Dict[str, str]:
        """对外暴露的字段（不含提供商名）"""
        return {"id": self.id, "name": self.name, "description": self.description}
