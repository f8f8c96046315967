"""
提示词元数据数据模型
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

NO_PROMPT_FOUND = "No embedded prompt found."

# PNG 文本块键名
PNG_TEXT_PARAMETERS = "parameters"
PNG_TEXT_DESCRIPTION = "description"

# 容器格式（Pillow 格式名）
FORMAT_JPEG = "JPEG"
FORMAT_PNG = "PNG"


@dataclass(frozen=True)
class PromptMetadataBundle:
    """一次写入所需的全部元数据位置

    EXIF 中的 ImageDescription / XPComment / UserComment 三个字段写入同一提示词；
    PNG 额外写入 parameters 与 description 两个文本块
    """
    prompt: str
    image_format: str

    @property
    def text_entries(self) -> Dict[str, str]:
        if self.image_format != FORMAT_PNG:
            return {}
        return {
            PNG_TEXT_PARAMETERS: self.prompt,
            PNG_TEXT_DESCRIPTION: self.prompt,
        }


@dataclass(frozen=True)
class ExtractedPrompt:
    """从图片中读取的提示词

    Attributes:
        found: 是否找到提示词
        text: 提示词文本，未找到时为固定提示语
        source: 命中的元数据字段（调试用）
    """
    found: bool
    text: str
    source: Optional[str] = None

    @classmethod
    def not_found(cls) -> "ExtractedPrompt":
        return cls(found=False, text=NO_PROMPT_FOUND)


@dataclass(frozen=True)
class ImageInspection:
    """图片检查结果"""
    format: Optional[str]
    width: int
    height: int
    prompt: ExtractedPrompt = field(default_factory=ExtractedPrompt.not_found)

    def to_wire(self) -> Dict[str, object]:
        """序列化为 {format, width, height, prompt}，prompt 为文本或固定提示语"""
        return {
            "format": self.format,
            "width": self.width,
            "height": self.height,
            "prompt": self.prompt.text,
        }
