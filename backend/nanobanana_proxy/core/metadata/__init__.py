"""
提示词元数据模块
提供提示词写入（embed）与读取（extract / inspect_image）
"""

from .codec import embed, extract, inspect_image, normalize_prompt, resolve_image_format
from .exceptions import (
    MetadataCodecError,
    UnsupportedImageFormat,
    MetadataEncodingError,
    ImageDecodingError,
)
from .models import NO_PROMPT_FOUND, ExtractedPrompt, ImageInspection, PromptMetadataBundle

__all__ = [
    "embed",
    "extract",
    "inspect_image",
    "normalize_prompt",
    "resolve_image_format",
    "MetadataCodecError",
    "UnsupportedImageFormat",
    "MetadataEncodingError",
    "ImageDecodingError",
    "NO_PROMPT_FOUND",
    "ExtractedPrompt",
    "ImageInspection",
    "PromptMetadataBundle",
]
