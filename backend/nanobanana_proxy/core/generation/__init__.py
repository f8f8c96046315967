"""
图片生成模块
提供提供商适配器、响应归一化和模型注册表
"""

from .base import BaseImageProvider
from .exceptions import (
    GenerationError,
    UnrecognizedResponseShape,
    ProviderRequestError,
    ModelNotFoundError,
    ProviderNotInitializedError,
)
from .models import GenerationResult, ModelInfo, ResultKind
from .normalizer import normalize
from .registry import ModelRegistry, build_model_registry
from .providers.nano_banana import NanoBananaProvider

__all__ = [
    "BaseImageProvider",
    "GenerationError",
    "UnrecognizedResponseShape",
    "ProviderRequestError",
    "ModelNotFoundError",
    "ProviderNotInitializedError",
    "GenerationResult",
    "ModelInfo",
    "ResultKind",
    "normalize",
    "ModelRegistry",
    "build_model_registry",
    "NanoBananaProvider",
]
