"""
图片生成提供商实现
"""

from .nano_banana import NanoBananaProvider

__all__ = ["NanoBananaProvider"]
