"""
测试工具包
提供统一的测试工具和辅助函数
"""

from .image_factory import TINY_PNG_BASE64, make_image_bytes, open_image
from .mock_utils import MockBuilder, StubProvider, build_stub_registry

__all__ = [
    'TINY_PNG_BASE64',
    'make_image_bytes',
    'open_image',
    'MockBuilder',
    'StubProvider',
    'build_stub_registry',
]
