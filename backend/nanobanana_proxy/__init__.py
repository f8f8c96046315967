"""
Nano Banana 图片生成代理
"""

__version__ = "1.0.0"
