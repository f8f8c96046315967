"""
存储适配器
"""

from .b2 import B2StorageAdapter

__all__ = ['B2StorageAdapter']
