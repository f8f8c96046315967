"""
存储服务模块
提供统一的存储服务访问接口，生成结果投递时使用
"""

from typing import Optional

from nanobanana_proxy.core.config import Settings, settings as default_settings
from nanobanana_proxy.core.storage.adapters.b2 import B2StorageAdapter
from nanobanana_proxy.core.storage.base_storage import BaseStorage, UploadResult
from nanobanana_proxy.core.storage.exceptions import ConfigurationError, StorageError, UploadError
from nanobanana_proxy.core.storage.factory import (
    create_adapter,
    get_adapter_class,
    list_available_adapters,
    register_adapter,
)

# 自动注册B2适配器
register_adapter(B2StorageAdapter.ADAPTER_NAME, B2StorageAdapter)


def get_storage_service(
    adapter_name: Optional[str] = None,
    config: Optional[Settings] = None
) -> Optional[BaseStorage]:
    """
    获取存储服务实例

    Args:
        adapter_name: 适配器名称，不指定则按配置自动检测
        config: 应用配置

    Returns:
        Optional[BaseStorage]: 存储服务实例，未配置任何存储时返回 None
    """
    config = config or default_settings
    if adapter_name is None:
        if not config.b2_enabled:
            return None
        adapter_name = B2StorageAdapter.ADAPTER_NAME

    return create_adapter(adapter_name, config)


__all__ = [
    'get_storage_service',
    'create_adapter',
    'get_adapter_class',
    'list_available_adapters',
    'register_adapter',
    'BaseStorage',
    'UploadResult',
    'B2StorageAdapter',
    'StorageError',
    'ConfigurationError',
    'UploadError',
]
