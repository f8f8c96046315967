"""
图片生成提供商基类
定义所有提供商适配器的统一接口
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseImageProvider(ABC):
    """图片生成提供商基类

    适配器只负责网络调用并返回原始 JSON，归一化由 normalizer 统一完成
    """

    #: 注册到模型注册表时使用的提供商名称
    PROVIDER_NAME: str = ""

    @abstractmethod
    async def generate(
        self,
        model_id: str,
        prompt: str,
        options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        调用提供商生成图片

        Args:
            model_id: 模型ID
            prompt: 提示词
            options: 提供商特定参数（如 width、height）

        Returns:
            Dict[str, Any]: 提供商原始响应

        Raises:
            ProviderRequestError: 网络、鉴权、配额等请求错误
        """
        ...

    @abstractmethod
    def get_supported_models(self) -> List[str]:
        """
        获取支持的模型列表

        Returns:
            List[str]: 支持的模型ID列表
        """
        ...

    async def close(self) -> None:
        """释放提供商持有的资源"""
        return None
