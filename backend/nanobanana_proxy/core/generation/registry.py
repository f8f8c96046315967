"""
模型注册表
管理提供商实例与可用模型，在应用启动时构建一次并通过 app.state 传递
"""

from typing import Any, Dict, List, Optional

from nanobanana_proxy.core.config import Settings
from nanobanana_proxy.core.log_utils import get_logger
from .base import BaseImageProvider
from .exceptions import ModelNotFoundError, ProviderNotInitializedError
from .models import GenerationResult, ModelInfo
from .normalizer import normalize
from .providers.nano_banana import NanoBananaProvider

logger = get_logger(__name__)


class ModelRegistry:
    """模型注册表：模型ID -> 模型描述 -> 提供商实例"""

    def __init__(self):
        self._providers: Dict[str, BaseImageProvider] = {}
        self._models: List[ModelInfo] = []

    def register_provider(self, provider_name: str, provider: BaseImageProvider) -> None:
        """
        注册提供商实例

        Args:
            provider_name: 提供商名称
            provider: 提供商实例
        """
        self._providers[provider_name] = provider
        logger.info(
            f"注册提供商: {provider_name}",
            operation="register_provider",
            provider=provider_name
        )

    def register_model(self, model: ModelInfo) -> None:
        """注册模型"""
        self._models.append(model)

    def get_models(self) -> List[Dict[str, str]]:
        """获取对外展示的模型列表"""
        return [model.public_view() for model in self._models]

    def get_model(self, model_id: str) -> Optional[ModelInfo]:
        """按ID查找模型"""
        return next((model for model in self._models if model.id == model_id), None)

    async def generate_image(
        self,
        model_id: str,
        prompt: str,
        options: Optional[Dict[str, Any]] = None
    ) -> GenerationResult:
        """
        使用指定模型生成图片并归一化结果

        Raises:
            ModelNotFoundError: 模型未注册
            ProviderNotInitializedError: 提供商未初始化
            ProviderRequestError: 提供商请求失败
            UnrecognizedResponseShape: 响应无法识别
        """
        model = self.get_model(model_id)
        if model is None:
            raise ModelNotFoundError(model_id)

        provider = self._providers.get(model.provider)
        if provider is None:
            raise ProviderNotInitializedError(model.provider)

        raw_response = await provider.generate(model_id, prompt, options or {})
        return normalize(model.provider, raw_response)

    async def close(self) -> None:
        """关闭所有提供商"""
        for provider in self._providers.values():
            await provider.close()


def build_model_registry(settings: Settings) -> ModelRegistry:
    """
    根据配置构建模型注册表

    未配置 API 密钥时不注册任何模型
    """
    registry = ModelRegistry()

    if not settings.nanobanana_api_key:
        logger.warning(
            "NANOBANANA_API_KEY 未配置，Nano Banana 模型不可用",
            operation="registry_provider_missing_key",
            provider=NanoBananaProvider.PROVIDER_NAME
        )
        return registry

    registry.register_provider(
        NanoBananaProvider.PROVIDER_NAME,
        NanoBananaProvider(
            api_key=settings.nanobanana_api_key,
            base_url=settings.nanobanana_base_url,
            timeout=settings.nanobanana_timeout,
        )
    )

    for model in [
        ModelInfo(
            id="gemini-2.5-flash-image",
            name="Gemini Flash Image",
            provider=NanoBananaProvider.PROVIDER_NAME,
            description="Fast generation with Gemini 2.5 Flash"
        ),
        ModelInfo(
            id="gemini-3-pro-image-preview",
            name="Gemini Pro Image (Preview)",
            provider=NanoBananaProvider.PROVIDER_NAME,
            description="High quality with Gemini 3 Pro"
        ),
        ModelInfo(
            id="imagen-4.0-fast-generate-001",
            name="Imagen 4 Fast",
            provider=NanoBananaProvider.PROVIDER_NAME,
            description="Ultra fast Imagen 4 generation"
        ),
        ModelInfo(
            id="imagen-4.0-generate-001",
            name="Imagen 4 Standard",
            provider=NanoBananaProvider.PROVIDER_NAME,
            description="Standard quality Imagen 4"
        ),
    ]:
        registry.register_model(model)

    logger.info(
        "模型注册完成",
        operation="register_models_complete",
        model_count=len(registry.get_models())
    )
    return registry
