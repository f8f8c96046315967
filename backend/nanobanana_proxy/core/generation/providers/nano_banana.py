"""
Nano Banana 图片生成提供商
通过 Google Generative Language REST API 调用 Gemini 图片模型与 Imagen 模型

- Gemini 图片模型使用 :generateContent（对话/内容式响应）
- Imagen 模型使用 :predict（预测式响应）
"""

from math import gcd
from typing import Optional, List, Dict, Any

import httpx

from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.core.generation.base import BaseImageProvider
from nanobanana_proxy.core.generation.exceptions import (
    ProviderRequestError,
    UnrecognizedResponseShape,
)

logger = get_logger(__name__)


class NanoBananaProvider(BaseImageProvider):
    """Nano Banana (Google Gemini / Imagen) 图片生成提供商"""

    PROVIDER_NAME = "nanobanana"

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
    DEFAULT_TIMEOUT = 120

    SUPPORTED_MODELS = [
        "gemini-2.5-flash-image",
        "gemini-3-pro-image-preview",
        "imagen-4.0-fast-generate-001",
        "imagen-4.0-generate-001",
    ]

    # 两种接口共同支持的比例
    SUPPORTED_ASPECT_RATIOS = ["1:1", "3:4", "4:3", "9:16", "16:9"]

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        """
        初始化Nano Banana提供商

        Args:
            api_key: Google API密钥
            base_url: API基础URL（可选，用于代理）
            timeout: 请求超时时间（秒）
        """
        if not api_key:
            raise ValueError("Nano Banana API密钥未配置")

        self.api_key = api_key
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._client: Optional[httpx.AsyncClient] = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """确保httpx客户端存在"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """关闭客户端"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def is_prediction_model(model_id: str) -> bool:
        """Imagen 系列走 predict 接口"""
        return model_id.startswith("imagen")

    def _aspect_ratio(self, options: Dict[str, Any]) -> Optional[str]:
        """根据宽高推导比例，无法匹配时返回 None"""
        try:
            width = int(options.get("width") or 0)
            height = int(options.get("height") or 0)
        except (TypeError, ValueError):
            return None
        if width <= 0 or height <= 0:
            return None
        divisor = gcd(width, height)
        ratio = f"{width // divisor}:{height // divisor}"
        return ratio if ratio in self.SUPPORTED_ASPECT_RATIOS else None

    def _build_request(self, model_id: str, prompt: str, options: Dict[str, Any]) -> tuple:
        """构建请求 URL 和负载"""
        aspect_ratio = self._aspect_ratio(options)

        if self.is_prediction_model(model_id):
            parameters: Dict[str, Any] = {"sampleCount": 1}
            if aspect_ratio:
                parameters["aspectRatio"] = aspect_ratio
            return (
                f"{self.base_url}/{model_id}:predict",
                {"instances": [{"prompt": prompt}], "parameters": parameters},
            )

        generation_config: Dict[str, Any] = {}
        if aspect_ratio:
            generation_config["imageConfig"] = {"aspectRatio": aspect_ratio}
        return (
            f"{self.base_url}/{model_id}:generateContent",
            {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": generation_config,
            },
        )

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> str:
        """提取提供商返回的错误详情"""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return response.text or f"HTTP {response.status_code}"

    async def generate(
        self,
        model_id: str,
        prompt: str,
        options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """调用 Google API 并返回原始响应"""
        options = options or {}
        url, payload = self._build_request(model_id, prompt, options)

        logger.info(
            "调用Nano Banana API生成图片",
            operation="api_call_start",
            model=model_id,
            prompt_length=len(prompt),
            endpoint=url.rsplit(":", 1)[-1]
        )

        client = self._ensure_client()
        try:
            response = await client.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = self._extract_error_detail(e.response)
            logger.error(
                "Nano Banana API返回错误状态",
                operation="api_call_status_error",
                model=model_id,
                status_code=e.response.status_code,
                detail=detail
            )
            raise ProviderRequestError(
                f"Nanobanana API Error: {detail}",
                status_code=e.response.status_code,
                details={"model": model_id, "provider_detail": detail}
            ) from e
        except httpx.RequestError as e:
            logger.error(
                "Nano Banana API网络错误",
                operation="api_call_network_error",
                model=model_id,
                exception=e
            )
            raise ProviderRequestError(
                f"Nanobanana API Error: {e}",
                details={"model": model_id}
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise UnrecognizedResponseShape(
                f"Unknown response format from {self.PROVIDER_NAME}",
                details={"model": model_id, "reason": "响应不是合法的JSON"}
            ) from e

    def get_supported_models(self) -> List[str]:
        """获取支持的模型列表"""
        return self.SUPPORTED_MODELS.copy()
