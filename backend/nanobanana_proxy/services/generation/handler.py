"""
图片生成业务处理器
校验请求、调用模型注册表生成图片、投递结果，并把领域异常映射为HTTP异常
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

from nanobanana_proxy.core.generation import GenerationError, ModelNotFoundError, ModelRegistry
from nanobanana_proxy.core.log_messages import log_messages
from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.schemas.generation import GenerateRequest
from nanobanana_proxy.services.delivery import DeliveryService

logger = get_logger(__name__)

GENERATION_FAILED = "Failed to generate image"


class GenerationHandler:
    """图片生成业务处理器"""

    def __init__(self, registry: ModelRegistry, delivery: Optional[DeliveryService] = None):
        self.registry = registry
        self.delivery = delivery

    def handle_list_models(self) -> List[Dict[str, str]]:
        """获取可用模型列表"""
        models = self.registry.get_models()
        logger.info(
            "获取可用模型列表",
            operation="list_models",
            model_count=len(models)
        )
        return models

    async def handle_generate(
        self,
        request: GenerateRequest,
        client_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        处理图片生成请求

        Args:
            request: 生成请求
            client_ip: 客户端IP（写入投递元数据）
            user_agent: 客户端 User-Agent

        Returns:
            Dict[str, Any]: {type, mimeType?, data, delivery}

        Raises:
            HTTPException: 参数缺失(400)、模型不存在(404)、生成失败(500)
        """
        req_id = uuid.uuid4().hex[:12]
        logger.info(
            log_messages.GENERATE_REQUEST,
            operation="generate_request",
            req_id=req_id,
            model=request.model,
            prompt_length=len(request.prompt) if request.prompt else 0,
            client_ip=client_ip
        )

        if not request.prompt:
            logger.warning(log_messages.GENERATE_MISSING_PROMPT, operation="generate_rejected", req_id=req_id)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")
        if not request.model:
            logger.warning(log_messages.GENERATE_MISSING_MODEL, operation="generate_rejected", req_id=req_id)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Model ID is required")

        options = {"width": request.width, "height": request.height}

        try:
            result = await self.registry.generate_image(request.model, request.prompt, options)
        except ModelNotFoundError as e:
            logger.warning(
                log_messages.GENERATE_FAILED,
                operation="generate_failed",
                req_id=req_id,
                model=request.model,
                error=e.message
            )
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": GENERATION_FAILED, "details": e.message}
            ) from e
        except GenerationError as e:
            logger.error(
                log_messages.GENERATE_FAILED,
                operation="generate_failed",
                req_id=req_id,
                model=request.model,
                error_code=e.code,
                exception=e
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": GENERATION_FAILED, "details": e.message}
            ) from e

        metadata = {
            "ip": client_ip,
            "userAgent": user_agent,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "model": request.model,
            "prompt": request.prompt,
        }

        delivery_report = {"b2": None, "webhook": None}
        if self.delivery is not None:
            delivery_report = (
                await self.delivery.process_delivery(result, request.prompt, metadata)
            ).to_dict()

        logger.info(
            log_messages.GENERATE_SUCCESS,
            operation="generate_success",
            req_id=req_id,
            model=request.model,
            result_type=result.kind.value,
            delivery=delivery_report
        )

        response = result.to_wire()
        response["delivery"] = delivery_report
        return response
