"""
图片生成API端点
采用薄路由、重服务的架构设计，业务逻辑由 GenerationHandler 处理
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from nanobanana_proxy.api.deps import get_generation_handler, verify_access_key
from nanobanana_proxy.schemas.generation import GenerateRequest
from nanobanana_proxy.services.generation import GenerationHandler

router = APIRouter(tags=["图片生成"], dependencies=[Depends(verify_access_key)])


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


@router.post(
    "",
    summary="生成图片",
    description="使用指定模型生成图片，返回 {type, mimeType?, data, delivery}"
)
async def generate_image(
    body: GenerateRequest,
    request: Request,
    handler: GenerationHandler = Depends(get_generation_handler)
) -> Dict[str, Any]:
    """
    生成图片

    功能流程：
    1. 校验提示词与模型ID
    2. 调用提供商并归一化响应
    3. 投递到 B2 / 自定义服务器（失败不影响响应）
    """
    return await handler.handle_generate(
        body,
        client_ip=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
