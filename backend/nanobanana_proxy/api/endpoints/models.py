"""
模型列表API端点
"""

from typing import List

from fastapi import APIRouter, Depends

from nanobanana_proxy.api.deps import get_generation_handler, verify_access_key
from nanobanana_proxy.schemas.generation import ModelInfoResponse
from nanobanana_proxy.services.generation import GenerationHandler

router = APIRouter(tags=["模型"], dependencies=[Depends(verify_access_key)])


@router.get(
    "",
    response_model=List[ModelInfoResponse],
    summary="获取可用模型列表",
    description="返回已注册的图片生成模型（id、name、description）"
)
async def list_models(
    handler: GenerationHandler = Depends(get_generation_handler)
) -> List[ModelInfoResponse]:
    return handler.handle_list_models()
