"""
API路由聚合模块

路由管理规范：
1. 所有路由文件内部使用相对路径（不以/开头）
2. 所有前缀统一在router.py中管理
"""

from fastapi import APIRouter

from nanobanana_proxy.api.endpoints import generation, image_metadata, models

api_router = APIRouter()

# ==================== 模型与生成 ====================
api_router.include_router(models.router, prefix="/models")
api_router.include_router(generation.router, prefix="/generate")

# ==================== 图片元数据 ====================
api_router.include_router(image_metadata.router)
