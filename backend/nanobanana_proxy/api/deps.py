"""
API依赖项
访问密钥校验与处理器构建，运行时对象从 app.state 获取
"""

import secrets

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from nanobanana_proxy.core.config import Settings
from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.services.generation import GenerationHandler
from nanobanana_proxy.services.image_metadata import ImageMetadataHandler

logger = get_logger(__name__)

SITE_ACCESS_KEY_HEADER = "x-site-access-key"

site_access_key_header = APIKeyHeader(name=SITE_ACCESS_KEY_HEADER, auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """获取应用启动时注入的配置"""
    return request.app.state.settings


def verify_access_key(
    request: Request,
    access_key: str = Security(site_access_key_header),
) -> None:
    """
    校验站点访问密钥

    Raises:
        HTTPException: 密钥缺失或不匹配(403)
    """
    expected = get_app_settings(request).site_access_key
    if not access_key or not secrets.compare_digest(access_key, expected):
        logger.warning(
            "站点访问密钥校验失败",
            operation="access_key_rejected",
            path=request.url.path,
            client_ip=request.client.host if request.client else None
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid Site Access Key")


def get_generation_handler(request: Request) -> GenerationHandler:
    state = request.app.state
    return GenerationHandler(registry=state.registry, delivery=state.delivery)


def get_image_metadata_handler(request: Request) -> ImageMetadataHandler:
    return ImageMetadataHandler(max_upload_size=get_app_settings(request).max_upload_size)
