"""
图片元数据业务处理器
- 下载：把提示词写入图片元数据后返回二进制
- 检查：读取上传图片的格式、尺寸和嵌入的提示词

Pillow 编解码是同步操作，放到线程池中执行
"""

import asyncio
import base64
import binascii
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, Optional, TypeVar

from fastapi import HTTPException, UploadFile, status

from nanobanana_proxy.core.log_messages import log_messages
from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.core.metadata import (
    ImageDecodingError,
    MetadataEncodingError,
    UnsupportedImageFormat,
    embed,
    inspect_image,
    resolve_image_format,
)
from nanobanana_proxy.core.metadata.models import FORMAT_JPEG
from nanobanana_proxy.schemas.image_metadata import DownloadRequest

logger = get_logger(__name__)

T = TypeVar("T")

DOWNLOAD_FILENAME_PREFIX = "nanobanana"


@dataclass(frozen=True)
class DownloadPayload:
    """下载响应内容"""
    content: bytes
    media_type: str
    filename: str

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


async def _run_in_executor(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """在线程池中运行同步函数"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))


def _decode_base64(image_data: str) -> bytes:
    # 兼容前端传入的 data URL
    if image_data.startswith("data:") and "," in image_data:
        image_data = image_data.split(",", 1)[1]
    # 按行折断的 base64 也接受
    return base64.b64decode("".join(image_data.split()), validate=True)


def download_filename(image_format: str, timestamp_ms: Optional[int] = None) -> str:
    """生成 nanobanana-{毫秒时间戳}.{jpg|png} 形式的文件名"""
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    extension = "jpg" if image_format == FORMAT_JPEG else "png"
    return f"{DOWNLOAD_FILENAME_PREFIX}-{timestamp_ms}.{extension}"


class ImageMetadataHandler:
    """图片元数据业务处理器"""

    def __init__(self, max_upload_size: int):
        self.max_upload_size = max_upload_size

    async def handle_download(self, request: DownloadRequest) -> DownloadPayload:
        """
        处理带提示词下载请求

        Raises:
            HTTPException: 缺少数据或数据非法(400)、格式不支持(415)、重新编码失败(422)
        """
        if not request.image_data or request.prompt is None or request.prompt == "":
            logger.warning(log_messages.DOWNLOAD_MISSING_DATA, operation="download_rejected")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Missing image data or prompt"
            )

        try:
            image_format = resolve_image_format(request.mime_type)
            image_bytes = _decode_base64(request.image_data)
        except UnsupportedImageFormat as e:
            logger.warning(
                log_messages.DOWNLOAD_FAILED,
                operation="download_unsupported_format",
                mime_type=request.mime_type
            )
            raise HTTPException(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, detail=e.message) from e
        except (binascii.Error, ValueError) as e:
            logger.warning(
                log_messages.DOWNLOAD_FAILED,
                operation="download_invalid_base64",
                error=str(e)
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid image data") from e

        try:
            output = await _run_in_executor(embed, image_bytes, request.prompt, request.mime_type)
        except MetadataEncodingError as e:
            logger.error(
                log_messages.DOWNLOAD_FAILED,
                operation="download_failed",
                mime_type=request.mime_type,
                exception=e
            )
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e

        payload = DownloadPayload(
            content=output,
            media_type=f"image/{image_format.lower()}",
            filename=download_filename(image_format),
        )
        logger.info(
            log_messages.DOWNLOAD_SUCCESS,
            operation="download_success",
            image_format=image_format,
            output_size=len(output),
            download_name=payload.filename
        )
        return payload

    async def handle_inspect(self, file: Optional[UploadFile]) -> Dict[str, Any]:
        """
        处理图片检查请求

        Raises:
            HTTPException: 未上传文件或无法解析(400)、文件过大(413)
        """
        if file is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image uploaded")

        # 多读一个字节用于判断是否超限
        data = await file.read(self.max_upload_size + 1)
        if not data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image uploaded")
        if len(data) > self.max_upload_size:
            logger.warning(
                log_messages.INSPECT_FAILED,
                operation="inspect_too_large",
                upload_name=file.filename,
                max_upload_size=self.max_upload_size
            )
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large, max {self.max_upload_size} bytes"
            )

        try:
            inspection = await _run_in_executor(inspect_image, data)
        except ImageDecodingError as e:
            logger.warning(
                log_messages.INSPECT_FAILED,
                operation="inspect_failed",
                upload_name=file.filename,
                error=e.message
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to inspect image") from e

        logger.info(
            log_messages.INSPECT_SUCCESS,
            operation="inspect_success",
            found=inspection.prompt.found,
            image_format=inspection.format,
            source=inspection.prompt.source
        )
        return inspection.to_wire()
